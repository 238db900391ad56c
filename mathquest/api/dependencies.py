# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""FastAPI dependencies.

Services are created once in the application lifespan and stored on
``app.state``; these dependencies hand them to route handlers.
"""

from fastapi import Request

from mathquest.core.config import Settings
from mathquest.domains.sessions import LearnerSessionService


def get_app_settings(request: Request) -> Settings:
    """Get the settings the application was created with."""
    return request.app.state.settings


def get_session_service(request: Request) -> LearnerSessionService:
    """Get the learner session service.

    Raises:
        RuntimeError: If the application lifespan has not run.
    """
    service = getattr(request.app.state, "session_service", None)
    if service is None:
        raise RuntimeError("Session service not initialized. Is the lifespan running?")
    return service
