# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Learner session domain: in-memory session registry and API schemas."""

from mathquest.domains.sessions.service import (
    LearnerSessionService,
    SessionNotFoundError,
    SessionServiceError,
    generate_session_id,
)

__all__ = [
    "LearnerSessionService",
    "SessionNotFoundError",
    "SessionServiceError",
    "generate_session_id",
]
