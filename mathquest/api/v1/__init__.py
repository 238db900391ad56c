# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""API v1 routes package.

Modules:
    sessions: Learner session endpoints (answers, difficulty, milestones).
    progression: Stateless endpoints (level recommendation, questions).
"""

from fastapi import APIRouter

from mathquest.api.v1 import progression, sessions

# Create the main v1 router
router = APIRouter(prefix="/api/v1")

# Include domain routers
router.include_router(sessions.router, prefix="/sessions", tags=["Sessions"])
router.include_router(progression.router, tags=["Progression"])

__all__ = ["router"]
