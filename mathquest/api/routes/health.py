# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Health check endpoint."""

import time
from datetime import datetime

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from mathquest.api.dependencies import get_app_settings, get_session_service
from mathquest.core.config import Settings
from mathquest.domains.sessions import LearnerSessionService
from mathquest.utils.datetime import utc_now

router = APIRouter()

# Track server start time for uptime calculation
_server_start_time = time.time()


class HealthResponse(BaseModel):
    """Health check response model."""
    status: str = Field(description="Overall health status")
    timestamp: datetime = Field(description="Current server timestamp")
    version: str = Field(description="API version")
    environment: str = Field(description="Deployment environment")
    uptime_seconds: int = Field(description="Server uptime in seconds")
    active_sessions: int = Field(description="Learner sessions held in memory")
    persistence_enabled: bool = Field(description="Whether progress is forwarded")


@router.get("/health", response_model=HealthResponse)
async def health_check(
    settings: Settings = Depends(get_app_settings),
    service: LearnerSessionService = Depends(get_session_service),
) -> HealthResponse:
    """Report liveness and basic runtime figures."""
    return HealthResponse(
        status="healthy",
        timestamp=utc_now(),
        version=settings.api.version,
        environment=settings.environment,
        uptime_seconds=int(time.time() - _server_start_time),
        active_sessions=len(service.session_ids()),
        persistence_enabled=settings.persistence.enabled,
    )
