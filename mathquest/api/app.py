# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""FastAPI Application Factory.

This module provides the main application factory for the MathQuest
progression API.
"""

import logging
from collections.abc import Awaitable, Callable
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware

from mathquest.api.routes import health
from mathquest.api.v1 import router as v1_router
from mathquest.core.config import Settings, get_settings
from mathquest.core.progression import load_curriculum
from mathquest.domains.sessions import LearnerSessionService
from mathquest.infrastructure.events import EventBus
from mathquest.infrastructure.persistence import create_progress_sink
from mathquest.utils.logging import clear_context, setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Builds the curriculum, progress sink, event bus and session service on
    startup and closes the sink on shutdown.

    Args:
        app: The FastAPI application instance.

    Yields:
        None during application runtime.
    """
    settings: Settings = app.state.settings
    setup_logging(settings)
    logger.info(
        "Starting MathQuest API (environment=%s, debug=%s)",
        settings.environment,
        settings.debug,
    )

    # =========================================================================
    # Startup
    # =========================================================================

    curriculum = load_curriculum(settings.progression.curriculum_path)
    logger.info("Curriculum loaded: %d chapters", len(curriculum))

    sink = create_progress_sink(settings.persistence)
    if settings.persistence.enabled:
        logger.info("Progress persistence enabled: %s", settings.persistence.base_url)

    app.state.session_service = LearnerSessionService(
        settings,
        curriculum,
        bus=EventBus(),
        sink=sink,
    )

    yield

    # =========================================================================
    # Shutdown
    # =========================================================================

    try:
        app.state.session_service.close()
        logger.info("Session service closed")
    except Exception as e:
        logger.warning("Error closing session service: %s", str(e))

    logger.info("Shutting down MathQuest API")


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Settings to use; the cached environment settings otherwise.

    Returns:
        Configured FastAPI application instance.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.api.title,
        description="Learner progression for the MathQuest math game",
        version=settings.api.version,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        openapi_url="/openapi.json" if settings.debug else None,
        lifespan=lifespan,
    )

    # =========================================================================
    # State
    # =========================================================================
    app.state.settings = settings

    # =========================================================================
    # Middleware (order matters - last added is first executed)
    # =========================================================================

    @app.middleware("http")
    async def clear_log_context(
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        """Drop context bound while handling the previous request."""
        clear_context()
        return await call_next(request)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors.origins_list,
        allow_credentials=settings.cors.allow_credentials,
        allow_methods=settings.cors.allow_methods,
        allow_headers=settings.cors.allow_headers,
    )

    # =========================================================================
    # Routes
    # =========================================================================
    app.include_router(health.router, tags=["Health"])
    app.include_router(v1_router)

    return app
