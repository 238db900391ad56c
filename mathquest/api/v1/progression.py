# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Stateless progression endpoints.

- POST /adapt-level - Tier recommendation from a list of answer outcomes
- POST /questions - Practice question for a tier
"""

import logging

from fastapi import APIRouter, Depends

from mathquest.api.dependencies import get_session_service
from mathquest.domains.sessions import LearnerSessionService
from mathquest.domains.sessions.schemas import (
    AdaptLevelRequest,
    AdaptLevelResponse,
    QuestionRequest,
    QuestionResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/adapt-level",
    response_model=AdaptLevelResponse,
    summary="Recommend a difficulty tier",
)
async def adapt_level(
    data: AdaptLevelRequest,
    service: LearnerSessionService = Depends(get_session_service),
) -> AdaptLevelResponse:
    """Recommend a tier from overall accuracy over ``performance``.

    Fewer answers than the configured minimum always yield "continue".
    """
    adjustment = service.recommend_level(
        data.current_level,
        [entry.is_correct for entry in data.performance],
    )
    logger.debug(
        "Level recommendation: %s -> %s (%.1f%% over %d answers)",
        data.current_level.value,
        adjustment.new_level.value,
        adjustment.accuracy,
        adjustment.sample_size,
    )
    return AdaptLevelResponse(
        new_level=adjustment.new_level,
        recommendation=adjustment.recommendation,
        accuracy=round(adjustment.accuracy),
        should_change=adjustment.should_change,
        message=adjustment.message,
    )


@router.post(
    "/questions",
    response_model=QuestionResponse,
    summary="Get a practice question",
)
async def get_question(
    data: QuestionRequest,
    service: LearnerSessionService = Depends(get_session_service),
) -> QuestionResponse:
    question = service.next_question(data.level, data.previous_performance)
    return QuestionResponse(question=question)
