# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Learner session API endpoints.

This module exposes one ProgressionEngine per learner session:
- POST / - Start a learner session
- GET /{session_id} - Progress snapshot
- DELETE /{session_id} - End a session
- POST /{session_id}/answers - Record an answer
- GET /{session_id}/difficulty - Current tier and recommendation
- POST /{session_id}/difficulty - Apply a tier
- POST /{session_id}/lessons/{chapter_id} - Complete a lesson
- POST /{session_id}/activities - Complete an activity
- POST /{session_id}/mastery-quiz - Record a mastery quiz
- POST /{session_id}/streak - Count a day toward the streak
- POST /{session_id}/score - Forward the session score summary

Handlers are plain functions: the progress sink makes blocking HTTP calls,
so FastAPI runs them in its threadpool.

Example:
    POST /api/v1/sessions/{session_id}/answers
    {
        "concept": "fractions",
        "answer": "3/4",
        "correct_answer": "3/4"
    }
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from mathquest.api.dependencies import get_session_service
from mathquest.core.progression import ProgressionEngine, ProgressionError
from mathquest.domains.sessions import LearnerSessionService, SessionNotFoundError
from mathquest.domains.sessions.schemas import (
    ActivityRequest,
    ActivityResponse,
    AnswerRequest,
    AnswerResponse,
    ApplyDifficultyRequest,
    CreateSessionRequest,
    DifficultyResponse,
    MasteryQuizRequest,
    MasteryQuizResponse,
    ScoreRequest,
    ScoreResponse,
    SessionResponse,
    StateResponse,
    StreakRequest,
)
from mathquest.utils.logging import bind_context

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_engine(service: LearnerSessionService, session_id: str) -> ProgressionEngine:
    """Look up a session's engine, raising 404 if it does not exist."""
    bind_context(session_id=session_id)
    try:
        return service.get_engine(session_id)
    except SessionNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e),
        ) from e


def _unprocessable(e: ProgressionError) -> HTTPException:
    logger.info("Rejected progression input: %s", e.message)
    return HTTPException(
        status_code=422,
        detail={"message": e.message, **e.details},
    )


@router.post(
    "",
    response_model=SessionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Start a learner session",
)
def create_session(
    data: CreateSessionRequest | None = None,
    service: LearnerSessionService = Depends(get_session_service),
) -> SessionResponse:
    """Start a learner session with a fresh learner state."""
    tier = data.difficulty_tier if data else None
    session_id, engine = service.create_session(difficulty_tier=tier)
    return SessionResponse(session_id=session_id, progress=engine.snapshot())


@router.get(
    "/{session_id}",
    response_model=SessionResponse,
    summary="Get session progress",
)
def get_session(
    session_id: str,
    service: LearnerSessionService = Depends(get_session_service),
) -> SessionResponse:
    """Get the learner's progress snapshot."""
    engine = _get_engine(service, session_id)
    return SessionResponse(session_id=session_id, progress=engine.snapshot())


@router.delete(
    "/{session_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="End a learner session",
)
def end_session(
    session_id: str,
    service: LearnerSessionService = Depends(get_session_service),
) -> None:
    bind_context(session_id=session_id)
    try:
        service.end_session(session_id)
    except SessionNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e


@router.post(
    "/{session_id}/answers",
    response_model=AnswerResponse,
    summary="Record an answer",
)
def record_answer(
    session_id: str,
    data: AnswerRequest,
    service: LearnerSessionService = Depends(get_session_service),
) -> AnswerResponse:
    """Record an answer and return its points, badges and tier recommendation.

    When ``correct`` is omitted the answer is checked against
    ``correct_answer`` ignoring case and surrounding whitespace.
    """
    engine = _get_engine(service, session_id)
    try:
        if data.correct is not None:
            result = engine.record_answer(
                data.concept,
                data.correct,
                question=data.question,
                answer=data.answer or "",
            )
        else:
            result = engine.submit_answer(
                data.concept,
                data.answer or "",
                data.correct_answer or "",
                question=data.question,
            )
    except ProgressionError as e:
        raise _unprocessable(e) from e

    return AnswerResponse(
        session_id=session_id,
        correct=result.event.correct,
        points_earned=result.points_earned,
        badges=result.badges,
        adjustment=result.adjustment,
        state=engine.state,
    )


@router.get(
    "/{session_id}/difficulty",
    response_model=DifficultyResponse,
    summary="Get difficulty recommendation",
)
def get_difficulty(
    session_id: str,
    service: LearnerSessionService = Depends(get_session_service),
) -> DifficultyResponse:
    engine = _get_engine(service, session_id)
    tier = engine.state.difficulty_tier
    return DifficultyResponse(
        session_id=session_id,
        current_level=tier,
        learning_level=tier.learning_level,
        adjustment=engine.evaluate_difficulty(),
    )


@router.post(
    "/{session_id}/difficulty",
    response_model=StateResponse,
    summary="Apply a difficulty tier",
)
def apply_difficulty(
    session_id: str,
    data: ApplyDifficultyRequest,
    service: LearnerSessionService = Depends(get_session_service),
) -> StateResponse:
    """Switch the learner to a tier, usually after a recommendation."""
    engine = _get_engine(service, session_id)
    state = engine.apply_difficulty(data.level)
    return StateResponse(session_id=session_id, state=state)


@router.post(
    "/{session_id}/lessons/{chapter_id}",
    response_model=StateResponse,
    summary="Complete a lesson",
)
def complete_lesson(
    session_id: str,
    chapter_id: str,
    service: LearnerSessionService = Depends(get_session_service),
) -> StateResponse:
    engine = _get_engine(service, session_id)
    try:
        state = engine.complete_lesson(chapter_id)
    except ProgressionError as e:
        raise _unprocessable(e) from e
    return StateResponse(session_id=session_id, state=state)


@router.post(
    "/{session_id}/activities",
    response_model=ActivityResponse,
    summary="Complete an activity",
)
def complete_activity(
    session_id: str,
    data: ActivityRequest,
    service: LearnerSessionService = Depends(get_session_service),
) -> ActivityResponse:
    engine = _get_engine(service, session_id)
    try:
        outcome = engine.complete_activity(data.chapter_id, data.activity_id, data.score)
    except ProgressionError as e:
        raise _unprocessable(e) from e
    return ActivityResponse(
        session_id=session_id,
        state=outcome.state,
        newly_completed=outcome.newly_completed,
    )


@router.post(
    "/{session_id}/mastery-quiz",
    response_model=MasteryQuizResponse,
    summary="Record a mastery quiz",
)
def record_mastery_quiz(
    session_id: str,
    data: MasteryQuizRequest,
    service: LearnerSessionService = Depends(get_session_service),
) -> MasteryQuizResponse:
    """Record a mastery quiz; a passing score unlocks the next chapter."""
    engine = _get_engine(service, session_id)
    try:
        outcome = engine.record_mastery_quiz(data.chapter_id, data.percentage_score)
    except ProgressionError as e:
        raise _unprocessable(e) from e
    return MasteryQuizResponse(
        session_id=session_id,
        state=outcome.state,
        passed=outcome.passed,
        unlocked_chapter=outcome.unlocked_chapter,
    )


@router.post(
    "/{session_id}/streak",
    response_model=StateResponse,
    summary="Update the daily streak",
)
def update_streak(
    session_id: str,
    data: StreakRequest | None = None,
    service: LearnerSessionService = Depends(get_session_service),
) -> StateResponse:
    engine = _get_engine(service, session_id)
    update = engine.update_streak(data.today if data else None)
    return StateResponse(session_id=session_id, state=update.state)


@router.post(
    "/{session_id}/score",
    response_model=ScoreResponse,
    summary="Save the session score",
)
def save_score(
    session_id: str,
    data: ScoreRequest,
    service: LearnerSessionService = Depends(get_session_service),
) -> ScoreResponse:
    """Forward the session score summary to the progress backend."""
    engine = _get_engine(service, session_id)
    saved = engine.save_score(
        time_spent=data.time_spent,
        assessment_score=data.assessment_score,
    )
    return ScoreResponse(session_id=session_id, saved=saved)
