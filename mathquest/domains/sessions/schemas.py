# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Request and response models for the learner session API.

Difficulty tiers are accepted in either vocabulary ("medium" or
"intermediate").
"""

from datetime import date
from typing import Annotated, Any, Literal, Self

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from mathquest.core.progression import (
    Badge,
    DifficultyTier,
    LearnerState,
    LevelAdjustment,
    ProgressSnapshot,
)
from mathquest.domains.questions import Question


def _parse_tier(value: Any) -> Any:
    if value is None or isinstance(value, DifficultyTier):
        return value
    try:
        return DifficultyTier.parse(value)
    except ValueError:
        # Left for pydantic's enum validation to report
        return value


TierInput = Annotated[DifficultyTier, BeforeValidator(_parse_tier)]


# =============================================================================
# Sessions
# =============================================================================


class CreateSessionRequest(BaseModel):
    """Request to start a learner session."""

    difficulty_tier: TierInput | None = Field(
        default=None,
        description="Starting tier; the configured default when omitted",
    )


class SessionResponse(BaseModel):
    """Learner session with its progress snapshot."""

    session_id: str
    progress: ProgressSnapshot


class StateResponse(BaseModel):
    """Learner state after a milestone."""

    session_id: str
    state: LearnerState


# =============================================================================
# Answers and difficulty
# =============================================================================


class AnswerRequest(BaseModel):
    """An answer to record.

    Either ``correct`` is given, or ``answer`` and ``correct_answer`` are
    both given and compared.
    """

    concept: str = Field(min_length=1, description="Concept, chapter or activity id")
    answer: str | None = None
    correct_answer: str | None = None
    correct: bool | None = None
    question: str | None = Field(default=None, description="Question text to persist")

    @model_validator(mode="after")
    def validate_outcome(self) -> Self:
        """Ensure the outcome can be determined."""
        if self.correct is None and (self.answer is None or self.correct_answer is None):
            raise ValueError("Provide either 'correct' or both 'answer' and 'correct_answer'")
        return self


class AnswerResponse(BaseModel):
    """Outcome of a recorded answer."""

    session_id: str
    correct: bool
    points_earned: int
    badges: list[Badge] = Field(default_factory=list)
    adjustment: LevelAdjustment
    state: LearnerState


class DifficultyResponse(BaseModel):
    """Current tier and the adjuster's recommendation."""

    session_id: str
    current_level: DifficultyTier
    learning_level: str
    adjustment: LevelAdjustment


class ApplyDifficultyRequest(BaseModel):
    """Tier to switch to."""

    level: TierInput


# =============================================================================
# Curriculum milestones
# =============================================================================


class ActivityRequest(BaseModel):
    """A completed activity."""

    chapter_id: str = Field(min_length=1)
    activity_id: str = Field(min_length=1)
    score: int | None = Field(default=None, description="Activity score, 0-100")


class ActivityResponse(StateResponse):
    newly_completed: bool


class MasteryQuizRequest(BaseModel):
    """A mastery quiz result."""

    chapter_id: str = Field(min_length=1)
    percentage_score: int = Field(description="Quiz score, 0-100")


class MasteryQuizResponse(StateResponse):
    passed: bool
    unlocked_chapter: str | None = None


class StreakRequest(BaseModel):
    """Day to count toward the streak; the server's today when omitted."""

    today: date | None = None


class ScoreRequest(BaseModel):
    """Session score summary to forward to the progress backend."""

    time_spent: int = Field(default=0, ge=0, description="Seconds spent")
    assessment_score: float | None = Field(default=None, ge=0.0, le=100.0)


class ScoreResponse(BaseModel):
    session_id: str
    saved: bool


# =============================================================================
# Stateless helpers
# =============================================================================


class PerformanceEntry(BaseModel):
    """One answer outcome; accepts ``isCorrect`` as sent by the web client."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    is_correct: bool


class AdaptLevelRequest(BaseModel):
    """Recent performance to base a tier recommendation on."""

    current_level: TierInput
    performance: list[PerformanceEntry] = Field(default_factory=list)


class AdaptLevelResponse(BaseModel):
    """Tier recommendation."""

    new_level: DifficultyTier
    recommendation: Literal["advance", "review", "continue"]
    accuracy: int
    should_change: bool
    message: str | None = None


class QuestionRequest(BaseModel):
    """Request for a practice question."""

    level: TierInput
    previous_performance: list[bool] | None = None


class QuestionResponse(BaseModel):
    question: Question
