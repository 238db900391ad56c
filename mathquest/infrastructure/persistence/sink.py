# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Progress sink protocol and payload models.

A progress sink receives answered questions, earned badges and score
summaries for a learner session. Sinks are fire-and-forget: they report
failure through their return value and never raise for transport or
backend errors.
"""

import logging
from typing import Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

logger = logging.getLogger(__name__)


class _CamelModel(BaseModel):
    """Model serialized with camelCase keys for the progress backend."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class ProgressRecord(_CamelModel):
    """One answered question.

    Attributes:
        level: Question level, 1 for easy and 2 above easy.
        question_number: 1-based position of the question in the session.
        question: Question text or concept.
        answer: Learner's answer as given.
        is_correct: Whether the answer was correct.
        points_earned: Question points for this answer.
    """

    level: int = Field(ge=1)
    question_number: int = Field(ge=1)
    question: str
    answer: str = ""
    is_correct: bool
    points_earned: int = Field(default=0, ge=0)


class ScoreReport(_CamelModel):
    """Session score summary.

    Serialized as ``totalPoints``, ``level1Score``, ``level2Score``,
    ``assessmentScore`` and ``timeSpent``.
    """

    total_points: int = Field(default=0, ge=0)
    level1_score: float = Field(default=0.0, ge=0.0, le=100.0, alias="level1Score")
    level2_score: float = Field(default=0.0, ge=0.0, le=100.0, alias="level2Score")
    assessment_score: float | None = Field(default=None, ge=0.0, le=100.0)
    time_spent: int = Field(default=0, ge=0)


@runtime_checkable
class ProgressSink(Protocol):
    """Receiver of learner progress."""

    def create_session(self) -> str | None:
        """Register a session; returns its id, or None on failure."""
        ...

    def save_progress(self, session_id: str, record: ProgressRecord) -> bool:
        """Store one answered question."""
        ...

    def save_badge(self, session_id: str, badge_name: str, badge_type: str) -> bool:
        """Store an earned badge."""
        ...

    def save_score(self, session_id: str, report: ScoreReport) -> bool:
        """Store or replace the session's score summary."""
        ...


class NullProgressSink:
    """Sink that drops everything; used when persistence is disabled."""

    def create_session(self) -> str | None:
        return None

    def save_progress(self, session_id: str, record: ProgressRecord) -> bool:
        logger.debug("Progress not persisted: session=%s", session_id)
        return True

    def save_badge(self, session_id: str, badge_name: str, badge_type: str) -> bool:
        return True

    def save_score(self, session_id: str, report: ScoreReport) -> bool:
        return True
