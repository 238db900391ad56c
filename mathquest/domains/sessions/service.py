# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Learner session service.

Keeps one ProgressionEngine per learner session in process memory. Each
session has a single writer; handlers for the same session are not
expected to run concurrently.

Example:
    >>> service = LearnerSessionService(settings, curriculum)
    >>> session_id, engine = service.create_session()
    >>> engine.record_answer("fractions", correct=True)
"""

import logging
import random
import string
from collections.abc import Sequence

from mathquest.core.config.settings import Settings
from mathquest.core.progression import (
    Curriculum,
    DifficultyAdjuster,
    DifficultyThresholds,
    DifficultyTier,
    LevelAdjustment,
    ProgressionEngine,
    overall_accuracy,
)
from mathquest.core.progression.models import AnswerEvent
from mathquest.domains.questions import FallbackQuestionBank, Question, QuestionSource
from mathquest.infrastructure.events import EventBus
from mathquest.infrastructure.persistence import NullProgressSink, ProgressSink
from mathquest.utils.datetime import utc_now

logger = logging.getLogger(__name__)

_SESSION_ID_ALPHABET = string.digits + string.ascii_lowercase


class SessionServiceError(Exception):
    """Base exception for session service errors."""

    pass


class SessionNotFoundError(SessionServiceError):
    """Raised when a session id is unknown."""

    def __init__(self, session_id: str) -> None:
        self.session_id = session_id
        super().__init__(f"Session not found: {session_id}")


def generate_session_id(rng: random.Random | None = None) -> str:
    """Generate an id like ``session_1718000000000_k3j9x0a2b``."""
    rng = rng or random.Random()
    millis = int(utc_now().timestamp() * 1000)
    suffix = "".join(rng.choice(_SESSION_ID_ALPHABET) for _ in range(9))
    return f"session_{millis}_{suffix}"


class LearnerSessionService:
    """Registry of learner sessions and their progression engines.

    Attributes:
        settings: Application settings.
        curriculum: Chapter catalogue shared by all sessions.
        bus: Event bus shared by all sessions.
        sink: Progress sink shared by all sessions.
        questions: Question source.
    """

    def __init__(
        self,
        settings: Settings,
        curriculum: Curriculum,
        *,
        bus: EventBus | None = None,
        sink: ProgressSink | None = None,
        questions: QuestionSource | None = None,
    ) -> None:
        self.settings = settings
        self.curriculum = curriculum
        self.bus = bus or EventBus()
        self.sink: ProgressSink = sink or NullProgressSink()
        self.questions: QuestionSource = questions or FallbackQuestionBank()
        self._adjuster = DifficultyAdjuster(
            DifficultyThresholds.from_settings(settings.progression)
        )
        self._engines: dict[str, ProgressionEngine] = {}

    def create_session(
        self,
        difficulty_tier: DifficultyTier | None = None,
    ) -> tuple[str, ProgressionEngine]:
        """Start a learner session.

        The progress sink is asked for a session id first; a local id is
        generated when it has none.

        Args:
            difficulty_tier: Starting tier; the configured default otherwise.

        Returns:
            Tuple of (session_id, engine).
        """
        try:
            session_id = self.sink.create_session()
        except Exception as e:
            logger.error("Failed to create backend session: %s", e, exc_info=True)
            session_id = None
        if not session_id:
            session_id = generate_session_id()

        engine = ProgressionEngine(
            self.curriculum,
            settings=self.settings.progression,
            bus=self.bus,
            sink=self.sink,
            session_id=session_id,
            initial_tier=difficulty_tier,
        )

        self._engines[session_id] = engine
        logger.info(
            "Learner session created: %s (tier=%s)",
            session_id,
            engine.state.difficulty_tier.value,
        )
        return session_id, engine

    def get_engine(self, session_id: str) -> ProgressionEngine:
        """Get a session's engine.

        Raises:
            SessionNotFoundError: If the session does not exist.
        """
        try:
            return self._engines[session_id]
        except KeyError:
            raise SessionNotFoundError(session_id) from None

    def end_session(self, session_id: str) -> None:
        """Forget a session.

        Raises:
            SessionNotFoundError: If the session does not exist.
        """
        if self._engines.pop(session_id, None) is None:
            raise SessionNotFoundError(session_id)
        logger.info("Learner session ended: %s", session_id)

    def session_ids(self) -> list[str]:
        return list(self._engines)

    def recommend_level(
        self,
        current: DifficultyTier,
        performance: Sequence[bool],
    ) -> LevelAdjustment:
        """Stateless tier recommendation from a list of answer outcomes."""
        events = [
            AnswerEvent(concept="performance", correct=correct, timestamp=index)
            for index, correct in enumerate(performance)
        ]
        return self._adjuster.adjust(current, overall_accuracy(events), len(events))

    def next_question(
        self,
        tier: DifficultyTier,
        recent_performance: Sequence[bool] | None = None,
    ) -> Question:
        return self.questions.generate(tier, recent_performance)

    def close(self) -> None:
        """Drop all sessions and close the sink if it holds connections."""
        self._engines.clear()
        close = getattr(self.sink, "close", None)
        if callable(close):
            close()
