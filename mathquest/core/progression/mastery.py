# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Mastery and unlock engine.

Tracks lesson completion, completed activities and mastery quiz results per
chapter, and unlocks chapters in curriculum order. A chapter is unlocked
only when its predecessor's best mastery quiz reaches the passing score;
nothing ever locks a chapter again.

All operations take a LearnerState and return a new one. XP for these
milestones is awarded by the ProgressionEngine, not here.
"""

import logging

from pydantic import BaseModel, ConfigDict

from mathquest.core.progression.curriculum import Curriculum
from mathquest.core.progression.exceptions import (
    InvalidScoreError,
    UnknownActivityError,
)
from mathquest.core.progression.models import MIN_PASSING_SCORE, LearnerState

logger = logging.getLogger(__name__)


class ActivityOutcome(BaseModel):
    """Result of completing an activity.

    ``newly_completed`` is False when the activity was already in the
    chapter's completed set.
    """

    model_config = ConfigDict(frozen=True)

    state: LearnerState
    newly_completed: bool


class MasteryOutcome(BaseModel):
    """Result of a mastery quiz attempt."""

    model_config = ConfigDict(frozen=True)

    state: LearnerState
    passed: bool
    unlocked_chapter: str | None = None


class MasteryEngine:
    """Applies lesson, activity and mastery quiz milestones."""

    def __init__(self, curriculum: Curriculum, passing_score: int = MIN_PASSING_SCORE) -> None:
        """Initialize the engine.

        Args:
            curriculum: Chapter catalogue.
            passing_score: Mastery percentage needed to unlock the next
                chapter, used when a chapter does not set its own.

        Raises:
            InvalidScoreError: If passing_score is outside [80, 100].
        """
        if not MIN_PASSING_SCORE <= passing_score <= 100:
            raise InvalidScoreError(
                f"Passing score must be within {MIN_PASSING_SCORE}-100, got {passing_score}",
                details={"passing_score": passing_score},
            )
        self.curriculum = curriculum
        self.passing_score = passing_score

    def passing_score_for(self, chapter_id: str) -> int:
        """Passing score for a chapter.

        A chapter's own ``passing_score`` wins over the engine default.
        """
        chapter = self.curriculum.get(chapter_id)
        if chapter.passing_score is not None:
            return chapter.passing_score
        return self.passing_score

    def complete_lesson(self, state: LearnerState, chapter_id: str) -> LearnerState:
        """Mark a chapter's lesson as completed.

        Raises:
            UnknownChapterError: If the chapter is not in the curriculum.
        """
        self.curriculum.get(chapter_id)
        progress = state.chapter(chapter_id)
        if not progress.lesson_completed:
            logger.info("Lesson completed: chapter=%s", chapter_id)
        return state.with_chapter(
            progress.model_copy(update={"lesson_completed": True})
        ).model_copy(update={"current_chapter": chapter_id})

    def complete_activity(
        self,
        state: LearnerState,
        chapter_id: str,
        activity_id: str,
    ) -> ActivityOutcome:
        """Add an activity to the chapter's completed set.

        Completing the same activity twice leaves the set unchanged.

        Raises:
            UnknownChapterError: If the chapter is not in the curriculum.
            UnknownActivityError: If the activity is not in the chapter.
        """
        if not self.curriculum.has_activity(chapter_id, activity_id):
            raise UnknownActivityError(chapter_id, activity_id)

        progress = state.chapter(chapter_id)
        if activity_id in progress.activities_completed:
            return ActivityOutcome(state=state, newly_completed=False)

        logger.info(
            "Activity completed: chapter=%s, activity=%s", chapter_id, activity_id
        )
        completed = progress.activities_completed | {activity_id}
        new_state = state.with_chapter(
            progress.model_copy(update={"activities_completed": completed})
        )
        return ActivityOutcome(state=new_state, newly_completed=True)

    def record_mastery_quiz(
        self,
        state: LearnerState,
        chapter_id: str,
        percentage_score: int,
    ) -> MasteryOutcome:
        """Record a mastery quiz attempt.

        The attempt is stored as ``last_quiz_score``. ``mastery_score`` keeps
        the best attempt rather than the latest, so a failed retake of a
        mastered chapter cannot pull its score below the bar while the next
        chapter stays unlocked. On a first attempt both hold the quiz score.
        Passing unlocks the next chapter, if any. Retakes are unlimited.

        Args:
            state: Current learner state.
            chapter_id: Chapter the quiz belongs to.
            percentage_score: Quiz result in [0, 100].

        Returns:
            MasteryOutcome with the new state.

        Raises:
            UnknownChapterError: If the chapter is not in the curriculum.
            InvalidScoreError: If the score is outside [0, 100].
        """
        if not 0 <= percentage_score <= 100:
            raise InvalidScoreError(
                f"Quiz score must be within 0-100, got {percentage_score}",
                details={"chapter_id": chapter_id, "score": percentage_score},
            )

        passing_score = self.passing_score_for(chapter_id)
        progress = state.chapter(chapter_id)
        best = max(progress.mastery_score, percentage_score)
        new_state = state.with_chapter(
            progress.model_copy(
                update={"mastery_score": best, "last_quiz_score": percentage_score}
            )
        )

        passed = percentage_score >= passing_score
        unlocked_chapter = None
        if passed:
            next_chapter = self.curriculum.next_chapter(chapter_id)
            if next_chapter is not None:
                next_progress = new_state.chapter(next_chapter.id)
                if not next_progress.unlocked:
                    unlocked_chapter = next_chapter.id
                new_state = new_state.with_chapter(
                    next_progress.model_copy(update={"unlocked": True})
                )

        logger.info(
            "Mastery quiz recorded: chapter=%s, score=%s, best=%s, passed=%s, unlocked=%s",
            chapter_id,
            percentage_score,
            best,
            passed,
            unlocked_chapter,
        )
        return MasteryOutcome(
            state=new_state,
            passed=passed,
            unlocked_chapter=unlocked_chapter,
        )

    def is_unlocked(self, state: LearnerState, chapter_id: str) -> bool:
        """Check whether a chapter is unlocked.

        Raises:
            UnknownChapterError: If the chapter is not in the curriculum.
        """
        self.curriculum.get(chapter_id)
        return state.chapter(chapter_id).unlocked
