# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Data models for the learner progression core.

All state models are frozen pydantic models. Operations never mutate a
state in place; they return a new instance built with ``model_copy``, so a
caller holding an old ``LearnerState`` keeps a consistent snapshot.

Models:
- AnswerEvent: One recorded response (append-only)
- ConceptAccuracy: Derived correct/total counts for one concept
- ChapterProgress: Per-chapter lesson, activity, mastery and unlock state
- DailyGoals: Today's lesson/activity/XP counters and targets
- Badge: An earned badge
- Notification: A human-readable message for the UI layer
- LearnerState: Aggregate root owned by the ProgressionEngine
"""

from datetime import date, datetime
from enum import Enum
from typing import TYPE_CHECKING, Self

from pydantic import BaseModel, ConfigDict, Field, model_validator

from mathquest.core.progression.exceptions import UnknownChapterError
from mathquest.utils.datetime import utc_now

# Lowest mastery quiz score that may unlock the next chapter
MIN_PASSING_SCORE = 80

if TYPE_CHECKING:
    from mathquest.core.progression.curriculum import Curriculum


_LEARNING_LEVEL_ALIASES = {
    "beginner": "easy",
    "intermediate": "medium",
    "advanced": "hard",
}


class DifficultyTier(str, Enum):
    """Difficulty tiers, ordered from easiest to hardest.

    Lesson content calls the same tiers beginner, intermediate and
    advanced; ``parse`` accepts either vocabulary.
    """

    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"

    @classmethod
    def parse(cls, value: "str | DifficultyTier") -> "DifficultyTier":
        """Parse a tier from either vocabulary.

        Args:
            value: Tier name such as "medium" or "intermediate".

        Returns:
            The matching tier.

        Raises:
            ValueError: If the name matches neither vocabulary.
        """
        if isinstance(value, cls):
            return value
        key = str(value).strip().lower()
        return cls(_LEARNING_LEVEL_ALIASES.get(key, key))

    @property
    def learning_level(self) -> str:
        """Return the beginner/intermediate/advanced name of this tier."""
        for level, tier in _LEARNING_LEVEL_ALIASES.items():
            if tier == self.value:
                return level
        raise AssertionError(f"No learning level for tier {self.value}")

    @property
    def rank(self) -> int:
        """Position of the tier, 0 for easy."""
        return list(DifficultyTier).index(self)


class BadgeType(str, Enum):
    """Badge tiers, as rendered by the UI."""

    BRONZE = "bronze"
    SILVER = "silver"
    GOLD = "gold"


class NotificationKind(str, Enum):
    """Kinds of learner-facing notifications."""

    LEVEL_UP = "level_up"
    STREAK = "streak"
    BADGE = "badge"
    UNLOCK = "unlock"
    DAILY_GOAL = "daily_goal"
    DIFFICULTY = "difficulty"
    MASTERY = "mastery"


class AnswerEvent(BaseModel):
    """One recorded response.

    Attributes:
        concept: Concept, chapter id, activity id or free-form quiz topic.
        correct: Whether the answer was correct.
        timestamp: Monotonic milliseconds when the answer was recorded.
    """

    model_config = ConfigDict(frozen=True)

    concept: str = Field(min_length=1)
    correct: bool
    timestamp: int = Field(ge=0)


class ConceptAccuracy(BaseModel):
    """Correct/total counts for a single concept."""

    model_config = ConfigDict(frozen=True)

    concept: str
    correct_count: int = Field(default=0, ge=0)
    total_count: int = Field(default=0, ge=0)

    @model_validator(mode="after")
    def validate_counts(self) -> Self:
        """Ensure correct answers never exceed total answers."""
        if self.correct_count > self.total_count:
            raise ValueError("correct_count cannot exceed total_count")
        return self

    @property
    def mistake_count(self) -> int:
        """Number of incorrect answers."""
        return self.total_count - self.correct_count

    @property
    def accuracy_pct(self) -> float:
        """Accuracy in percent; 100 when nothing has been answered."""
        if self.total_count == 0:
            return 100.0
        return 100.0 * self.correct_count / self.total_count


class ChapterProgress(BaseModel):
    """Progress through one curriculum chapter.

    ``mastery_score`` holds the best mastery-quiz result and
    ``last_quiz_score`` the most recent one.
    """

    model_config = ConfigDict(frozen=True)

    chapter_id: str
    lesson_completed: bool = False
    activities_completed: frozenset[str] = Field(default_factory=frozenset)
    mastery_score: int = Field(default=0, ge=0, le=100)
    last_quiz_score: int | None = Field(default=None, ge=0, le=100)
    unlocked: bool = False

    def is_mastered(self, passing_score: int = MIN_PASSING_SCORE) -> bool:
        """Check whether the chapter's best quiz result meets the bar."""
        return self.mastery_score >= passing_score


class DailyGoals(BaseModel):
    """Counters toward today's goal.

    ``rewarded`` flips once the goal bonus has been paid for ``day`` so the
    bonus is granted at most once per calendar day.
    """

    model_config = ConfigDict(frozen=True)

    day: date | None = None
    lessons_completed: int = Field(default=0, ge=0)
    activities_completed: int = Field(default=0, ge=0)
    xp_earned: int = Field(default=0, ge=0)
    target_lessons: int = Field(default=1, ge=0)
    target_activities: int = Field(default=2, ge=0)
    target_xp: int = Field(default=100, ge=0)
    rewarded: bool = False

    @property
    def is_met(self) -> bool:
        """Whether every target has been reached."""
        return (
            self.lessons_completed >= self.target_lessons
            and self.activities_completed >= self.target_activities
            and self.xp_earned >= self.target_xp
        )


class Badge(BaseModel):
    """A badge earned by the learner."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    badge_type: BadgeType = BadgeType.BRONZE
    earned_at: datetime = Field(default_factory=utc_now)


class Notification(BaseModel):
    """Human-readable message for toasts and popups."""

    model_config = ConfigDict(frozen=True)

    kind: NotificationKind
    message: str
    icon: str = ""
    created_at: datetime = Field(default_factory=utc_now)


class LearnerState(BaseModel):
    """Aggregate root of one learner's progression.

    Only the ProgressionEngine replaces this object; UI and API code read
    it but never build modified copies themselves.

    ``points`` is the question score (10 per correct easy answer, 20 above
    easy) reported to the progress backend; it is separate from XP.
    """

    model_config = ConfigDict(frozen=True)

    xp: int = Field(default=0, ge=0)
    level: int = Field(default=1, ge=1)
    xp_to_next_level: int = Field(default=100, gt=0)
    points: int = Field(default=0, ge=0)
    difficulty_tier: DifficultyTier = DifficultyTier.MEDIUM
    streak_days: int = Field(default=0, ge=0)
    longest_streak_days: int = Field(default=0, ge=0)
    last_activity_date: date | None = None
    chapters: dict[str, ChapterProgress] = Field(default_factory=dict)
    daily_goals: DailyGoals = Field(default_factory=DailyGoals)
    badges: tuple[Badge, ...] = ()
    current_chapter: str | None = None

    @classmethod
    def fresh(
        cls,
        curriculum: "Curriculum",
        *,
        xp_to_next_level: int = 100,
        difficulty_tier: DifficultyTier = DifficultyTier.MEDIUM,
        daily_goals: DailyGoals | None = None,
    ) -> "LearnerState":
        """Create the state of a learner who has not started yet.

        Every chapter in the curriculum gets a progress record; only the
        first chapter is unlocked.

        Args:
            curriculum: Chapter catalogue.
            xp_to_next_level: XP needed for level 2.
            difficulty_tier: Starting tier.
            daily_goals: Daily goal targets; defaults apply when omitted.

        Returns:
            New LearnerState.
        """
        first = curriculum.first()
        chapters = {
            chapter.id: ChapterProgress(
                chapter_id=chapter.id,
                unlocked=chapter.id == first.id,
            )
            for chapter in curriculum.chapters
        }
        return cls(
            xp_to_next_level=xp_to_next_level,
            difficulty_tier=difficulty_tier,
            chapters=chapters,
            daily_goals=daily_goals or DailyGoals(),
            current_chapter=first.id,
        )

    def chapter(self, chapter_id: str) -> ChapterProgress:
        """Get one chapter's progress.

        Raises:
            UnknownChapterError: If the chapter has no progress record.
        """
        try:
            return self.chapters[chapter_id]
        except KeyError:
            raise UnknownChapterError(chapter_id) from None

    def with_chapter(self, progress: ChapterProgress) -> "LearnerState":
        """Return a copy with one chapter's progress replaced."""
        chapters = dict(self.chapters)
        chapters[progress.chapter_id] = progress
        return self.model_copy(update={"chapters": chapters})

    def has_badge(self, name: str) -> bool:
        """Check whether a badge with this name was already earned."""
        return any(badge.name == name for badge in self.badges)
