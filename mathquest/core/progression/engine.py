# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Progression engine.

The ProgressionEngine owns one learner's LearnerState and AnswerLedger and
is the only code that replaces the state. It sequences the pure operations
of the ledger, accuracy, difficulty, mastery, rewards and badge modules,
turns milestones into notifications on the event bus, and forwards
answers, badges and scores to the progress sink.

Every XP reward goes through ``add_xp``, so level-ups and daily goals are
handled the same way regardless of where the XP came from.

Example:
    >>> engine = ProgressionEngine(get_default_curriculum())
    >>> engine.complete_lesson("fractions").xp
    20
    >>> outcome = engine.record_mastery_quiz("fractions", 85)
    >>> outcome.unlocked_chapter
    'decimals'
"""

import logging
from collections import deque
from collections.abc import Callable
from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field

from mathquest.core.config.settings import ProgressionSettings
from mathquest.core.progression import accuracy, badges, rewards
from mathquest.core.progression.answers import is_answer_correct
from mathquest.core.progression.curriculum import Curriculum
from mathquest.core.progression.difficulty import (
    DEMOTION_MESSAGES,
    PROMOTION_MESSAGES,
    DifficultyAdjuster,
    DifficultyThresholds,
    LevelAdjustment,
)
from mathquest.core.progression.exceptions import InvalidScoreError
from mathquest.core.progression.ledger import AnswerLedger
from mathquest.core.progression.mastery import (
    ActivityOutcome,
    MasteryEngine,
    MasteryOutcome,
)
from mathquest.core.progression.models import (
    AnswerEvent,
    Badge,
    BadgeType,
    ConceptAccuracy,
    DailyGoals,
    DifficultyTier,
    LearnerState,
    Notification,
    NotificationKind,
)
from mathquest.core.progression.rewards import (
    DailyProgressKind,
    StreakUpdate,
    XPAward,
    XPValues,
)
from mathquest.infrastructure.events import EventBus, EventTypes
from mathquest.infrastructure.persistence import (
    NullProgressSink,
    ProgressRecord,
    ProgressSink,
    ScoreReport,
)
from mathquest.utils.datetime import local_today, monotonic_ms, utc_now

logger = logging.getLogger(__name__)

XP_HISTORY_LIMIT = 100
DIFFICULTY_HISTORY_LIMIT = 100

_NOTIFICATION_EVENTS = {
    NotificationKind.LEVEL_UP: EventTypes.Progression.LEVEL_UP,
    NotificationKind.STREAK: EventTypes.Progression.STREAK,
    NotificationKind.BADGE: EventTypes.Progression.BADGE,
    NotificationKind.UNLOCK: EventTypes.Progression.UNLOCK,
    NotificationKind.DAILY_GOAL: EventTypes.Progression.DAILY_GOAL,
    NotificationKind.DIFFICULTY: EventTypes.Progression.DIFFICULTY,
    NotificationKind.MASTERY: EventTypes.Progression.MASTERY,
}


class XPHistoryEntry(BaseModel):
    """One XP award, kept for the activity log."""

    model_config = ConfigDict(frozen=True)

    amount: int
    reason: str
    total_xp: int
    created_at: datetime = Field(default_factory=utc_now)


class DifficultyChange(BaseModel):
    """One applied tier change."""

    model_config = ConfigDict(frozen=True)

    previous_level: DifficultyTier
    new_level: DifficultyTier
    accuracy: float
    created_at: datetime = Field(default_factory=utc_now)


class AnswerResult(BaseModel):
    """Everything that followed from one recorded answer.

    Attributes:
        event: The ledger event.
        points_earned: Question points for the answer.
        badges: Badges newly earned by the answer.
        adjustment: Difficulty recommendation after the answer. The tier
            is not changed until ``apply_difficulty`` is called.
    """

    model_config = ConfigDict(frozen=True)

    event: AnswerEvent
    points_earned: int
    badges: list[Badge] = Field(default_factory=list)
    adjustment: LevelAdjustment


class ProgressSnapshot(BaseModel):
    """Read-only view of a learner's progress for the UI and API."""

    model_config = ConfigDict(frozen=True)

    state: LearnerState
    total_answers: int
    overall_accuracy: float
    windowed_accuracy: float
    practice_priorities: list[str]
    notifications: list[Notification]
    xp_history: list[XPHistoryEntry]
    difficulty_history: list[DifficultyChange]


class ProgressionEngine:
    """Owns and advances one learner's progression."""

    def __init__(
        self,
        curriculum: Curriculum,
        *,
        settings: ProgressionSettings | None = None,
        state: LearnerState | None = None,
        bus: EventBus | None = None,
        sink: ProgressSink | None = None,
        session_id: str | None = None,
        initial_tier: DifficultyTier | None = None,
        clock: Callable[[], int] = monotonic_ms,
        today: Callable[[], date] = local_today,
    ) -> None:
        """Initialize the engine.

        Args:
            curriculum: Chapter catalogue.
            settings: Progression rules; defaults apply when omitted.
            state: Existing learner state; a fresh one is created when omitted.
            bus: Event bus for notifications; a private bus when omitted.
            sink: Progress sink; nothing is persisted when omitted.
            session_id: Session id passed to the sink and the bus.
            initial_tier: Starting tier of a fresh state; the configured
                default when omitted.
            clock: Millisecond clock for answer events.
            today: Source of the learner's calendar day.
        """
        self.settings = settings or ProgressionSettings()
        self.curriculum = curriculum
        self.session_id = session_id
        self.bus = bus or EventBus()
        self.sink: ProgressSink = sink or NullProgressSink()
        self._today = today

        self.xp_values = XPValues.from_settings(self.settings)
        self.adjuster = DifficultyAdjuster(DifficultyThresholds.from_settings(self.settings))
        self.mastery = MasteryEngine(curriculum, passing_score=self.settings.passing_score)

        self._state = state or LearnerState.fresh(
            curriculum,
            xp_to_next_level=self.settings.initial_xp_threshold,
            difficulty_tier=initial_tier or DifficultyTier.parse(self.settings.default_tier),
            daily_goals=DailyGoals(
                target_lessons=self.settings.daily_target_lessons,
                target_activities=self.settings.daily_target_activities,
                target_xp=self.settings.daily_target_xp,
            ),
        )
        self._ledger = AnswerLedger(clock=clock)
        self._tier_events: list[AnswerEvent] = []
        self._events_by_tier: dict[DifficultyTier, list[AnswerEvent]] = {
            tier: [] for tier in DifficultyTier
        }
        self._xp_history: deque[XPHistoryEntry] = deque(maxlen=XP_HISTORY_LIMIT)
        self._difficulty_history: deque[DifficultyChange] = deque(
            maxlen=DIFFICULTY_HISTORY_LIMIT
        )
        self._notifications: deque[Notification] = deque(
            maxlen=self.settings.max_notifications
        )

    # ------------------------------------------------------------------ #
    # Read access
    # ------------------------------------------------------------------ #

    @property
    def state(self) -> LearnerState:
        """Current learner state."""
        return self._state

    @property
    def ledger(self) -> AnswerLedger:
        return self._ledger

    @property
    def notifications(self) -> list[Notification]:
        """Recent notifications, oldest first."""
        return list(self._notifications)

    @property
    def xp_history(self) -> list[XPHistoryEntry]:
        return list(self._xp_history)

    @property
    def tier_events(self) -> list[AnswerEvent]:
        """Answers recorded since the current tier was applied."""
        return list(self._tier_events)

    def clear_notifications(self) -> None:
        self._notifications.clear()

    def accuracy(self) -> float:
        """Overall accuracy over every recorded answer."""
        return accuracy.overall_accuracy(self._ledger.events())

    def breakdown(self) -> dict[str, ConceptAccuracy]:
        """Per-concept accuracy in practice-need order."""
        return accuracy.per_concept_breakdown(self._ledger.events())

    def snapshot(self) -> ProgressSnapshot:
        """Build a read-only view of the learner's progress."""
        events = self._ledger.events()
        return ProgressSnapshot(
            state=self._state,
            total_answers=len(events),
            overall_accuracy=accuracy.overall_accuracy(events),
            windowed_accuracy=accuracy.windowed_accuracy(
                events, self.adjuster.thresholds.window_size
            ),
            practice_priorities=accuracy.practice_priorities(events),
            notifications=self.notifications,
            xp_history=self.xp_history,
            difficulty_history=list(self._difficulty_history),
        )

    # ------------------------------------------------------------------ #
    # Answers and difficulty
    # ------------------------------------------------------------------ #

    def record_answer(
        self,
        concept: str,
        correct: bool,
        *,
        question: str | None = None,
        answer: str = "",
    ) -> AnswerResult:
        """Record one answer and apply its consequences.

        The answer is appended to the ledger, question points are added,
        the answer is forwarded to the progress sink and badge rules are
        checked. The returned adjustment is only a recommendation.

        Args:
            concept: Concept, chapter id, activity id or quiz topic.
            correct: Whether the answer was correct.
            question: Question text reported to the sink; defaults to concept.
            answer: Learner's answer as given.

        Returns:
            AnswerResult for the recorded answer.

        Raises:
            InvalidConceptError: If the concept is empty.
        """
        tier = self._state.difficulty_tier
        event = self._ledger.record(concept, correct)
        self._tier_events.append(event)
        self._events_by_tier[tier].append(event)

        points = rewards.answer_points(tier, correct)
        if points:
            self._state = self._state.model_copy(
                update={"points": self._state.points + points}
            )

        self._persist_progress(
            ProgressRecord(
                level=1 if tier == DifficultyTier.EASY else 2,
                question_number=len(self._ledger),
                question=question or concept,
                answer=answer,
                is_correct=correct,
                points_earned=points,
            )
        )
        self.bus.publish(
            EventTypes.Progression.ANSWER_RECORDED,
            {"concept": concept, "correct": correct, "tier": tier.value},
            session_id=self.session_id,
        )

        earned: list[Badge] = []
        for name, badge_type in badges.answer_badges(
            tier, self._tier_events, len(self._ledger)
        ):
            award = self.award_badge(name, badge_type)
            if award is not None:
                earned.append(award)

        return AnswerResult(
            event=event,
            points_earned=points,
            badges=earned,
            adjustment=self.evaluate_difficulty(),
        )

    def submit_answer(
        self,
        concept: str,
        answer: str,
        correct_answer: str,
        *,
        question: str | None = None,
    ) -> AnswerResult:
        """Check an answer against the expected one, then record it."""
        return self.record_answer(
            concept,
            is_answer_correct(answer, correct_answer),
            question=question,
            answer=answer,
        )

    def evaluate_difficulty(self) -> LevelAdjustment:
        """Recommend a tier from answers at the current tier."""
        return self.adjuster.evaluate(self._state.difficulty_tier, self._tier_events)

    def apply_difficulty(self, new_level: DifficultyTier | str) -> LearnerState:
        """Switch to a new difficulty tier.

        The tier-local answer window starts over. A promotion also awards
        the "Level Up!" badge.

        Raises:
            ValueError: If the tier name is not recognized.
        """
        new_tier = DifficultyTier.parse(new_level)
        previous = self._state.difficulty_tier
        if new_tier == previous:
            return self._state

        window_accuracy = accuracy.windowed_accuracy(
            self._tier_events, self.adjuster.thresholds.window_size
        )
        self._state = self._state.model_copy(update={"difficulty_tier": new_tier})
        self._tier_events = []
        self._difficulty_history.append(
            DifficultyChange(
                previous_level=previous,
                new_level=new_tier,
                accuracy=window_accuracy,
            )
        )
        logger.info(
            "Difficulty applied: session=%s, %s -> %s",
            self.session_id,
            previous.value,
            new_tier.value,
        )

        promoted = new_tier.rank > previous.rank
        messages = PROMOTION_MESSAGES if promoted else DEMOTION_MESSAGES
        self._notify(
            NotificationKind.DIFFICULTY,
            messages.get(new_tier, f"Now practicing at {new_tier.learning_level} level"),
            "📈" if promoted else "📘",
        )
        if promoted:
            self.award_badge(badges.LEVEL_UP, BadgeType.GOLD)
        return self._state

    # ------------------------------------------------------------------ #
    # Curriculum milestones
    # ------------------------------------------------------------------ #

    def complete_lesson(self, chapter_id: str) -> LearnerState:
        """Complete a chapter lesson: +20 XP and one lesson toward today's goal.

        Raises:
            UnknownChapterError: If the chapter is not in the curriculum.
        """
        self._state = self.mastery.complete_lesson(self._state, chapter_id)
        self._record_daily("lesson")
        self.add_xp(self.xp_values.lesson, f"Completed {chapter_id} lesson")
        return self._state

    def complete_activity(
        self,
        chapter_id: str,
        activity_id: str,
        score: int | None = None,
    ) -> ActivityOutcome:
        """Complete an activity.

        Awards 50 XP on every call, plus 10 XP when ``score`` is 100, and
        counts one activity toward today's goal. The completed set itself
        only changes the first time.

        Raises:
            UnknownChapterError: If the chapter is not in the curriculum.
            UnknownActivityError: If the activity is not in the chapter.
            InvalidScoreError: If score is outside [0, 100].
        """
        if score is not None and not 0 <= score <= 100:
            raise InvalidScoreError(
                f"Activity score must be within 0-100, got {score}",
                details={"activity_id": activity_id, "score": score},
            )

        outcome = self.mastery.complete_activity(self._state, chapter_id, activity_id)
        self._state = outcome.state
        self.add_xp(self.xp_values.activity, f"Completed {activity_id}")
        self._record_daily("activity")
        if score is not None and score >= 100:
            self.add_xp(self.xp_values.perfect_score, "Perfect Score Bonus")
        return outcome.model_copy(update={"state": self._state})

    def record_mastery_quiz(self, chapter_id: str, percentage_score: int) -> MasteryOutcome:
        """Record a mastery quiz: +100 XP on a pass, +30 XP otherwise.

        Raises:
            UnknownChapterError: If the chapter is not in the curriculum.
            InvalidScoreError: If the score is outside [0, 100].
        """
        outcome = self.mastery.record_mastery_quiz(self._state, chapter_id, percentage_score)
        self._state = outcome.state
        chapter = self.curriculum.get(chapter_id)

        if outcome.passed:
            self.add_xp(self.xp_values.mastery, "Mastery Quiz Passed!")
            self._notify(
                NotificationKind.MASTERY,
                f"{chapter.name} mastered with {percentage_score}%!",
                "⭐",
            )
        else:
            self.add_xp(self.xp_values.quiz_attempt, "Mastery Quiz Attempted")

        if outcome.unlocked_chapter is not None:
            unlocked = self.curriculum.get(outcome.unlocked_chapter)
            self._notify(
                NotificationKind.UNLOCK,
                f"{unlocked.name} chapter unlocked!",
                "🔓",
            )
        return outcome.model_copy(update={"state": self._state})

    # ------------------------------------------------------------------ #
    # Rewards
    # ------------------------------------------------------------------ #

    def add_xp(self, amount: int, reason: str) -> XPAward:
        """Add XP, counting it toward today's goal.

        Raises:
            InvalidRewardError: If amount is negative.
        """
        award = rewards.add_xp(
            self._state, amount, reason, self.settings.level_growth_factor
        )
        self._state = award.state
        self._xp_history.append(
            XPHistoryEntry(amount=amount, reason=reason, total_xp=self._state.xp)
        )
        if award.leveled_up:
            self._notify(
                NotificationKind.LEVEL_UP,
                f"Level Up! You're now level {self._state.level}!",
                "🎉",
            )
        self._record_daily("xp", amount)
        return award.model_copy(update={"state": self._state})

    def update_streak(self, today: date | None = None) -> StreakUpdate:
        """Count today toward the daily streak."""
        update = rewards.update_streak(self._state, today or self._today())
        self._state = update.state
        if update.extended and self._state.streak_days > 1:
            self._notify(
                NotificationKind.STREAK,
                f"{self._state.streak_days} day streak! 🔥",
                "🔥",
            )
        return update

    def award_badge(
        self,
        name: str,
        badge_type: BadgeType | str = BadgeType.BRONZE,
    ) -> Badge | None:
        """Award a badge unless already held.

        Returns:
            The new badge, or None if the learner already had it.
        """
        award = badges.award_badge(self._state, name, BadgeType(badge_type))
        if not award.awarded:
            return None

        self._state = award.state
        self._notify(NotificationKind.BADGE, f"New Badge: {name}!", "🏆")
        if self.session_id is not None:
            try:
                self.sink.save_badge(self.session_id, name, award.badge.badge_type.value)
            except Exception as e:
                logger.error("Failed to persist badge %s: %s", name, e, exc_info=True)
        return award.badge

    def save_score(
        self,
        time_spent: int = 0,
        assessment_score: float | None = None,
    ) -> bool:
        """Send the session score summary to the progress sink.

        Level 1 score is the accuracy of answers given at the easy tier and
        level 2 score that of answers above it.

        Returns:
            True if the sink accepted the report.
        """
        if self.session_id is None:
            return False

        above_easy = [
            event
            for tier, events in self._events_by_tier.items()
            if tier != DifficultyTier.EASY
            for event in events
        ]
        easy = self._events_by_tier[DifficultyTier.EASY]
        report = ScoreReport(
            total_points=self._state.points,
            level1_score=round(accuracy.overall_accuracy(easy)) if easy else 0,
            level2_score=round(accuracy.overall_accuracy(above_easy)) if above_easy else 0,
            assessment_score=assessment_score,
            time_spent=time_spent,
        )
        try:
            return self.sink.save_score(self.session_id, report)
        except Exception as e:
            logger.error("Failed to persist score: %s", e, exc_info=True)
            return False

    # ------------------------------------------------------------------ #
    # Internals
    # ------------------------------------------------------------------ #

    def _record_daily(self, kind: DailyProgressKind, xp: int = 0) -> None:
        progress = rewards.record_daily_progress(self._state, kind, self._today(), xp)
        self._state = progress.state
        if progress.goal_reached:
            bonus = self.xp_values.daily_goal
            self.add_xp(bonus, "Daily Goal Complete")
            self._notify(
                NotificationKind.DAILY_GOAL,
                f"Daily Goal Complete! +{bonus} XP",
                "🎯",
            )

    def _notify(self, kind: NotificationKind, message: str, icon: str) -> Notification:
        notification = Notification(kind=kind, message=message, icon=icon)
        self._notifications.append(notification)
        self.bus.publish(
            _NOTIFICATION_EVENTS[kind],
            notification.model_dump(mode="json"),
            session_id=self.session_id,
        )
        return notification

    def _persist_progress(self, record: ProgressRecord) -> None:
        if self.session_id is None:
            return
        try:
            self.sink.save_progress(self.session_id, record)
        except Exception as e:
            logger.error("Failed to persist progress: %s", e, exc_info=True)
