# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""XP, levels, streaks and daily goals.

Level curve: a learner starts at level 1 needing 100 XP. Crossing the
threshold raises the level by one and multiplies the threshold by 1.5,
rounded down (100, 150, 225, 337, ...). XP is cumulative and never reset.
One award raises the level at most once, even if it crosses several
thresholds; the next award catches up.

Streaks count consecutive calendar days with activity. Daily goals count
lessons, activities and XP earned today and pay a bonus once per day.
"""

import logging
import math
from dataclasses import dataclass
from datetime import date
from typing import TYPE_CHECKING, Literal

from pydantic import BaseModel, ConfigDict

from mathquest.core.progression.exceptions import InvalidRewardError
from mathquest.core.progression.models import DailyGoals, DifficultyTier, LearnerState
from mathquest.utils.datetime import days_between

if TYPE_CHECKING:
    from mathquest.core.config.settings import ProgressionSettings

logger = logging.getLogger(__name__)

DEFAULT_GROWTH_FACTOR = 1.5

EASY_ANSWER_POINTS = 10
ANSWER_POINTS = 20

DailyProgressKind = Literal["lesson", "activity", "xp"]


@dataclass(frozen=True)
class XPValues:
    """XP granted per milestone."""

    lesson: int = 20
    activity: int = 50
    mastery: int = 100
    quiz_attempt: int = 30
    daily_goal: int = 25
    perfect_score: int = 10

    @classmethod
    def from_settings(cls, settings: "ProgressionSettings") -> "XPValues":
        """Build XP values from progression settings."""
        return cls(
            lesson=settings.xp_lesson,
            activity=settings.xp_activity,
            mastery=settings.xp_mastery,
            quiz_attempt=settings.xp_quiz_attempt,
            daily_goal=settings.xp_daily_goal,
            perfect_score=settings.xp_perfect_score,
        )


class XPAward(BaseModel):
    """Result of adding XP."""

    model_config = ConfigDict(frozen=True)

    state: LearnerState
    amount: int
    reason: str
    leveled_up: bool


class StreakUpdate(BaseModel):
    """Result of a streak update.

    Attributes:
        state: New learner state.
        extended: True when the streak grew by one day.
        reset: True when the streak restarted at 1.
    """

    model_config = ConfigDict(frozen=True)

    state: LearnerState
    extended: bool = False
    reset: bool = False


class DailyProgress(BaseModel):
    """Result of recording daily progress.

    ``goal_reached`` is True only on the call that first meets every target
    for the day.
    """

    model_config = ConfigDict(frozen=True)

    state: LearnerState
    goal_reached: bool = False


def answer_points(tier: DifficultyTier, correct: bool) -> int:
    """Question score for one answer: 10 on easy, 20 above, 0 when wrong."""
    if not correct:
        return 0
    return EASY_ANSWER_POINTS if tier == DifficultyTier.EASY else ANSWER_POINTS


def next_threshold(threshold: int, growth_factor: float = DEFAULT_GROWTH_FACTOR) -> int:
    """XP threshold for the level after one with ``threshold``.

    Raises:
        ValueError: If the growth factor would not raise the threshold.
    """
    grown = math.floor(threshold * growth_factor)
    if grown <= threshold:
        raise ValueError(
            f"Growth factor {growth_factor} does not raise threshold {threshold}"
        )
    return grown


def add_xp(
    state: LearnerState,
    amount: int,
    reason: str,
    growth_factor: float = DEFAULT_GROWTH_FACTOR,
) -> XPAward:
    """Add XP and apply at most one level-up.

    Args:
        state: Current learner state.
        amount: XP to add; must not be negative.
        reason: Human-readable reason, e.g. "Completed Fractions lesson".
        growth_factor: Threshold multiplier per level.

    Returns:
        XPAward with the new state.

    Raises:
        InvalidRewardError: If amount is negative.
        ValueError: If a level-up would not raise the threshold.
    """
    if amount < 0:
        raise InvalidRewardError(
            f"XP amount must not be negative, got {amount}",
            details={"amount": amount, "reason": reason},
        )

    xp = state.xp + amount
    update: dict[str, int] = {"xp": xp}
    leveled_up = xp >= state.xp_to_next_level
    if leveled_up:
        update["level"] = state.level + 1
        update["xp_to_next_level"] = next_threshold(state.xp_to_next_level, growth_factor)
        logger.info(
            "Level up: level=%s, xp=%s, next_threshold=%s",
            update["level"],
            xp,
            update["xp_to_next_level"],
        )

    logger.debug("XP added: amount=%s, reason=%s, total=%s", amount, reason, xp)
    return XPAward(
        state=state.model_copy(update=update),
        amount=amount,
        reason=reason,
        leveled_up=leveled_up,
    )


def update_streak(state: LearnerState, today: date) -> StreakUpdate:
    """Update the daily streak for activity on ``today``.

    Same day: unchanged. Next day: +1. Any other gap, or no previous
    activity: the streak restarts at 1.
    """
    last = state.last_activity_date
    if last is not None and days_between(last, today) == 0:
        return StreakUpdate(state=state)

    extended = last is not None and days_between(last, today) == 1
    streak = state.streak_days + 1 if extended else 1
    new_state = state.model_copy(
        update={
            "streak_days": streak,
            "longest_streak_days": max(state.longest_streak_days, streak),
            "last_activity_date": today,
        }
    )
    logger.debug("Streak updated: days=%s, extended=%s", streak, extended)
    return StreakUpdate(state=new_state, extended=extended, reset=not extended)


def _goals_for(goals: DailyGoals, today: date) -> DailyGoals:
    if goals.day == today:
        return goals
    return DailyGoals(
        day=today,
        target_lessons=goals.target_lessons,
        target_activities=goals.target_activities,
        target_xp=goals.target_xp,
    )


def record_daily_progress(
    state: LearnerState,
    kind: DailyProgressKind,
    today: date,
    xp: int = 0,
) -> DailyProgress:
    """Count progress toward today's goal.

    Counters reset when ``today`` differs from the day they were kept for;
    targets carry over.

    Args:
        state: Current learner state.
        kind: "lesson" or "activity" to count one more, "xp" for XP only.
        today: Learner's calendar day.
        xp: XP earned by this event.

    Returns:
        DailyProgress with the new state.
    """
    if xp < 0:
        raise InvalidRewardError(
            f"XP amount must not be negative, got {xp}",
            details={"amount": xp},
        )

    goals = _goals_for(state.daily_goals, today)
    update: dict[str, int | bool] = {"xp_earned": goals.xp_earned + xp}
    if kind == "lesson":
        update["lessons_completed"] = goals.lessons_completed + 1
    elif kind == "activity":
        update["activities_completed"] = goals.activities_completed + 1
    goals = goals.model_copy(update=update)

    goal_reached = goals.is_met and not goals.rewarded
    if goal_reached:
        goals = goals.model_copy(update={"rewarded": True})
        logger.info("Daily goal reached: day=%s", today)

    return DailyProgress(
        state=state.model_copy(update={"daily_goals": goals}),
        goal_reached=goal_reached,
    )
