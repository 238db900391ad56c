# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for XP, levels, streaks and daily goals."""

from datetime import date, timedelta

import pytest

from mathquest.core.progression import (
    DifficultyTier,
    InvalidRewardError,
    LearnerState,
    add_xp,
    record_daily_progress,
    update_streak,
)
from mathquest.core.progression.rewards import answer_points, next_threshold

DAY = date(2024, 3, 11)


class TestAddXP:
    """Tests for add_xp and the level curve."""

    def test_two_awards_cross_first_threshold(self, fresh_state: LearnerState) -> None:
        """Test 60 + 60 XP on a fresh learner."""
        first = add_xp(fresh_state, 60, "Completed activity")
        second = add_xp(first.state, 60, "Completed activity")

        assert first.leveled_up is False
        assert second.leveled_up is True
        assert second.state.xp == 120
        assert second.state.level == 2
        assert second.state.xp_to_next_level == 150

    def test_exact_threshold_levels_up(self, fresh_state: LearnerState) -> None:
        award = add_xp(fresh_state, 100, "Mastery Quiz Passed!")

        assert award.state.level == 2

    def test_at_most_one_level_per_award(self, fresh_state: LearnerState) -> None:
        """Test that a large award catches up one level at a time."""
        award = add_xp(fresh_state, 400, "Bulk")

        assert award.state.level == 2
        assert award.state.xp_to_next_level == 150

        catch_up = add_xp(award.state, 0, "Nothing")

        assert catch_up.state.level == 3
        assert catch_up.state.xp_to_next_level == 225

    def test_zero_xp_is_allowed(self, fresh_state: LearnerState) -> None:
        award = add_xp(fresh_state, 0, "Nothing")

        assert award.state.xp == 0
        assert award.leveled_up is False

    def test_negative_xp_rejected(self, fresh_state: LearnerState) -> None:
        with pytest.raises(InvalidRewardError):
            add_xp(fresh_state, -5, "Penalty")

    def test_threshold_sequence(self) -> None:
        """Test that thresholds grow by 1.5 rounded down."""
        thresholds = [100]
        for _ in range(3):
            thresholds.append(next_threshold(thresholds[-1]))

        assert thresholds == [100, 150, 225, 337]

    @pytest.mark.parametrize(("threshold", "factor"), [(100, 1.004), (2, 1.4), (100, 1.0)])
    def test_flat_growth_rejected(self, threshold: int, factor: float) -> None:
        """Test that a factor which cannot raise the threshold is refused."""
        with pytest.raises(ValueError, match="does not raise"):
            next_threshold(threshold, factor)

    def test_level_up_with_flat_growth_rejected(self, fresh_state: LearnerState) -> None:
        with pytest.raises(ValueError, match="does not raise"):
            add_xp(fresh_state, 100, "Quiz", growth_factor=1.004)

    def test_input_state_untouched(self, fresh_state: LearnerState) -> None:
        add_xp(fresh_state, 150, "Bulk")

        assert fresh_state.xp == 0
        assert fresh_state.level == 1


class TestAnswerPoints:
    """Tests for answer_points."""

    @pytest.mark.parametrize(
        ("tier", "correct", "expected"),
        [
            (DifficultyTier.EASY, True, 10),
            (DifficultyTier.MEDIUM, True, 20),
            (DifficultyTier.HARD, True, 20),
            (DifficultyTier.HARD, False, 0),
        ],
    )
    def test_points(self, tier: DifficultyTier, correct: bool, expected: int) -> None:
        assert answer_points(tier, correct) == expected


class TestUpdateStreak:
    """Tests for update_streak."""

    def test_first_activity_starts_streak(self, fresh_state: LearnerState) -> None:
        update = update_streak(fresh_state, DAY)

        assert update.state.streak_days == 1
        assert update.state.last_activity_date == DAY
        assert update.extended is False

    def test_next_day_extends(self, fresh_state: LearnerState) -> None:
        state = update_streak(fresh_state, DAY).state

        update = update_streak(state, DAY + timedelta(days=1))

        assert update.extended is True
        assert update.state.streak_days == 2
        assert update.state.longest_streak_days == 2

    def test_same_day_is_unchanged(self, fresh_state: LearnerState) -> None:
        state = update_streak(fresh_state, DAY).state

        update = update_streak(state, DAY)

        assert update.state == state
        assert update.extended is False
        assert update.reset is False

    def test_gap_resets(self, fresh_state: LearnerState) -> None:
        """Test that missing two days restarts at 1 and keeps the record."""
        state = update_streak(fresh_state, DAY).state
        state = update_streak(state, DAY + timedelta(days=1)).state

        update = update_streak(state, DAY + timedelta(days=4))

        assert update.reset is True
        assert update.state.streak_days == 1
        assert update.state.longest_streak_days == 2


class TestDailyProgress:
    """Tests for record_daily_progress."""

    def test_goal_reached_once(self, fresh_state: LearnerState) -> None:
        """Test that the goal fires on the call that meets every target."""
        state = fresh_state
        state = record_daily_progress(state, "lesson", DAY).state
        state = record_daily_progress(state, "activity", DAY).state
        reached = record_daily_progress(state, "activity", DAY, xp=100)

        assert reached.goal_reached is True
        assert reached.state.daily_goals.rewarded is True

        again = record_daily_progress(reached.state, "activity", DAY, xp=50)

        assert again.goal_reached is False
        assert again.state.daily_goals.activities_completed == 3

    def test_counters_reset_on_new_day(self, fresh_state: LearnerState) -> None:
        state = record_daily_progress(fresh_state, "lesson", DAY, xp=20).state

        next_day = record_daily_progress(state, "xp", DAY + timedelta(days=1), xp=5)
        goals = next_day.state.daily_goals

        assert goals.day == DAY + timedelta(days=1)
        assert goals.lessons_completed == 0
        assert goals.xp_earned == 5
        assert goals.target_activities == 2

    def test_negative_xp_rejected(self, fresh_state: LearnerState) -> None:
        with pytest.raises(InvalidRewardError):
            record_daily_progress(fresh_state, "xp", DAY, xp=-1)
