# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for badge rules and answer checking."""

import pytest

from mathquest.core.progression import (
    BadgeType,
    DifficultyTier,
    LearnerState,
    is_answer_correct,
    normalize_answer,
)
from mathquest.core.progression.badges import (
    FIRST_STEP,
    answer_badges,
    award_badge,
    master_badge_name,
)


class TestAnswerBadges:
    """Tests for answer_badges."""

    def test_first_correct_answer(self, make_events) -> None:
        earned = answer_badges(DifficultyTier.MEDIUM, make_events([True]), total_answers=1)

        assert earned == [(FIRST_STEP, BadgeType.BRONZE)]

    def test_first_answer_wrong(self, make_events) -> None:
        assert answer_badges(DifficultyTier.MEDIUM, make_events([False]), total_answers=1) == []

    def test_tier_master_on_four_of_five(self, make_events) -> None:
        events = make_events([True, False, True, True, True])

        earned = answer_badges(DifficultyTier.MEDIUM, events, total_answers=5)

        assert earned == [("Medium Master", BadgeType.GOLD)]

    def test_easy_master_is_silver(self, make_events) -> None:
        events = make_events([True] * 5)

        earned = answer_badges(DifficultyTier.EASY, events, total_answers=12)

        assert earned == [("Easy Master", BadgeType.SILVER)]

    def test_three_of_five_earns_nothing(self, make_events) -> None:
        events = make_events([True, False, True, False, True])

        assert answer_badges(DifficultyTier.HARD, events, total_answers=5) == []

    def test_master_badge_name(self) -> None:
        assert master_badge_name(DifficultyTier.HARD) == "Hard Master"


class TestAwardBadge:
    """Tests for award_badge."""

    def test_awards_new_badge(self, fresh_state: LearnerState) -> None:
        award = award_badge(fresh_state, "First Step")

        assert award.awarded is True
        assert award.state.has_badge("First Step")
        assert award.badge.badge_type == BadgeType.BRONZE

    def test_duplicate_is_noop(self, fresh_state: LearnerState) -> None:
        """Test that badges are unique by name."""
        state = award_badge(fresh_state, "Level Up!", BadgeType.GOLD).state

        again = award_badge(state, "Level Up!", BadgeType.SILVER)

        assert again.awarded is False
        assert again.state is state
        assert again.badge.badge_type == BadgeType.GOLD
        assert len(again.state.badges) == 1


class TestAnswerChecking:
    """Tests for answer normalization."""

    @pytest.mark.parametrize(
        ("answer", "expected", "correct"),
        [
            ("  Yes ", "yes", True),
            ("3/8", "3/8", True),
            ("2/4", "1/2", False),
            (".5", "0.5", False),
        ],
    )
    def test_is_answer_correct(self, answer: str, expected: str, correct: bool) -> None:
        assert is_answer_correct(answer, expected) is correct

    def test_normalize_answer(self) -> None:
        assert normalize_answer(" 6/8\n") == "6/8"
