# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Event type constants for MathQuest."""


class EventTypes:
    """Event types organized by domain."""

    class Progression:
        """Learner progression events.

        Every notification kind has an event type named
        ``progression.<kind>``; ``ANSWER_RECORDED`` is published for every
        answer and carries no learner-facing message.
        """

        ANSWER_RECORDED = "progression.answer_recorded"
        LEVEL_UP = "progression.level_up"
        STREAK = "progression.streak"
        BADGE = "progression.badge"
        UNLOCK = "progression.unlock"
        DAILY_GOAL = "progression.daily_goal"
        DIFFICULTY = "progression.difficulty"
        MASTERY = "progression.mastery"

        ALL = "progression.*"
