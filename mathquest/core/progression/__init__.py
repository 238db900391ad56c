# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Learner progression core for MathQuest.

Turns recorded answers and reward events into difficulty-tier changes,
chapter unlocking, mastery scores, XP, levels, streaks, daily goals and
badges.

Components:
- ledger: Append-only AnswerLedger
- accuracy: Overall, windowed and per-concept accuracy
- difficulty: DifficultyAdjuster tier state machine
- curriculum: Chapter catalogue loaded from YAML
- mastery: Lesson, activity and mastery quiz milestones with unlocking
- rewards: XP, level curve, streaks and daily goals
- badges: Answer-driven badge rules
- answers: Answer normalization and checking
- engine: ProgressionEngine facade owning one learner's state

Example:
    from mathquest.core.progression import ProgressionEngine, get_default_curriculum

    engine = ProgressionEngine(get_default_curriculum())
    engine.record_answer("fractions", correct=True)
    engine.complete_lesson("fractions")
"""

from mathquest.core.progression.accuracy import (
    mistake_patterns,
    overall_accuracy,
    per_concept_breakdown,
    practice_priorities,
    windowed_accuracy,
)
from mathquest.core.progression.answers import is_answer_correct, normalize_answer
from mathquest.core.progression.curriculum import (
    Activity,
    Chapter,
    Curriculum,
    get_default_curriculum,
    load_curriculum,
)
from mathquest.core.progression.difficulty import (
    DifficultyAdjuster,
    DifficultyThresholds,
    LevelAdjustment,
)
from mathquest.core.progression.engine import (
    AnswerResult,
    ProgressionEngine,
    ProgressSnapshot,
)
from mathquest.core.progression.exceptions import (
    CurriculumError,
    InvalidConceptError,
    InvalidRewardError,
    InvalidScoreError,
    ProgressionError,
    UnknownActivityError,
    UnknownChapterError,
)
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
    ChapterProgress,
    ConceptAccuracy,
    DailyGoals,
    DifficultyTier,
    LearnerState,
    Notification,
    NotificationKind,
)
from mathquest.core.progression.rewards import (
    XPAward,
    XPValues,
    add_xp,
    record_daily_progress,
    update_streak,
)

__all__ = [
    # Models
    "AnswerEvent",
    "Badge",
    "BadgeType",
    "ChapterProgress",
    "ConceptAccuracy",
    "DailyGoals",
    "DifficultyTier",
    "LearnerState",
    "Notification",
    "NotificationKind",
    # Ledger and accuracy
    "AnswerLedger",
    "overall_accuracy",
    "windowed_accuracy",
    "per_concept_breakdown",
    "mistake_patterns",
    "practice_priorities",
    # Difficulty
    "DifficultyAdjuster",
    "DifficultyThresholds",
    "LevelAdjustment",
    # Curriculum and mastery
    "Activity",
    "Chapter",
    "Curriculum",
    "get_default_curriculum",
    "load_curriculum",
    "MasteryEngine",
    "ActivityOutcome",
    "MasteryOutcome",
    # Rewards
    "XPAward",
    "XPValues",
    "add_xp",
    "update_streak",
    "record_daily_progress",
    # Answers
    "normalize_answer",
    "is_answer_correct",
    # Engine
    "ProgressionEngine",
    "AnswerResult",
    "ProgressSnapshot",
    # Exceptions
    "ProgressionError",
    "InvalidConceptError",
    "UnknownChapterError",
    "UnknownActivityError",
    "InvalidRewardError",
    "InvalidScoreError",
    "CurriculumError",
]
