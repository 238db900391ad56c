# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Difficulty tier state machine.

Tiers move one step at a time based on windowed accuracy at the current
tier:

    easy   -> medium  when accuracy >= 80
    medium -> hard    when accuracy >= 90
    medium -> easy    when accuracy <  50
    hard   -> medium  when accuracy <  60

Promotion and demotion thresholds for the same tier never overlap, which
keeps a learner hovering near one boundary from flapping between tiers. No
transition fires until ``min_samples`` answers exist at the current tier.

The adjuster only recommends. Applying a new tier is an explicit call on
the ProgressionEngine so the UI can show the message first.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal

from pydantic import BaseModel, ConfigDict, Field

from mathquest.core.progression.accuracy import windowed_accuracy
from mathquest.core.progression.models import AnswerEvent, DifficultyTier

if TYPE_CHECKING:
    from mathquest.core.config.settings import ProgressionSettings

logger = logging.getLogger(__name__)

PROMOTION_MESSAGES = {
    DifficultyTier.MEDIUM: "🎉 Great progress! Moving to Intermediate level!",
    DifficultyTier.HARD: "🌟 Outstanding! You're ready for Advanced content!",
}

DEMOTION_MESSAGES = {
    DifficultyTier.EASY: "Let's build a stronger foundation with simpler examples!",
    DifficultyTier.MEDIUM: "Let's review some concepts with guided examples.",
}


@dataclass(frozen=True)
class DifficultyThresholds:
    """Accuracy thresholds (percent) and sampling rules for tier changes."""

    promote_to_medium: float = 80.0
    promote_to_hard: float = 90.0
    demote_to_easy: float = 50.0
    demote_to_medium: float = 60.0
    min_samples: int = 5
    window_size: int = 5

    def __post_init__(self) -> None:
        if self.demote_to_easy >= self.promote_to_medium:
            raise ValueError("demote_to_easy must be lower than promote_to_medium")
        if self.demote_to_medium >= self.promote_to_hard:
            raise ValueError("demote_to_medium must be lower than promote_to_hard")
        if self.min_samples < 1 or self.window_size < 1:
            raise ValueError("min_samples and window_size must be at least 1")

    @classmethod
    def from_settings(cls, settings: "ProgressionSettings") -> "DifficultyThresholds":
        """Build thresholds from progression settings."""
        return cls(
            promote_to_medium=settings.promote_to_medium,
            promote_to_hard=settings.promote_to_hard,
            demote_to_easy=settings.demote_to_easy,
            demote_to_medium=settings.demote_to_medium,
            min_samples=settings.min_samples,
            window_size=settings.window_size,
        )


class LevelAdjustment(BaseModel):
    """Recommendation produced by the adjuster.

    Attributes:
        should_change: Whether a tier change is recommended.
        new_level: Recommended tier; the current tier when unchanged.
        message: Learner-facing text, set only when the tier changes.
        accuracy: Accuracy (%) the decision was based on.
        sample_size: Number of answers the decision was based on.
        previous_level: Tier the decision started from.
    """

    model_config = ConfigDict(frozen=True)

    should_change: bool
    new_level: DifficultyTier
    message: str | None = None
    accuracy: float = Field(ge=0.0, le=100.0)
    sample_size: int = Field(ge=0)
    previous_level: DifficultyTier

    @property
    def recommendation(self) -> Literal["advance", "review", "continue"]:
        """Direction of the recommendation."""
        if not self.should_change:
            return "continue"
        if self.new_level.rank > self.previous_level.rank:
            return "advance"
        return "review"


class DifficultyAdjuster:
    """Recommends difficulty tier changes from accuracy."""

    def __init__(self, thresholds: DifficultyThresholds | None = None) -> None:
        self.thresholds = thresholds or DifficultyThresholds()

    def adjust(
        self,
        current: DifficultyTier,
        accuracy: float,
        sample_size: int,
    ) -> LevelAdjustment:
        """Decide the next tier from an accuracy value.

        Boundary values fire: exactly 80% on easy promotes to medium.

        Args:
            current: Current tier.
            accuracy: Accuracy (%) at the current tier.
            sample_size: Answers the accuracy was computed from.

        Returns:
            LevelAdjustment for the caller to show and possibly apply.
        """
        t = self.thresholds
        new_level = current
        message = None

        if sample_size >= t.min_samples:
            if current == DifficultyTier.EASY and accuracy >= t.promote_to_medium:
                new_level = DifficultyTier.MEDIUM
                message = PROMOTION_MESSAGES[new_level]
            elif current == DifficultyTier.MEDIUM and accuracy >= t.promote_to_hard:
                new_level = DifficultyTier.HARD
                message = PROMOTION_MESSAGES[new_level]
            elif current == DifficultyTier.MEDIUM and accuracy < t.demote_to_easy:
                new_level = DifficultyTier.EASY
                message = DEMOTION_MESSAGES[new_level]
            elif current == DifficultyTier.HARD and accuracy < t.demote_to_medium:
                new_level = DifficultyTier.MEDIUM
                message = DEMOTION_MESSAGES[new_level]

        adjustment = LevelAdjustment(
            should_change=new_level != current,
            new_level=new_level,
            message=message,
            accuracy=accuracy,
            sample_size=sample_size,
            previous_level=current,
        )

        if adjustment.should_change:
            logger.info(
                "Difficulty change recommended: %s -> %s (accuracy=%.1f, samples=%s)",
                current.value,
                new_level.value,
                accuracy,
                sample_size,
            )
        return adjustment

    def evaluate(
        self,
        current: DifficultyTier,
        events: Sequence[AnswerEvent],
    ) -> LevelAdjustment:
        """Decide the next tier from answers recorded at the current tier.

        Accuracy is taken over the last ``window_size`` events; the sample
        size is the number of answers at the tier.
        """
        accuracy = windowed_accuracy(events, self.thresholds.window_size)
        return self.adjust(current, accuracy, len(events))
