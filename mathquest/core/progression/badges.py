# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Badge rules and awarding.

Badges are unique by name: awarding a badge the learner already holds is a
no-op. Rules checked after every answer:

- "First Step" (bronze): the learner's first answer is correct.
- "<Tier> Master": at least 5 answers at the current tier, at least 4 of
  them correct. Silver on easy, gold on medium and hard.

"Level Up!" (gold) is awarded by the engine when a promotion is applied.
"""

import logging
from collections.abc import Sequence
from datetime import datetime

from pydantic import BaseModel, ConfigDict

from mathquest.core.progression.models import (
    AnswerEvent,
    Badge,
    BadgeType,
    DifficultyTier,
    LearnerState,
)
from mathquest.utils.datetime import utc_now

logger = logging.getLogger(__name__)

FIRST_STEP = "First Step"
LEVEL_UP = "Level Up!"

MASTER_MIN_ANSWERS = 5
MASTER_MIN_CORRECT = 4


class BadgeAward(BaseModel):
    """Result of awarding a badge; ``awarded`` is False for duplicates."""

    model_config = ConfigDict(frozen=True)

    state: LearnerState
    badge: Badge
    awarded: bool


def master_badge_name(tier: DifficultyTier) -> str:
    """Name of the mastery badge for a tier, e.g. "Medium Master"."""
    return f"{tier.value.capitalize()} Master"


def answer_badges(
    tier: DifficultyTier,
    tier_events: Sequence[AnswerEvent],
    total_answers: int,
) -> list[tuple[str, BadgeType]]:
    """Badges earned by the answer just recorded.

    Args:
        tier: Current difficulty tier.
        tier_events: Answers recorded at the current tier, the new one last.
        total_answers: All answers in the ledger, including the new one.

    Returns:
        (name, type) pairs; may include badges the learner already holds.
    """
    earned: list[tuple[str, BadgeType]] = []
    if not tier_events:
        return earned

    if total_answers == 1 and tier_events[-1].correct:
        earned.append((FIRST_STEP, BadgeType.BRONZE))

    correct = sum(1 for event in tier_events if event.correct)
    if len(tier_events) >= MASTER_MIN_ANSWERS and correct >= MASTER_MIN_CORRECT:
        badge_type = BadgeType.SILVER if tier == DifficultyTier.EASY else BadgeType.GOLD
        earned.append((master_badge_name(tier), badge_type))

    return earned


def award_badge(
    state: LearnerState,
    name: str,
    badge_type: BadgeType = BadgeType.BRONZE,
    earned_at: datetime | None = None,
) -> BadgeAward:
    """Add a badge unless one with the same name is already held."""
    for existing in state.badges:
        if existing.name == name:
            return BadgeAward(state=state, badge=existing, awarded=False)

    badge = Badge(name=name, badge_type=badge_type, earned_at=earned_at or utc_now())
    logger.info("Badge awarded: name=%s, type=%s", name, badge_type.value)
    return BadgeAward(
        state=state.model_copy(update={"badges": (*state.badges, badge)}),
        badge=badge,
        awarded=True,
    )
