# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Fallback question bank.

Serves a fixed set of fraction questions when no generated question is
available. Easy learners get level 1 visual questions (select a fraction of
a set of objects); medium and hard learners get level 2 questions
(equivalence, operations, word problems).
"""

import logging
import random
from collections.abc import Sequence
from typing import Protocol

from mathquest.core.progression.models import DifficultyTier
from mathquest.domains.questions.models import Question, QuestionType

logger = logging.getLogger(__name__)

LEVEL_1_QUESTIONS: tuple[Question, ...] = (
    Question(
        question="Select 3/4 of the pizza slices. Click on the slices to choose them.",
        type=QuestionType.VISUAL,
        correct_answer="6/8",
        hint="3/4 means 3 out of every 4 pieces. With 8 slices total, you need 6 slices.",
    ),
    Question(
        question="Pick 2/3 of the cookies from the jar. Click to select them.",
        type=QuestionType.VISUAL,
        correct_answer="8/12",
        hint="2/3 means 2 out of every 3 cookies. With 12 cookies, you need 8 cookies.",
    ),
    Question(
        question="Choose 1/2 of the books on the shelf. Select the books.",
        type=QuestionType.VISUAL,
        correct_answer="5/10",
        hint="1/2 means half of the total. With 10 books, you need 5 books.",
    ),
    Question(
        question="Select 5/6 of the balloons. Click to pick them.",
        type=QuestionType.VISUAL,
        correct_answer="5/6",
        hint="5/6 means 5 out of 6 balloons. Select 5 balloons.",
    ),
)

LEVEL_2_QUESTIONS: tuple[Question, ...] = (
    Question(
        question="Is 2/4 equal to 1/2?",
        type=QuestionType.EQUIVALENT,
        correct_answer="yes",
        hint="Simplify 2/4 by dividing both numbers by 2.",
    ),
    Question(
        question="Add 1/3 + 1/6",
        type=QuestionType.OPERATION,
        correct_answer="1/2",
        hint="Find a common denominator. 6 is a common denominator for both.",
    ),
    Question(
        question=(
            "If Meru school shares 5/8 of playground time for sports, "
            "how much is left for recess?"
        ),
        type=QuestionType.WORD_PROBLEM,
        correct_answer="3/8",
        hint="The whole playground time is 8/8. Subtract 5/8 from 8/8.",
    ),
)

CORRECT_FEEDBACK = (
    "Well done! Fractions help us share things fairly in everyday life, "
    "like dividing a chocolate bar among friends."
)
INCORRECT_FEEDBACK = (
    "Not quite right, but keep trying! Remember to think about equal parts. "
    "You're doing great!"
)


class QuestionSource(Protocol):
    """Anything that can produce a question for a tier."""

    def generate(
        self,
        tier: DifficultyTier,
        recent_performance: Sequence[bool] | None = None,
    ) -> Question: ...


class FallbackQuestionBank:
    """Picks questions at random from the fixed bank.

    ``recent_performance`` is accepted for interface compatibility with
    generated sources; the fixed bank does not use it.
    """

    def __init__(self, rng: random.Random | None = None) -> None:
        self._rng = rng or random.Random()

    @staticmethod
    def questions_for(tier: DifficultyTier) -> tuple[Question, ...]:
        """Questions served for a tier."""
        if tier == DifficultyTier.EASY:
            return LEVEL_1_QUESTIONS
        return LEVEL_2_QUESTIONS

    def generate(
        self,
        tier: DifficultyTier,
        recent_performance: Sequence[bool] | None = None,
    ) -> Question:
        question = self._rng.choice(self.questions_for(tier))
        logger.debug("Fallback question served: tier=%s, type=%s", tier.value, question.type.value)
        return question

    @staticmethod
    def feedback(correct: bool) -> str:
        """Encouraging feedback text for an answer."""
        return CORRECT_FEEDBACK if correct else INCORRECT_FEEDBACK
