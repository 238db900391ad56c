# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Question models."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from mathquest.core.progression.answers import is_answer_correct


class QuestionType(str, Enum):
    """How a question is presented."""

    VISUAL = "visual"
    EQUIVALENT = "equivalent"
    OPERATION = "operation"
    WORD_PROBLEM = "word_problem"
    MULTIPLE_CHOICE = "multiple_choice"


class Question(BaseModel):
    """A practice question.

    Attributes:
        question: Question text.
        correct_answer: Expected answer, compared case-insensitively.
        hint: Hint shown on request.
        type: Presentation type.
        options: Choices for multiple-choice questions.
    """

    model_config = ConfigDict(frozen=True)

    question: str = Field(min_length=1)
    correct_answer: str
    hint: str = ""
    type: QuestionType = QuestionType.OPERATION
    options: list[str] = Field(default_factory=list)

    def check(self, answer: str) -> bool:
        """Check a learner's answer against this question."""
        return is_answer_correct(answer, self.correct_answer)
