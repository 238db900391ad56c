# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Question domain: question model and the fallback question bank."""

from mathquest.domains.questions.bank import FallbackQuestionBank, QuestionSource
from mathquest.domains.questions.models import Question, QuestionType

__all__ = [
    "FallbackQuestionBank",
    "Question",
    "QuestionSource",
    "QuestionType",
]
