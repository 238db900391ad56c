# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Answer comparison.

Answers are compared as lower-cased strings with surrounding whitespace
removed. Nothing else is normalized: "2/4" and "1/2" are different answers,
and so are "0.5" and ".5".
"""


def normalize_answer(text: str) -> str:
    """Lower-case and strip an answer for comparison."""
    return text.lower().strip()


def is_answer_correct(answer: str, correct_answer: str) -> bool:
    """Check a learner's answer against the expected one.

    Example:
        >>> is_answer_correct("  Yes ", "yes")
        True
    """
    return normalize_answer(answer) == normalize_answer(correct_answer)
