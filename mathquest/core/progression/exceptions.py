# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Exceptions raised by the progression core.

Invalid input is rejected rather than clamped: a negative XP amount, an
unknown chapter or an out-of-range quiz score always raises one of the
errors below, and the learner state is left untouched.
"""

from typing import Any


class ProgressionError(Exception):
    """Base exception for progression errors.

    Attributes:
        message: Error description.
        details: Additional error details.
    """

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class InvalidConceptError(ProgressionError):
    """Raised when an answer is recorded without a concept."""

    pass


class UnknownChapterError(ProgressionError):
    """Raised when a chapter id is not in the curriculum."""

    def __init__(self, chapter_id: str) -> None:
        self.chapter_id = chapter_id
        super().__init__(
            f"Unknown chapter: {chapter_id}",
            details={"chapter_id": chapter_id},
        )


class UnknownActivityError(ProgressionError):
    """Raised when an activity id does not belong to the chapter."""

    def __init__(self, chapter_id: str, activity_id: str) -> None:
        self.chapter_id = chapter_id
        self.activity_id = activity_id
        super().__init__(
            f"Unknown activity '{activity_id}' for chapter '{chapter_id}'",
            details={"chapter_id": chapter_id, "activity_id": activity_id},
        )


class InvalidRewardError(ProgressionError):
    """Raised when an XP amount is negative."""

    pass


class InvalidScoreError(ProgressionError):
    """Raised when a score falls outside 0-100."""

    pass


class CurriculumError(ProgressionError):
    """Raised when a curriculum catalogue is malformed."""

    pass
