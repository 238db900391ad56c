# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""DateTime utilities for MathQuest.

Two clocks matter to the progression core:

1. Wall-clock UTC time (``utc_now``) for timestamps that leave the process,
   such as badge ``earned_at`` and notification ``created_at``.
2. A monotonic millisecond clock (``monotonic_ms``) for answer events, so
   ordering inside a session never goes backwards when the system clock is
   adjusted.

Streaks and daily goals work on calendar days in the learner's local time
(``local_today``), matching how a student perceives "yesterday".

Usage:
------
    from mathquest.utils.datetime import utc_now, days_between

    earned_at: datetime = Field(default_factory=utc_now)
"""

import time
from datetime import date, datetime, timezone


def utc_now() -> datetime:
    """Get current UTC time as timezone-aware datetime.

    Returns:
        Timezone-aware datetime representing current UTC time.
    """
    return datetime.now(timezone.utc)


def monotonic_ms() -> int:
    """Get a monotonic timestamp in whole milliseconds.

    Returns:
        Milliseconds from an arbitrary fixed point; never decreases.
    """
    return time.monotonic_ns() // 1_000_000


def local_today() -> date:
    """Get today's calendar date in the local timezone."""
    return datetime.now().astimezone().date()


def days_between(earlier: date, later: date) -> int:
    """Count whole calendar days from ``earlier`` to ``later``.

    Args:
        earlier: Start date.
        later: End date.

    Returns:
        Day difference; negative when ``later`` precedes ``earlier``.
    """
    return (later - earlier).days
