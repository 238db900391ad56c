# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Utility functions and helpers for MathQuest.

This package contains cross-cutting utilities:
- logging: Structured logging with structlog
- datetime: UTC, monotonic and calendar-day helpers
"""

from mathquest.utils.datetime import (
    days_between,
    local_today,
    monotonic_ms,
    utc_now,
)
from mathquest.utils.logging import bind_context, clear_context, get_logger, setup_logging

__all__ = [
    # Logging
    "setup_logging",
    "get_logger",
    "bind_context",
    "clear_context",
    # Datetime
    "utc_now",
    "monotonic_ms",
    "local_today",
    "days_between",
]
