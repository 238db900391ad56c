# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Event infrastructure for MathQuest.

Components:
- EventBus: Synchronous in-memory pub/sub with pattern matching
- EventTypes: Event type constants
"""

from mathquest.infrastructure.events.bus import EventBus, EventData, EventHandler
from mathquest.infrastructure.events.types import EventTypes

__all__ = [
    "EventBus",
    "EventData",
    "EventHandler",
    "EventTypes",
]
