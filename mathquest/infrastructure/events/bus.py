# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""In-memory notification bus for MathQuest.

The progression engine publishes learner-facing notifications (level-ups,
streaks, badges, unlocks, daily goals, difficulty changes) here instead of
calling UI code directly. Subscribers are plain callables and run
synchronously, in subscription order, inside ``publish``.

Subscriptions match either an exact event type
("progression.level_up") or a wildcard pattern ("progression.*").

Example:
    from mathquest.infrastructure.events import EventBus, EventTypes

    bus = EventBus()

    def on_level_up(event):
        print(event.payload["message"])

    bus.subscribe(EventTypes.Progression.LEVEL_UP, on_level_up)
    bus.publish(EventTypes.Progression.LEVEL_UP, {"message": "Level 2!"})
"""

import fnmatch
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any
from uuid import uuid4

from mathquest.utils.datetime import utc_now

logger = logging.getLogger(__name__)

# Type alias for event handlers
EventHandler = Callable[["EventData"], None]


@dataclass
class EventData:
    """Published event with metadata.

    Attributes:
        event_type: The event type string.
        payload: Event data.
        event_id: Unique event identifier.
        timestamp: When the event was published.
        session_id: Learner session the event belongs to, if any.
    """

    event_type: str
    payload: dict[str, Any]
    event_id: str = field(default_factory=lambda: str(uuid4()))
    timestamp: datetime = field(default_factory=utc_now)
    session_id: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "event_id": self.event_id,
            "event_type": self.event_type,
            "payload": self.payload,
            "timestamp": self.timestamp.isoformat(),
            "session_id": self.session_id,
        }


def _is_pattern(event_type: str) -> bool:
    return "*" in event_type or "?" in event_type


class EventBus:
    """Synchronous in-memory event bus with wildcard subscriptions.

    A handler that raises is logged and skipped; the remaining handlers
    still run and ``publish`` never raises because of a subscriber.
    """

    def __init__(self) -> None:
        self._handlers: dict[str, list[EventHandler]] = {}
        self._pattern_handlers: dict[str, list[EventHandler]] = {}
        self._event_count = 0

    def subscribe(self, event_type: str, handler: EventHandler) -> None:
        """Subscribe a handler to an event type or wildcard pattern."""
        registry = self._pattern_handlers if _is_pattern(event_type) else self._handlers
        registry.setdefault(event_type, []).append(handler)
        logger.debug("Subscribed handler to: %s", event_type)

    def unsubscribe(self, event_type: str, handler: EventHandler) -> bool:
        """Remove a handler.

        Returns:
            True if the handler was subscribed to ``event_type``.
        """
        registry = self._pattern_handlers if _is_pattern(event_type) else self._handlers
        handlers = registry.get(event_type)
        if not handlers or handler not in handlers:
            return False

        handlers.remove(handler)
        if not handlers:
            del registry[event_type]
        return True

    def publish(
        self,
        event_type: str,
        payload: dict[str, Any],
        session_id: str | None = None,
    ) -> EventData:
        """Publish an event to every matching subscriber.

        Args:
            event_type: The event type string.
            payload: Event data.
            session_id: Learner session the event belongs to.

        Returns:
            The published EventData.
        """
        event = EventData(event_type=event_type, payload=payload, session_id=session_id)
        self._event_count += 1

        handlers = list(self._handlers.get(event_type, ()))
        for pattern, pattern_handlers in self._pattern_handlers.items():
            if fnmatch.fnmatch(event_type, pattern):
                handlers.extend(pattern_handlers)

        if not handlers:
            logger.debug("No handlers for event: %s", event_type)
            return event

        logger.debug("Publishing event %s to %d handlers", event_type, len(handlers))
        for handler in handlers:
            try:
                handler(event)
            except Exception as e:
                logger.error(
                    "Handler error for event %s: %s",
                    event_type,
                    str(e),
                    exc_info=True,
                )
        return event

    def clear(self) -> None:
        """Remove all subscriptions."""
        self._handlers.clear()
        self._pattern_handlers.clear()

    def get_stats(self) -> dict[str, Any]:
        """Get subscription and event counts."""
        exact_count = sum(len(h) for h in self._handlers.values())
        pattern_count = sum(len(h) for h in self._pattern_handlers.values())
        return {
            "exact_subscriptions": len(self._handlers),
            "pattern_subscriptions": len(self._pattern_handlers),
            "total_handlers": exact_count + pattern_count,
            "events_published": self._event_count,
        }
