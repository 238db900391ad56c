# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Append-only answer ledger.

The ledger is the single source of truth for accuracy. Events are never
edited or removed; readers get live views, so an event recorded after a
view was handed out is visible through that view on the next iteration.

Example:
    >>> ledger = AnswerLedger()
    >>> event = ledger.record("fractions", correct=True)
    >>> len(ledger.events_for("fractions"))
    1
"""

import logging
from collections.abc import Callable, Iterator, Sequence
from typing import overload

from mathquest.core.progression.exceptions import InvalidConceptError
from mathquest.core.progression.models import AnswerEvent
from mathquest.utils.datetime import monotonic_ms

logger = logging.getLogger(__name__)


class EventView(Sequence[AnswerEvent]):
    """Read-only, insertion-ordered view over ledger events.

    The view holds a reference to the ledger's backing list rather than a
    copy. It can be iterated any number of times.
    """

    def __init__(self, events: list[AnswerEvent]) -> None:
        self._events = events

    @overload
    def __getitem__(self, index: int) -> AnswerEvent: ...

    @overload
    def __getitem__(self, index: slice) -> Sequence[AnswerEvent]: ...

    def __getitem__(self, index: int | slice) -> AnswerEvent | Sequence[AnswerEvent]:
        if isinstance(index, slice):
            return tuple(self._events[index])
        return self._events[index]

    def __len__(self) -> int:
        return len(self._events)

    def __iter__(self) -> Iterator[AnswerEvent]:
        return iter(self._events)

    def __repr__(self) -> str:
        return f"EventView({len(self._events)} events)"


class AnswerLedger:
    """Append-only log of AnswerEvents for one learner.

    Attributes:
        clock: Callable returning monotonic milliseconds.
    """

    def __init__(self, clock: Callable[[], int] = monotonic_ms) -> None:
        """Initialize an empty ledger.

        Args:
            clock: Millisecond clock used to timestamp events.
        """
        self.clock = clock
        self._events: list[AnswerEvent] = []
        self._by_concept: dict[str, list[AnswerEvent]] = {}

    def record(self, concept: str, correct: bool) -> AnswerEvent:
        """Append one answer.

        Timestamps never decrease within a ledger, even if the clock does.

        Args:
            concept: Concept, chapter id, activity id or quiz topic.
            correct: Whether the answer was correct.

        Returns:
            The recorded event.

        Raises:
            InvalidConceptError: If the concept is empty or blank.
        """
        if not concept or not concept.strip():
            raise InvalidConceptError(
                "Answer concept must not be empty",
                details={"concept": concept},
            )

        timestamp = self.clock()
        if self._events and timestamp < self._events[-1].timestamp:
            timestamp = self._events[-1].timestamp

        event = AnswerEvent(concept=concept, correct=correct, timestamp=timestamp)
        self._events.append(event)
        self._by_concept.setdefault(concept, []).append(event)

        logger.debug(
            "Answer recorded: concept=%s, correct=%s, total=%s",
            concept,
            correct,
            len(self._events),
        )
        return event

    def events_for(self, concept: str) -> Sequence[AnswerEvent]:
        """Get a live view of one concept's events.

        An unseen concept yields an empty view that fills up once answers
        for it are recorded.
        """
        return EventView(self._by_concept.setdefault(concept, []))

    def events(self) -> Sequence[AnswerEvent]:
        """Get a live view of all events in recording order."""
        return EventView(self._events)

    def concepts(self) -> list[str]:
        """List concepts that have at least one event, in first-seen order."""
        return [concept for concept, events in self._by_concept.items() if events]

    def recent(self, n: int) -> list[AnswerEvent]:
        """Get the last ``n`` events, oldest first."""
        if n <= 0:
            return []
        return self._events[-n:]

    def __len__(self) -> int:
        return len(self._events)
