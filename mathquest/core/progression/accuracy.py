# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Accuracy aggregation over answer events.

Pure functions; nothing here holds state. Accuracy is a percentage in
[0, 100], and an empty event list counts as 100 so a learner who has not
answered anything yet is never treated as struggling.
"""

from collections.abc import Iterable, Sequence

from mathquest.core.progression.models import AnswerEvent, ConceptAccuracy

EMPTY_ACCURACY = 100.0


def overall_accuracy(events: Iterable[AnswerEvent]) -> float:
    """Percentage of correct answers across all events.

    Args:
        events: Answer events in any order.

    Returns:
        Accuracy in [0, 100]; 100.0 when there are no events.
    """
    total = 0
    correct = 0
    for event in events:
        total += 1
        if event.correct:
            correct += 1

    if total == 0:
        return EMPTY_ACCURACY
    return 100.0 * correct / total


def windowed_accuracy(events: Sequence[AnswerEvent], window_size: int = 5) -> float:
    """Accuracy over the most recent ``window_size`` events.

    Uses all events when fewer than ``window_size`` exist.

    Args:
        events: Answer events, oldest first.
        window_size: Number of trailing events to consider.

    Returns:
        Accuracy in [0, 100]; 100.0 when there are no events.

    Raises:
        ValueError: If window_size is less than 1.
    """
    if window_size < 1:
        raise ValueError(f"window_size must be at least 1, got {window_size}")
    return overall_accuracy(list(events)[-window_size:])


def per_concept_breakdown(events: Iterable[AnswerEvent]) -> dict[str, ConceptAccuracy]:
    """Correct/total counts per concept, ordered by practice need.

    Concepts with no correct answers come first, then concepts with more
    mistakes, then alphabetical by concept.

    Args:
        events: Answer events in any order.

    Returns:
        Mapping of concept to its ConceptAccuracy, in practice-need order.
    """
    counts: dict[str, list[int]] = {}
    for event in events:
        correct_total = counts.setdefault(event.concept, [0, 0])
        correct_total[1] += 1
        if event.correct:
            correct_total[0] += 1

    breakdown = [
        ConceptAccuracy(concept=concept, correct_count=correct, total_count=total)
        for concept, (correct, total) in counts.items()
    ]
    breakdown.sort(
        key=lambda item: (item.correct_count > 0, -item.mistake_count, item.concept)
    )
    return {item.concept: item for item in breakdown}


def mistake_patterns(events: Iterable[AnswerEvent]) -> dict[str, int]:
    """Count incorrect answers per concept.

    Concepts without mistakes are omitted.
    """
    patterns: dict[str, int] = {}
    for event in events:
        if not event.correct:
            patterns[event.concept] = patterns.get(event.concept, 0) + 1
    return patterns


def practice_priorities(events: Iterable[AnswerEvent], limit: int = 3) -> list[str]:
    """Concepts most in need of practice.

    Args:
        events: Answer events in any order.
        limit: Maximum number of concepts to return.

    Returns:
        Concepts with at least one mistake, most urgent first.
    """
    if limit < 1:
        return []
    return [
        concept
        for concept, item in per_concept_breakdown(events).items()
        if item.mistake_count > 0
    ][:limit]
