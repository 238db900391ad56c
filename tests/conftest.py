# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Pytest configuration and shared fixtures.

This module provides fixtures used across all test types:
- Unit tests
- Integration tests
"""

from collections.abc import Callable, Generator
from datetime import date

import pytest

from mathquest.core.config import ProgressionSettings, Settings, clear_settings_cache
from mathquest.core.progression import (
    Curriculum,
    LearnerState,
    ProgressionEngine,
    get_default_curriculum,
)
from mathquest.core.progression.models import AnswerEvent
from mathquest.infrastructure.events import EventBus, EventData
from mathquest.infrastructure.persistence import ProgressRecord, ScoreReport


# =============================================================================
# Marker Configuration
# =============================================================================


def pytest_configure(config: pytest.Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test"
    )


# =============================================================================
# Settings Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def reset_settings_cache() -> Generator[None, None, None]:
    """Make sure no test sees settings cached by another."""
    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def progression_settings() -> ProgressionSettings:
    """Provide progression settings with the default rules."""
    return ProgressionSettings()


@pytest.fixture
def settings() -> Settings:
    """Provide application settings for tests."""
    return Settings(environment="development", debug=True, log_level="DEBUG")


# =============================================================================
# Clock Fixtures
# =============================================================================


class FakeClock:
    """Millisecond clock that advances by a fixed step on every read."""

    def __init__(self, start: int = 1_000, step: int = 10) -> None:
        self.value = start
        self.step = step

    def __call__(self) -> int:
        current = self.value
        self.value += self.step
        return current


class FakeCalendar:
    """Calendar whose day is moved explicitly by the test."""

    def __init__(self, today: date) -> None:
        self.today = today

    def __call__(self) -> date:
        return self.today


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def calendar() -> FakeCalendar:
    return FakeCalendar(date(2024, 3, 11))


# =============================================================================
# Progression Fixtures
# =============================================================================


@pytest.fixture
def curriculum() -> Curriculum:
    """Provide the packaged chapter catalogue."""
    return get_default_curriculum()


@pytest.fixture
def fresh_state(curriculum: Curriculum) -> LearnerState:
    """Provide the state of a learner who has not started."""
    return LearnerState.fresh(curriculum)


@pytest.fixture
def bus() -> EventBus:
    return EventBus()


@pytest.fixture
def published(bus: EventBus) -> list[EventData]:
    """Collect every progression event published on the bus."""
    events: list[EventData] = []
    bus.subscribe("progression.*", events.append)
    return events


class RecordingSink:
    """Progress sink that keeps everything it receives."""

    def __init__(self, session_id: str | None = "backend-session") -> None:
        self.session_id = session_id
        self.progress: list[tuple[str, ProgressRecord]] = []
        self.badges: list[tuple[str, str, str]] = []
        self.scores: list[tuple[str, ScoreReport]] = []
        self.closed = False

    def create_session(self) -> str | None:
        return self.session_id

    def save_progress(self, session_id: str, record: ProgressRecord) -> bool:
        self.progress.append((session_id, record))
        return True

    def save_badge(self, session_id: str, badge_name: str, badge_type: str) -> bool:
        self.badges.append((session_id, badge_name, badge_type))
        return True

    def save_score(self, session_id: str, report: ScoreReport) -> bool:
        self.scores.append((session_id, report))
        return True

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def engine(
    curriculum: Curriculum,
    bus: EventBus,
    sink: RecordingSink,
    clock: FakeClock,
    calendar: FakeCalendar,
) -> ProgressionEngine:
    """Provide an engine for a fresh learner with a fixed clock and calendar."""
    return ProgressionEngine(
        curriculum,
        bus=bus,
        sink=sink,
        session_id="session-1",
        clock=clock,
        today=calendar,
    )


@pytest.fixture
def make_events() -> Callable[..., list[AnswerEvent]]:
    """Build answer events from a pattern of outcomes.

    Example:
        make_events([True, False], concept="fractions")
    """

    def _make(outcomes: list[bool], concept: str = "fractions") -> list[AnswerEvent]:
        return [
            AnswerEvent(concept=concept, correct=correct, timestamp=index)
            for index, correct in enumerate(outcomes)
        ]

    return _make
