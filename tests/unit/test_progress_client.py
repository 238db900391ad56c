# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for the progress backend client."""

import json
from collections.abc import Callable

import httpx
import pytest

from mathquest.core.config import PersistenceSettings
from mathquest.infrastructure.persistence import (
    NullProgressSink,
    ProgressClient,
    ProgressRecord,
    ProgressSink,
    ScoreReport,
    create_progress_sink,
)


def _client(handler: Callable[[httpx.Request], httpx.Response]) -> ProgressClient:
    return ProgressClient(
        PersistenceSettings(enabled=True, base_url="http://progress.test/"),
        transport=httpx.MockTransport(handler),
    )


class Backend:
    """Records requests and answers like the progress backend."""

    def __init__(self) -> None:
        self.requests: list[tuple[str, dict]] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content or b"{}")
        self.requests.append((request.url.path, body))
        if request.url.path == "/api/create-session":
            return httpx.Response(200, json={"success": True, "sessionId": "abc123"})
        return httpx.Response(200, json={"success": True})


@pytest.fixture
def backend() -> Backend:
    return Backend()


class TestProgressClient:
    """Tests for ProgressClient requests."""

    def test_create_session(self, backend: Backend) -> None:
        client = _client(backend)

        assert client.create_session() == "abc123"
        assert backend.requests == [("/api/create-session", {})]

    def test_save_progress_payload(self, backend: Backend) -> None:
        """Test that progress is sent with camelCase keys."""
        client = _client(backend)
        record = ProgressRecord(
            level=2,
            question_number=3,
            question="Add 1/3 + 1/6",
            answer="1/2",
            is_correct=True,
            points_earned=20,
        )

        assert client.save_progress("abc123", record) is True

        path, body = backend.requests[0]
        assert path == "/api/save-progress"
        assert body == {
            "sessionId": "abc123",
            "level": 2,
            "questionNumber": 3,
            "question": "Add 1/3 + 1/6",
            "answer": "1/2",
            "isCorrect": True,
            "pointsEarned": 20,
        }

    def test_save_badge_payload(self, backend: Backend) -> None:
        client = _client(backend)

        assert client.save_badge("abc123", "First Step", "bronze") is True
        assert backend.requests[0] == (
            "/api/award-badge",
            {"sessionId": "abc123", "badgeName": "First Step", "badgeType": "bronze"},
        )

    def test_save_score_payload(self, backend: Backend) -> None:
        client = _client(backend)
        report = ScoreReport(total_points=120, level1_score=80, level2_score=60, time_spent=300)

        assert client.save_score("abc123", report) is True

        path, body = backend.requests[0]
        assert path == "/api/update-score"
        assert body == {
            "sessionId": "abc123",
            "totalPoints": 120,
            "level1Score": 80.0,
            "level2Score": 60.0,
            "assessmentScore": None,
            "timeSpent": 300,
        }


class TestProgressClientFailures:
    """Tests that backend failures are reported, never raised."""

    def test_http_error(self) -> None:
        client = _client(lambda request: httpx.Response(500, json={"error": "boom"}))

        assert client.create_session() is None
        assert client.save_badge("abc123", "First Step", "bronze") is False

    def test_rejected_by_backend(self) -> None:
        client = _client(
            lambda request: httpx.Response(200, json={"success": False, "error": "Invalid"})
        )

        assert client.save_score("abc123", ScoreReport()) is False

    def test_connection_error(self) -> None:
        def refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client = _client(refuse)

        assert client.create_session() is None

    def test_invalid_json(self) -> None:
        client = _client(lambda request: httpx.Response(200, content=b"<html>"))

        assert client.save_badge("abc123", "First Step", "bronze") is False

    def test_close_is_idempotent(self, backend: Backend) -> None:
        client = _client(backend)
        client.create_session()

        client.close()
        client.close()


class TestCreateProgressSink:
    """Tests for create_progress_sink."""

    def test_disabled_returns_null_sink(self) -> None:
        sink = create_progress_sink(PersistenceSettings(enabled=False))

        assert isinstance(sink, NullProgressSink)
        assert isinstance(sink, ProgressSink)
        assert sink.create_session() is None

    def test_enabled_returns_client(self) -> None:
        sink = create_progress_sink(PersistenceSettings(enabled=True))

        assert isinstance(sink, ProgressClient)
        assert isinstance(sink, ProgressSink)
