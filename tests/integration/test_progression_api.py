# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Integration tests for the progression API endpoints."""

from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient

from mathquest.api import create_app
from mathquest.core.config import PersistenceSettings, Settings

pytestmark = pytest.mark.integration


@pytest.fixture
def client() -> Generator[TestClient, None, None]:
    """Create a test client with the lifespan running."""
    settings = Settings(
        environment="development",
        debug=True,
        persistence=PersistenceSettings(enabled=False),
    )
    with TestClient(create_app(settings)) as client:
        yield client


@pytest.fixture
def session_id(client: TestClient) -> str:
    response = client.post("/api/v1/sessions", json={})
    assert response.status_code == 201
    return response.json()["session_id"]


def _answer(client: TestClient, session_id: str, **payload) -> dict:
    response = client.post(f"/api/v1/sessions/{session_id}/answers", json=payload)
    assert response.status_code == 200, response.text
    return response.json()


class TestHealth:
    """Tests for the health endpoint."""

    def test_health(self, client: TestClient) -> None:
        response = client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["active_sessions"] == 0
        assert data["persistence_enabled"] is False


class TestSessions:
    """Tests for session lifecycle endpoints."""

    def test_create_session(self, client: TestClient) -> None:
        response = client.post("/api/v1/sessions", json={"difficulty_tier": "beginner"})

        assert response.status_code == 201
        data = response.json()
        assert data["session_id"].startswith("session_")
        state = data["progress"]["state"]
        assert state["difficulty_tier"] == "easy"
        assert state["xp"] == 0
        assert state["level"] == 1

    def test_create_session_without_body(self, client: TestClient) -> None:
        response = client.post("/api/v1/sessions")

        assert response.status_code == 201
        assert response.json()["progress"]["state"]["difficulty_tier"] == "medium"

    def test_get_session(self, client: TestClient, session_id: str) -> None:
        response = client.get(f"/api/v1/sessions/{session_id}")

        assert response.status_code == 200
        assert response.json()["progress"]["total_answers"] == 0

    def test_unknown_session(self, client: TestClient) -> None:
        response = client.get("/api/v1/sessions/missing")

        assert response.status_code == 404

    def test_end_session(self, client: TestClient, session_id: str) -> None:
        response = client.delete(f"/api/v1/sessions/{session_id}")

        assert response.status_code == 204
        assert client.get(f"/api/v1/sessions/{session_id}").status_code == 404
        assert client.delete(f"/api/v1/sessions/{session_id}").status_code == 404


class TestAnswers:
    """Tests for answer recording."""

    def test_record_with_outcome(self, client: TestClient, session_id: str) -> None:
        data = _answer(client, session_id, concept="fractions", correct=True)

        assert data["correct"] is True
        assert data["points_earned"] == 20
        assert [badge["name"] for badge in data["badges"]] == ["First Step"]
        assert data["adjustment"]["should_change"] is False

    def test_answer_is_checked(self, client: TestClient, session_id: str) -> None:
        data = _answer(
            client,
            session_id,
            concept="fractions",
            answer=" 3/4 ",
            correct_answer="3/4",
        )

        assert data["correct"] is True

    def test_wrong_answer(self, client: TestClient, session_id: str) -> None:
        data = _answer(
            client,
            session_id,
            concept="fractions",
            answer="1/2",
            correct_answer="3/4",
        )

        assert data["correct"] is False
        assert data["points_earned"] == 0
        assert data["badges"] == []

    def test_outcome_required(self, client: TestClient, session_id: str) -> None:
        response = client.post(
            f"/api/v1/sessions/{session_id}/answers",
            json={"concept": "fractions", "answer": "3/4"},
        )

        assert response.status_code == 422

    def test_snapshot_after_answers(self, client: TestClient, session_id: str) -> None:
        _answer(client, session_id, concept="fractions", correct=True)
        _answer(client, session_id, concept="decimals", correct=False)

        progress = client.get(f"/api/v1/sessions/{session_id}").json()["progress"]

        assert progress["total_answers"] == 2
        assert progress["overall_accuracy"] == 50.0
        assert progress["practice_priorities"] == ["decimals"]


class TestDifficulty:
    """Tests for difficulty endpoints."""

    def test_promotion_recommended_and_applied(self, client: TestClient, session_id: str) -> None:
        for _ in range(5):
            _answer(client, session_id, concept="fractions", correct=True)

        response = client.get(f"/api/v1/sessions/{session_id}/difficulty")

        assert response.status_code == 200
        data = response.json()
        assert data["current_level"] == "medium"
        assert data["learning_level"] == "intermediate"
        assert data["adjustment"]["should_change"] is True
        assert data["adjustment"]["new_level"] == "hard"

        response = client.post(
            f"/api/v1/sessions/{session_id}/difficulty",
            json={"level": data["adjustment"]["new_level"]},
        )

        assert response.status_code == 200
        state = response.json()["state"]
        assert state["difficulty_tier"] == "hard"
        assert "Level Up!" in [badge["name"] for badge in state["badges"]]

    def test_apply_learning_level_name(self, client: TestClient, session_id: str) -> None:
        response = client.post(
            f"/api/v1/sessions/{session_id}/difficulty",
            json={"level": "beginner"},
        )

        assert response.json()["state"]["difficulty_tier"] == "easy"

    def test_apply_unknown_level(self, client: TestClient, session_id: str) -> None:
        response = client.post(
            f"/api/v1/sessions/{session_id}/difficulty",
            json={"level": "expert"},
        )

        assert response.status_code == 422


class TestMilestones:
    """Tests for curriculum milestone endpoints."""

    def test_complete_lesson(self, client: TestClient, session_id: str) -> None:
        response = client.post(f"/api/v1/sessions/{session_id}/lessons/fractions")

        assert response.status_code == 200
        state = response.json()["state"]
        assert state["chapters"]["fractions"]["lesson_completed"] is True
        assert state["xp"] == 20

    def test_complete_lesson_unknown_chapter(self, client: TestClient, session_id: str) -> None:
        response = client.post(f"/api/v1/sessions/{session_id}/lessons/algebra")

        assert response.status_code == 422
        assert "message" in response.json()["detail"]

    def test_complete_activity(self, client: TestClient, session_id: str) -> None:
        payload = {"chapter_id": "fractions", "activity_id": "number-line", "score": 100}

        first = client.post(f"/api/v1/sessions/{session_id}/activities", json=payload)
        second = client.post(f"/api/v1/sessions/{session_id}/activities", json=payload)

        assert first.status_code == 200
        assert first.json()["newly_completed"] is True
        assert second.json()["newly_completed"] is False
        assert second.json()["state"]["chapters"]["fractions"]["activities_completed"] == [
            "number-line"
        ]

    def test_unknown_activity(self, client: TestClient, session_id: str) -> None:
        response = client.post(
            f"/api/v1/sessions/{session_id}/activities",
            json={"chapter_id": "fractions", "activity_id": "long-division"},
        )

        assert response.status_code == 422

    def test_mastery_quiz_unlocks_next_chapter(self, client: TestClient, session_id: str) -> None:
        response = client.post(
            f"/api/v1/sessions/{session_id}/mastery-quiz",
            json={"chapter_id": "fractions", "percentage_score": 90},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["passed"] is True
        assert data["unlocked_chapter"] == "decimals"
        assert data["state"]["chapters"]["decimals"]["unlocked"] is True
        assert data["state"]["chapters"]["fractions"]["mastery_score"] == 90

    def test_mastery_quiz_below_bar(self, client: TestClient, session_id: str) -> None:
        response = client.post(
            f"/api/v1/sessions/{session_id}/mastery-quiz",
            json={"chapter_id": "fractions", "percentage_score": 79},
        )

        data = response.json()
        assert data["passed"] is False
        assert data["unlocked_chapter"] is None
        assert data["state"]["xp"] == 30

    def test_mastery_quiz_score_out_of_range(self, client: TestClient, session_id: str) -> None:
        response = client.post(
            f"/api/v1/sessions/{session_id}/mastery-quiz",
            json={"chapter_id": "fractions", "percentage_score": 120},
        )

        assert response.status_code == 422

    def test_rejection_is_warning_free(
        self, client: TestClient, session_id: str, recwarn: pytest.WarningsRecorder
    ) -> None:
        """Test that a 422 from the progression core raises no status-code deprecation."""
        response = client.post(
            f"/api/v1/sessions/{session_id}/activities",
            json={"chapter_id": "fractions", "activity_id": "long-division"},
        )

        assert response.status_code == 422
        assert not [w for w in recwarn if "HTTP_422" in str(w.message)]

    def test_streak(self, client: TestClient, session_id: str) -> None:
        url = f"/api/v1/sessions/{session_id}/streak"

        client.post(url, json={"today": "2024-03-11"})
        response = client.post(url, json={"today": "2024-03-12"})

        assert response.status_code == 200
        state = response.json()["state"]
        assert state["streak_days"] == 2
        assert state["last_activity_date"] == "2024-03-12"

    def test_save_score(self, client: TestClient, session_id: str) -> None:
        response = client.post(
            f"/api/v1/sessions/{session_id}/score",
            json={"time_spent": 120, "assessment_score": 75},
        )

        assert response.status_code == 200
        assert response.json() == {"session_id": session_id, "saved": True}


class TestStatelessEndpoints:
    """Tests for adapt-level and question endpoints."""

    def test_adapt_level_advance(self, client: TestClient) -> None:
        performance = [{"isCorrect": True}] * 4 + [{"isCorrect": False}]

        response = client.post(
            "/api/v1/adapt-level",
            json={"current_level": "beginner", "performance": performance},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["new_level"] == "medium"
        assert data["recommendation"] == "advance"
        assert data["accuracy"] == 80
        assert data["should_change"] is True

    def test_adapt_level_too_few_answers(self, client: TestClient) -> None:
        response = client.post(
            "/api/v1/adapt-level",
            json={"current_level": "hard", "performance": [{"is_correct": False}]},
        )

        data = response.json()
        assert data["recommendation"] == "continue"
        assert data["new_level"] == "hard"

    def test_question_for_easy_tier(self, client: TestClient) -> None:
        response = client.post("/api/v1/questions", json={"level": "easy"})

        assert response.status_code == 200
        assert response.json()["question"]["type"] == "visual"

    def test_question_for_medium_tier(self, client: TestClient) -> None:
        response = client.post(
            "/api/v1/questions",
            json={"level": "intermediate", "previous_performance": [True, False]},
        )

        assert response.json()["question"]["type"] != "visual"
