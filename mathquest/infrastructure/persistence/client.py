# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""HTTP client for the progress backend.

The backend stores sessions, answered questions, badges and session scores
behind four JSON routes:

- POST /api/create-session -> {"success": true, "sessionId": "..."}
- POST /api/save-progress
- POST /api/award-badge
- POST /api/update-score

Every call is fire-and-forget. Connection errors, timeouts, non-2xx
responses and ``{"success": false}`` bodies are logged and reported as a
False/None return value.
"""

import logging
from typing import Any

import httpx

from mathquest.core.config.settings import PersistenceSettings
from mathquest.infrastructure.persistence.sink import ProgressRecord, ScoreReport

logger = logging.getLogger(__name__)


class ProgressClient:
    """Synchronous progress backend client.

    Example:
        client = ProgressClient(PersistenceSettings(base_url="http://localhost:3001"))
        session_id = client.create_session()
        client.save_badge(session_id, "First Step", "bronze")
    """

    def __init__(
        self,
        settings: PersistenceSettings,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            settings: Backend URL and timeout.
            transport: Optional httpx transport, e.g. a MockTransport in tests.
        """
        self._settings = settings
        self._transport = transport
        self._client: httpx.Client | None = None

    @property
    def base_url(self) -> str:
        """Backend root URL without a trailing slash."""
        return self._settings.base_url.rstrip("/")

    def _get_client(self) -> httpx.Client:
        """Get or create the HTTP client."""
        if self._client is None:
            self._client = httpx.Client(
                base_url=self.base_url,
                timeout=self._settings.timeout,
                headers={"Content-Type": "application/json"},
                transport=self._transport,
            )
        return self._client

    def _post(self, path: str, payload: dict[str, Any]) -> dict[str, Any] | None:
        """POST a JSON payload; returns the JSON body or None on any failure."""
        try:
            response = self._get_client().post(path, json=payload)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            logger.warning(
                "Progress backend returned %s for %s",
                e.response.status_code,
                path,
            )
            return None
        except httpx.RequestError as e:
            logger.warning("Connection error to progress backend (%s): %s", path, e)
            return None
        except ValueError as e:
            logger.warning("Invalid JSON from progress backend (%s): %s", path, e)
            return None

        if not isinstance(data, dict) or not data.get("success", False):
            error = data.get("error") if isinstance(data, dict) else data
            logger.warning("Progress backend rejected %s: %s", path, error)
            return None
        return data

    def create_session(self) -> str | None:
        """Create a backend session and return its id."""
        data = self._post("/api/create-session", {})
        if data is None:
            return None
        session_id = data.get("sessionId")
        logger.info("Progress session created: %s", session_id)
        return session_id

    def save_progress(self, session_id: str, record: ProgressRecord) -> bool:
        """Store one answered question."""
        payload = {"sessionId": session_id, **record.model_dump(by_alias=True)}
        return self._post("/api/save-progress", payload) is not None

    def save_badge(self, session_id: str, badge_name: str, badge_type: str) -> bool:
        """Store an earned badge."""
        payload = {
            "sessionId": session_id,
            "badgeName": badge_name,
            "badgeType": badge_type,
        }
        return self._post("/api/award-badge", payload) is not None

    def save_score(self, session_id: str, report: ScoreReport) -> bool:
        """Store or replace the session's score summary."""
        payload = {"sessionId": session_id, **report.model_dump(by_alias=True)}
        return self._post("/api/update-score", payload) is not None

    def close(self) -> None:
        """Close the underlying HTTP client."""
        if self._client is not None:
            self._client.close()
            self._client = None
