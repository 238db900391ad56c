# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Progress persistence for MathQuest.

Components:
- ProgressSink: Protocol implemented by every progress receiver
- ProgressClient: httpx client for the progress backend
- NullProgressSink: No-op sink used when persistence is disabled
"""

from mathquest.core.config.settings import PersistenceSettings
from mathquest.infrastructure.persistence.client import ProgressClient
from mathquest.infrastructure.persistence.sink import (
    NullProgressSink,
    ProgressRecord,
    ProgressSink,
    ScoreReport,
)


def create_progress_sink(settings: PersistenceSettings) -> ProgressSink:
    """Create the configured sink: a ProgressClient when enabled."""
    if settings.enabled:
        return ProgressClient(settings)
    return NullProgressSink()


__all__ = [
    "NullProgressSink",
    "ProgressClient",
    "ProgressRecord",
    "ProgressSink",
    "ScoreReport",
    "create_progress_sink",
]
