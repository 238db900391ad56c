# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Infrastructure layer for external collaborators.

This package contains:
- events: In-memory notification bus for level-ups, unlocks and badges
- persistence: HTTP client for the progress backend (fire-and-forget)
"""
