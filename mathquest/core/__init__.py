# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Core package for MathQuest.

This package contains the core business logic:
- config: Application configuration and settings
- progression: Learner progression state machine (answers, difficulty,
  mastery, XP, streaks, badges)
"""
