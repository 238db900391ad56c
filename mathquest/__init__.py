"""MathQuest progression core.

Learner progression for a gamified fractions, decimals and percentages
course: answer tracking, adaptive difficulty, chapter mastery, XP, streaks
and badges, plus a thin HTTP surface around them.

Copyright (C) 2025 Global Digital Labs (gdlabs.io)
SPDX-License-Identifier: LGPL-3.0-or-later
"""

__version__ = "1.0.0"
