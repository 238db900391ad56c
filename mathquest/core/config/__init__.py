# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Configuration package for MathQuest.

This package provides centralized configuration management:
- Settings: Pydantic-based settings loaded from environment variables
- YAML loader: Utilities for loading YAML configuration files

Example:
    >>> from mathquest.core.config import get_settings
    >>> settings = get_settings()
    >>> print(settings.environment)
    'development'
"""

from mathquest.core.config.settings import (
    APISettings,
    CORSSettings,
    PersistenceSettings,
    ProgressionSettings,
    Settings,
    clear_settings_cache,
    get_settings,
)
from mathquest.core.config.yaml_loader import (
    YAMLLoadError,
    deep_merge,
    load_layered,
    load_yaml,
)

__all__ = [
    # Settings
    "Settings",
    "get_settings",
    "clear_settings_cache",
    # Subsettings
    "ProgressionSettings",
    "PersistenceSettings",
    "CORSSettings",
    "APISettings",
    # YAML utilities
    "load_yaml",
    "deep_merge",
    "load_layered",
    "YAMLLoadError",
]
