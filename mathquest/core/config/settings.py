# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Application configuration settings using Pydantic Settings.

This module provides centralized configuration management for MathQuest.
Settings are loaded from environment variables with sensible defaults.

The Settings class is the main entry point and aggregates all subsettings.
A singleton instance is provided via get_settings() for dependency injection.

Example:
    >>> from mathquest.core.config.settings import get_settings
    >>> settings = get_settings()
    >>> settings.progression.xp_activity
    50
"""

import math
from functools import lru_cache
from pathlib import Path
from typing import Literal, Self

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ProgressionSettings(BaseSettings):
    """Rules of the learner progression core.

    XP values, the level curve, the difficulty hysteresis band and the
    mastery bar all live here so a classroom deployment can tune them
    without code changes.

    Attributes:
        xp_lesson: XP for completing a chapter lesson.
        xp_activity: XP for completing an activity.
        xp_mastery: XP for passing a mastery quiz.
        xp_quiz_attempt: XP for a mastery quiz attempt below the bar.
        xp_daily_goal: XP for meeting all daily goals.
        xp_perfect_score: Bonus XP for a perfect activity score.
        initial_xp_threshold: XP needed to reach level 2.
        level_growth_factor: Multiplier applied to the threshold per level-up.
        promote_to_medium: Windowed accuracy (%) that moves easy to medium.
        promote_to_hard: Windowed accuracy (%) that moves medium to hard.
        demote_to_easy: Windowed accuracy (%) below which medium drops to easy.
        demote_to_medium: Windowed accuracy (%) below which hard drops to medium.
        min_samples: Answers needed at the current tier before any change.
        window_size: Number of recent answers the adjuster looks at.
        passing_score: Mastery quiz percentage that unlocks the next chapter,
            80-100.
        default_tier: Difficulty tier for a fresh learner.
        daily_target_lessons: Lessons per day for the daily goal.
        daily_target_activities: Activities per day for the daily goal.
        daily_target_xp: XP per day for the daily goal.
        max_notifications: Recent notifications kept per learner.
        curriculum_path: Optional YAML overlay for the chapter catalogue.
    """

    model_config = SettingsConfigDict(
        env_prefix="PROGRESSION_",
        extra="ignore",
    )

    xp_lesson: int = Field(default=20, ge=0)
    xp_activity: int = Field(default=50, ge=0)
    xp_mastery: int = Field(default=100, ge=0)
    xp_quiz_attempt: int = Field(default=30, ge=0)
    xp_daily_goal: int = Field(default=25, ge=0)
    xp_perfect_score: int = Field(default=10, ge=0)

    initial_xp_threshold: int = Field(default=100, ge=2)
    level_growth_factor: float = Field(default=1.5, gt=1.0)

    promote_to_medium: float = Field(default=80.0, ge=0.0, le=100.0)
    promote_to_hard: float = Field(default=90.0, ge=0.0, le=100.0)
    demote_to_easy: float = Field(default=50.0, ge=0.0, le=100.0)
    demote_to_medium: float = Field(default=60.0, ge=0.0, le=100.0)
    min_samples: int = Field(default=5, ge=1)
    window_size: int = Field(default=5, ge=1)

    passing_score: int = Field(default=80, ge=80, le=100)
    default_tier: Literal["easy", "medium", "hard"] = "medium"

    daily_target_lessons: int = Field(default=1, ge=0)
    daily_target_activities: int = Field(default=2, ge=0)
    daily_target_xp: int = Field(default=100, ge=0)

    max_notifications: int = Field(default=10, ge=1)
    curriculum_path: Path | None = None

    @model_validator(mode="after")
    def validate_hysteresis(self) -> Self:
        """Ensure each demotion threshold sits below its promotion threshold.

        Raises:
            ValueError: If a tier could be promoted and demoted by the same
                accuracy value.
        """
        if self.demote_to_easy >= self.promote_to_medium:
            raise ValueError(
                "demote_to_easy must be lower than promote_to_medium"
            )
        if self.demote_to_medium >= self.promote_to_hard:
            raise ValueError(
                "demote_to_medium must be lower than promote_to_hard"
            )
        return self

    @model_validator(mode="after")
    def validate_level_curve(self) -> Self:
        """Ensure every level-up raises the XP threshold.

        Thresholds only grow, so checking the first step covers all later
        ones.

        Raises:
            ValueError: If the first threshold does not grow.
        """
        first_step = math.floor(self.initial_xp_threshold * self.level_growth_factor)
        if first_step <= self.initial_xp_threshold:
            raise ValueError(
                "level_growth_factor must raise initial_xp_threshold by at least 1 XP"
            )
        return self


class PersistenceSettings(BaseSettings):
    """Progress backend configuration.

    The backend stores sessions, answered questions, badges and scores.
    Calls are fire-and-forget, so a short timeout keeps a slow backend
    from stalling request handling.

    Attributes:
        enabled: Whether to forward progress to the backend at all.
        base_url: Backend root URL.
        timeout: Request timeout in seconds.
    """

    model_config = SettingsConfigDict(
        env_prefix="PERSISTENCE_",
        extra="ignore",
    )

    enabled: bool = False
    base_url: str = "http://localhost:3001"
    timeout: float = 5.0


class CORSSettings(BaseSettings):
    """CORS configuration for API.

    Attributes:
        origins: Comma-separated list of allowed origins.
        allow_credentials: Whether to allow credentials.
        allow_methods: Allowed HTTP methods.
        allow_headers: Allowed HTTP headers.
    """

    model_config = SettingsConfigDict(
        env_prefix="CORS_",
        extra="ignore",
    )

    origins: str = "http://localhost:3000"
    allow_credentials: bool = True
    allow_methods: list[str] = ["*"]
    allow_headers: list[str] = ["*"]

    @property
    def origins_list(self) -> list[str]:
        """Parse origins string into a list."""
        return [origin.strip() for origin in self.origins.split(",") if origin.strip()]


class APISettings(BaseSettings):
    """API server configuration.

    Attributes:
        title: OpenAPI title.
        version: API version string.
        host: Host to bind to.
        port: Port to listen on.
        reload: Whether to enable auto-reload.
    """

    model_config = SettingsConfigDict(
        env_prefix="API_",
        extra="ignore",
    )

    title: str = "MathQuest Progression API"
    version: str = "1.0.0"
    host: str = "0.0.0.0"
    port: int = 3001
    reload: bool = False


class Settings(BaseSettings):
    """Main application settings.

    Attributes:
        environment: Deployment environment.
        debug: Enable debug mode.
        log_level: Logging level.
        progression: Progression rule settings.
        persistence: Progress backend settings.
        cors: CORS settings.
        api: API server settings.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    environment: Literal["development", "staging", "production"] = "development"
    debug: bool = True
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "DEBUG"

    progression: ProgressionSettings = Field(default_factory=ProgressionSettings)
    persistence: PersistenceSettings = Field(default_factory=PersistenceSettings)
    cors: CORSSettings = Field(default_factory=CORSSettings)
    api: APISettings = Field(default_factory=APISettings)

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    Call clear_settings_cache() if you need to reload settings.

    Returns:
        Cached Settings instance.
    """
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache.

    Call this if you need to reload settings from environment.
    Useful for testing or dynamic configuration updates.
    """
    get_settings.cache_clear()
