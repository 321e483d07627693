"""Centralized configuration for the MoodReel service.

Configuration strategy:
- UPSTREAM credentials (TMDB, OMDb, Watchmode, Gemini): empty by default.
  A source without credentials is disabled and contributes no results.
- POLICY and INFRASTRUCTURE settings (search thresholds, cache, logging,
  API): safe defaults, override via .env as needed.

Usage:
    from moodreel.settings import settings

    settings.tmdb.api_key
    settings.search.thin_results_threshold
"""

from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from moodreel.settings.ai import GeminiSettings
from moodreel.settings.api import APISettings, CORSSettings
from moodreel.settings.base import LoggingSettings
from moodreel.settings.search import CacheSettings, SearchSettings
from moodreel.settings.sources import (
    OMDbSettings,
    TMDBSettings,
    TVMazeSettings,
    WatchmodeSettings,
)

__all__ = [
    # Main
    "Settings",
    "settings",
    # Base
    "LoggingSettings",
    # API
    "APISettings",
    "CORSSettings",
    # Sources
    "TMDBSettings",
    "OMDbSettings",
    "TVMazeSettings",
    "WatchmodeSettings",
    # Aggregation
    "SearchSettings",
    "CacheSettings",
    # AI
    "GeminiSettings",
    # Utilities
    "get_masked_settings",
    "sources_status",
]


# =============================================================================
# GLOBAL SETTINGS
# =============================================================================


class Settings(BaseSettings):
    """Global application settings.

    Aggregates all configuration sections into a single object.
    Access via the singleton: `from moodreel.settings import settings`
    """

    environment: str = Field(default="development", alias="ENVIRONMENT")
    debug: bool = Field(default=False, alias="DEBUG")

    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    # Upstream catalogs
    tmdb: TMDBSettings = Field(default_factory=TMDBSettings)
    omdb: OMDbSettings = Field(default_factory=OMDbSettings)
    tvmaze: TVMazeSettings = Field(default_factory=TVMazeSettings)
    watchmode: WatchmodeSettings = Field(default_factory=WatchmodeSettings)

    # Aggregation
    search: SearchSettings = Field(default_factory=SearchSettings)
    cache: CacheSettings = Field(default_factory=CacheSettings)

    # Mood interpretation
    gemini: GeminiSettings = Field(default_factory=GeminiSettings)

    # API
    api: APISettings = Field(default_factory=APISettings)
    cors: CORSSettings = Field(default_factory=CORSSettings)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Validate environment value."""
        valid_envs = {"development", "production", "test"}
        v_lower = v.lower()
        if v_lower not in valid_envs:
            raise ValueError(f"Invalid ENVIRONMENT. Valid: {valid_envs}")
        return v_lower


# =============================================================================
# SINGLETON INSTANCE
# =============================================================================

settings = Settings()


# =============================================================================
# UTILITY FUNCTIONS
# =============================================================================


def get_masked_settings() -> dict[str, Any]:
    """Return settings dict with sensitive values masked.

    Returns:
        Configuration dictionary safe for logging.
    """
    config = settings.model_dump()
    mask = "***MASKED***"

    secrets = [
        ("tmdb", "api_key"),
        ("omdb", "api_key"),
        ("watchmode", "api_key"),
        ("gemini", "api_key"),
    ]

    for section, key in secrets:
        if section in config and key in config[section] and config[section][key]:
            config[section][key] = mask

    return config


def sources_status() -> dict[str, bool]:
    """Report which upstream services are configured.

    Returns:
        Mapping of service name to configured flag.
    """
    return {
        "tmdb": settings.tmdb.is_configured,
        "omdb": settings.omdb.is_configured,
        "tvmaze": True,
        "watchmode": settings.watchmode.is_configured,
        "gemini": settings.gemini.is_configured,
    }
