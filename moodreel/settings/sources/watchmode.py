"""Watchmode API configuration settings.

Streaming availability lookups by IMDb id.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class WatchmodeSettings(BaseSettings):
    """Watchmode API configuration.

    Attributes:
        api_key: Watchmode API key. Empty disables lookups.
        base_url: Watchmode API base URL.
        region: Region code sources are filtered to.
        max_sources: Sources returned per title.
        timeout: Request timeout (seconds).
    """

    api_key: str = Field(default="", alias="WATCHMODE_API_KEY")
    base_url: str = Field(default="https://api.watchmode.com/v1", alias="WATCHMODE_BASE_URL")
    region: str = Field(default="US", alias="WATCHMODE_REGION")
    max_sources: int = Field(default=5, ge=1, alias="WATCHMODE_MAX_SOURCES")
    timeout: float = Field(default=15.0, gt=0, alias="WATCHMODE_TIMEOUT")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def is_configured(self) -> bool:
        """Check if Watchmode API key is configured."""
        return bool(self.api_key)
