"""TMDB API configuration settings.

Primary source: REST API for movie and TV metadata.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class TMDBSettings(BaseSettings):
    """TMDB API configuration.

    Attributes:
        api_key: TMDB API key (required for the primary source).
        base_url: TMDB API base URL.
        image_base_url: TMDB image CDN base URL.
        timeout: Request timeout (seconds).
        max_retries: Attempts for timed-out requests.
        cast_limit: Cast names kept from credits.
    """

    api_key: str = Field(default="", alias="TMDB_API_KEY")
    base_url: str = Field(
        default="https://api.themoviedb.org/3",
        alias="TMDB_BASE_URL",
    )
    image_base_url: str = Field(
        default="https://image.tmdb.org/t/p/w500",
        alias="TMDB_IMAGE_BASE_URL",
    )
    timeout: float = Field(default=15.0, gt=0, alias="TMDB_TIMEOUT")
    max_retries: int = Field(default=2, ge=1, alias="TMDB_MAX_RETRIES")
    cast_limit: int = Field(default=10, ge=1, alias="TMDB_CAST_LIMIT")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def is_configured(self) -> bool:
        """Check if TMDB API key is configured."""
        return bool(self.api_key and self.api_key != "your_api_key_here")
