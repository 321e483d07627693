"""TVmaze API configuration settings.

Tertiary source: regional TV dramas. No API key required.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class TVMazeSettings(BaseSettings):
    """TVmaze API configuration.

    Attributes:
        base_url: TVmaze API base URL.
        timeout: Request timeout (seconds).
        max_retries: Attempts for timed-out requests.
        regional_hits: Shows kept per regional query.
        genre_hits: Shows kept per genre query.
        cast_limit: Cast names kept per show.
    """

    base_url: str = Field(default="https://api.tvmaze.com", alias="TVMAZE_BASE_URL")
    timeout: float = Field(default=15.0, gt=0, alias="TVMAZE_TIMEOUT")
    max_retries: int = Field(default=2, ge=1, alias="TVMAZE_MAX_RETRIES")
    regional_hits: int = Field(default=5, ge=1, alias="TVMAZE_REGIONAL_HITS")
    genre_hits: int = Field(default=8, ge=1, alias="TVMAZE_GENRE_HITS")
    cast_limit: int = Field(default=10, ge=1, alias="TVMAZE_CAST_LIMIT")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )
