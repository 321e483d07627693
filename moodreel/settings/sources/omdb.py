"""OMDb API configuration settings.

Secondary source: classic films and credit enrichment.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class OMDbSettings(BaseSettings):
    """OMDb API configuration.

    Attributes:
        api_key: OMDb API key. Empty disables the source.
        base_url: OMDb API base URL.
        timeout: Request timeout (seconds).
        max_retries: Attempts for timed-out requests.
        hits_per_keyword: Search hits resolved per classic keyword.
    """

    api_key: str = Field(default="", alias="OMDB_API_KEY")
    base_url: str = Field(default="http://www.omdbapi.com/", alias="OMDB_BASE_URL")
    timeout: float = Field(default=15.0, gt=0, alias="OMDB_TIMEOUT")
    max_retries: int = Field(default=2, ge=1, alias="OMDB_MAX_RETRIES")
    hits_per_keyword: int = Field(default=2, ge=1, alias="OMDB_HITS_PER_KEYWORD")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def is_configured(self) -> bool:
        """Check if OMDb API key is configured."""
        return bool(self.api_key)
