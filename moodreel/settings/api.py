"""API configuration settings.

FastAPI, rate limiting, and CORS settings.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class APISettings(BaseSettings):
    """FastAPI configuration.

    Attributes:
        host: API host address.
        port: API port.
        reload: Enable auto-reload in development.
        title: OpenAPI title.
        version: API version string.
        rate_limit_per_minute: Max requests per minute per client IP.
    """

    host: str = Field(default="0.0.0.0", alias="API_HOST")
    port: int = Field(default=8000, alias="API_PORT")
    reload: bool = Field(default=False, alias="API_RELOAD")
    title: str = Field(default="MoodReel API", alias="API_TITLE")
    version: str = Field(default="1.0.0", alias="API_VERSION")
    rate_limit_per_minute: int = Field(default=100, alias="RATE_LIMIT_PER_MINUTE")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


class CORSSettings(BaseSettings):
    """CORS configuration.

    Attributes:
        origins_raw: Comma-separated allowed origins.
    """

    origins_raw: str = Field(
        default="http://localhost:5173",
        alias="CORS_ORIGINS",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def origins(self) -> list[str]:
        """Parse origins from comma-separated string."""
        return [o.strip() for o in self.origins_raw.split(",") if o.strip()]
