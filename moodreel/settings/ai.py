"""Mood interpretation model configuration."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class GeminiSettings(BaseSettings):
    """Gemini generateContent configuration.

    Attributes:
        api_key: Gemini API key. Empty disables the model call.
        model: Model name ("gemini-2.5-pro" or "gemini-2.5-flash").
        base_url: Generative Language API base URL.
        timeout_seconds: Request timeout.
    """

    api_key: str = Field(default="", alias="GEMINI_API_KEY")
    model: str = Field(default="gemini-2.5-pro", alias="GEMINI_MODEL")
    base_url: str = Field(
        default="https://generativelanguage.googleapis.com/v1beta",
        alias="GEMINI_BASE_URL",
    )
    timeout_seconds: float = Field(default=30.0, alias="GEMINI_TIMEOUT")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def is_configured(self) -> bool:
        """Check if the Gemini API key is configured."""
        return bool(self.api_key)
