"""Pydantic schemas for mood interpretation."""

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator

from moodreel.aggregation.genres import normalize_genres
from moodreel.services.mood.config import DEFAULT_MOOD, MOODS


class Era(BaseModel):
    """Preferred release year range, serialized as ``{from, to}``."""

    year_from: int = Field(
        ge=1850,
        le=2100,
        validation_alias=AliasChoices("from", "year_from"),
        serialization_alias="from",
    )
    year_to: int = Field(
        ge=1850,
        le=2100,
        validation_alias=AliasChoices("to", "year_to"),
        serialization_alias="to",
    )

    @model_validator(mode="after")
    def order_years(self) -> "Era":
        """Swap reversed bounds."""
        if self.year_from > self.year_to:
            self.year_from, self.year_to = self.year_to, self.year_from
        return self


class MoodInterpretation(BaseModel):
    """Structured reading of a free-text mood description.

    Accepts both snake_case and the camelCase keys returned by the
    language model.

    Attributes:
        mood: One of the supported moods.
        preferred_genres: Canonical genres matching the mood.
        max_runtime_min: Maximum runtime in minutes.
        min_runtime_min: Minimum runtime in minutes.
        era: Preferred release year range.
        language_preference: Preferred original language code.
        confidence: Interpretation confidence (0-1).
    """

    model_config = ConfigDict(extra="ignore")

    mood: str = DEFAULT_MOOD
    preferred_genres: list[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("preferredGenres", "preferred_genres"),
    )
    max_runtime_min: int | None = Field(
        default=None,
        ge=0,
        validation_alias=AliasChoices("maxRuntimeMin", "max_runtime_min"),
    )
    min_runtime_min: int | None = Field(
        default=None,
        ge=0,
        validation_alias=AliasChoices("minRuntimeMin", "min_runtime_min"),
    )
    era: Era | None = None
    language_preference: str | None = Field(
        default=None,
        validation_alias=AliasChoices("languagePreference", "language_preference"),
    )
    confidence: float = Field(ge=0.0, le=1.0)

    @field_validator("mood", mode="before")
    @classmethod
    def coerce_mood(cls, v: Any) -> str:
        """Replace unsupported moods with the default mood."""
        mood = str(v or "").strip().lower()
        return mood if mood in MOODS else DEFAULT_MOOD

    @field_validator("preferred_genres")
    @classmethod
    def normalize_preferred_genres(cls, v: list[str]) -> list[str]:
        """Map genres onto the controlled vocabulary."""
        return normalize_genres(v)

    @field_validator("max_runtime_min", "min_runtime_min", mode="before")
    @classmethod
    def round_runtime(cls, v: Any) -> Any:
        """Model output may carry float minutes."""
        return round(v) if isinstance(v, float) else v

    @field_validator("language_preference")
    @classmethod
    def normalize_language(cls, v: str | None) -> str | None:
        """Lowercase language codes; blank means no preference."""
        if v is None:
            return None
        return v.strip().lower() or None
