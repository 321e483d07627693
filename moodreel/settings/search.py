"""Search aggregation settings.

Tunable constants for the multi-source search policy and the
result cache. Defaults preserve the historical values.
"""

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class SearchSettings(BaseSettings):
    """Multi-source search policy.

    Attributes:
        default_languages_raw: Languages tried when a request names none,
            in priority order.
        min_vote_average: Primary source quality floor (0-10).
        min_vote_count: Primary source vote count floor.
        default_year_from: Lower bound of the default era.
        default_year_to: Upper bound of the default era.
        thin_results_threshold: Primary result count below which the
            fallback sources are queried.
        classics_year_cutoff: Upper year bound below which the classic
            film source is always queried.
        regional_focus_raw: Regions served by the regional drama source.
        max_results: Results kept per content kind.
        call_timeout: Upper bound (seconds) for one adapter call.
        detail_concurrency: Parallel detail lookups per discover page.
        prefetch_availability: Fetch streaming sources after a search.
    """

    default_languages_raw: str = Field(default="hi,en,es,it,de", alias="SEARCH_DEFAULT_LANGUAGES")
    min_vote_average: float = Field(default=7.0, ge=0.0, le=10.0, alias="SEARCH_MIN_VOTE_AVERAGE")
    min_vote_count: int = Field(default=500, ge=0, alias="SEARCH_MIN_VOTE_COUNT")
    default_year_from: int = Field(default=1970, alias="SEARCH_DEFAULT_YEAR_FROM")
    default_year_to: int = Field(default=2005, alias="SEARCH_DEFAULT_YEAR_TO")
    thin_results_threshold: int = Field(default=5, ge=0, alias="SEARCH_THIN_RESULTS_THRESHOLD")
    classics_year_cutoff: int = Field(default=2000, alias="SEARCH_CLASSICS_YEAR_CUTOFF")
    regional_focus_raw: str = Field(
        default="Turkish,Pakistani,Korean",
        alias="SEARCH_REGIONAL_FOCUS",
    )
    max_results: int = Field(default=20, ge=1, alias="SEARCH_MAX_RESULTS")
    call_timeout: float = Field(default=20.0, gt=0, alias="SEARCH_CALL_TIMEOUT")
    detail_concurrency: int = Field(default=5, ge=1, alias="SEARCH_DETAIL_CONCURRENCY")
    prefetch_availability: bool = Field(default=True, alias="SEARCH_PREFETCH_AVAILABILITY")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @model_validator(mode="after")
    def validate_default_era(self) -> "SearchSettings":
        """Ensure the default era is an ordered range."""
        if self.default_year_from > self.default_year_to:
            raise ValueError("SEARCH_DEFAULT_YEAR_FROM must be <= SEARCH_DEFAULT_YEAR_TO")
        return self

    @property
    def default_languages(self) -> list[str]:
        """Parse default languages from comma-separated string."""
        return [lang.strip() for lang in self.default_languages_raw.split(",") if lang.strip()]

    @property
    def regional_focus(self) -> frozenset[str]:
        """Parse supported regional focus tags."""
        return frozenset(r.strip() for r in self.regional_focus_raw.split(",") if r.strip())


class CacheSettings(BaseSettings):
    """Result cache configuration.

    Attributes:
        ttl_seconds: Lifetime of a cached search.
        max_entries: Capacity before oldest entries are evicted.
        enabled: Disable to always hit upstream sources.
    """

    ttl_seconds: float = Field(default=900.0, gt=0, alias="CACHE_TTL_SECONDS")
    max_entries: int = Field(default=512, ge=1, alias="CACHE_MAX_ENTRIES")
    enabled: bool = Field(default=True, alias="CACHE_ENABLED")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("ttl_seconds")
    @classmethod
    def validate_ttl(cls, v: float) -> float:
        """Cap TTL at one day; the cache is process-local."""
        return min(v, 86400.0)
