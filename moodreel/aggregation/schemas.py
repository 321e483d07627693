"""Pydantic schemas for multi-source aggregation.

Defines the partial records produced by source adapters, the unified
content records (a tagged union of movies and TV series) and the
immutable search options shared by every adapter within one search.
"""

from typing import Annotated, Any, Literal

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    field_validator,
    model_validator,
)

from moodreel.aggregation.genres import normalize_genres

# =============================================================================
# CONSTANTS
# =============================================================================

ContentKind = Literal["movie", "tv"]

KIND_MOVIE: ContentKind = "movie"
KIND_TV: ContentKind = "tv"
ALL_KINDS: tuple[ContentKind, ...] = (KIND_MOVIE, KIND_TV)

CLASSICS_YEAR_FLOOR = 1900
"""Lower year bound applied to classics-only searches without one."""

CLASSICS_YEAR_CAP = 1990
"""Upper year bound forced onto classics-only searches."""

IDENTITY_FIELDS = frozenset({"id", "title", "kind"})
"""Fields always taken from the primary record."""

ENRICHMENT_FIELDS = frozenset(
    {"cast", "director", "writers", "awards_text", "external_rating", "critic_rating"}
)
"""Fields where the specialised (secondary) source wins."""

PROVENANCE_FIELDS = frozenset({"source_name", "sources"})
"""Lineage fields computed by the merge engine."""

_NO_REGION = {"", "global"}


# =============================================================================
# PARTIAL RECORDS
# =============================================================================


class PartialContent(BaseModel):
    """One source's view of a title.

    Only fields the source actually supplied are *present*; presence is
    read from ``model_fields_set`` so an absent field is never confused
    with an explicit zero or empty value.

    Attributes:
        id: Source-local identifier (not comparable across sources).
        title: Display title.
        kind: Content kind discriminant.
        source_name: Adapter that produced the record.
        external_id: IMDb identifier, the only cross-source join key.
    """

    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True, frozen=True)

    # Identity
    id: int = Field(gt=0)
    title: str = Field(min_length=1, max_length=500)
    kind: ContentKind
    source_name: str = Field(min_length=1)

    # Descriptive
    original_title: str | None = None
    overview: str | None = None
    poster_path: str | None = None
    backdrop_path: str | None = None
    release_date: str | None = None
    first_air_date: str | None = None
    runtime: int | None = Field(default=None, ge=0)
    vote_average: float | None = Field(default=None, ge=0.0, le=10.0)
    vote_count: int | None = Field(default=None, ge=0)
    genres: list[str] | None = None
    original_language: str | None = None
    spoken_languages: list[str] | None = None
    is_dubbed: bool | None = None
    external_id: str | None = None

    # TV specific
    number_of_seasons: int | None = Field(default=None, ge=0)
    number_of_episodes: int | None = Field(default=None, ge=0)
    episode_runtimes: list[int] | None = None
    status: str | None = None
    network: str | None = None

    # Enrichment
    cast: list[str] | None = None
    director: str | None = None
    writers: list[str] | None = None
    awards_text: str | None = None
    external_rating: float | None = Field(default=None, ge=0.0, le=10.0)
    critic_rating: str | None = None

    @field_validator("genres")
    @classmethod
    def normalize_genre_labels(cls, v: list[str] | None) -> list[str] | None:
        """Map genres onto the controlled vocabulary."""
        return None if v is None else normalize_genres(v)


# =============================================================================
# UNIFIED CONTENT
# =============================================================================


class ContentBase(BaseModel):
    """Fields shared by every content kind.

    Defaults only fill fields no contributing source supplied; the
    ``model_fields_set`` of a record still reflects what was supplied.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    id: int
    title: str
    source_name: str
    sources: list[str] = Field(default_factory=list)

    original_title: str | None = None
    overview: str = ""
    poster_path: str | None = None
    backdrop_path: str | None = None
    vote_average: float = Field(default=0.0, ge=0.0, le=10.0)
    vote_count: int = Field(default=0, ge=0)
    genres: list[str] = Field(default_factory=list)
    original_language: str = "en"
    spoken_languages: list[str] | None = None
    is_dubbed: bool | None = None
    external_id: str | None = None

    cast: list[str] | None = None
    director: str | None = None
    writers: list[str] | None = None
    awards_text: str | None = None
    external_rating: float | None = Field(default=None, ge=0.0, le=10.0)
    critic_rating: str | None = None

    @property
    def origin(self) -> str:
        """Source whose numbering space ``id`` belongs to."""
        return self.sources[0] if self.sources else self.source_name

    @property
    def identity_key(self) -> tuple[str, int]:
        """Per-source identity used for deduplication."""
        return (self.origin, self.id)

    @property
    def year(self) -> int | None:
        """Release or first-air year when known."""
        return parse_year(self.date)

    @property
    def date(self) -> str:
        """Release or first-air date (overridden per kind)."""
        return ""


class Movie(ContentBase):
    """Feature film."""

    kind: Literal["movie"] = "movie"
    release_date: str = ""
    runtime: int | None = Field(default=None, ge=0)

    @property
    def date(self) -> str:
        return self.release_date


class TVSeries(ContentBase):
    """Television series."""

    kind: Literal["tv"] = "tv"
    first_air_date: str = ""
    number_of_seasons: int | None = Field(default=None, ge=0)
    number_of_episodes: int | None = Field(default=None, ge=0)
    episode_runtimes: list[int] | None = None
    status: str | None = None
    network: str | None = None

    @property
    def date(self) -> str:
        return self.first_air_date


Content = Annotated[Movie | TVSeries, Field(discriminator="kind")]
"""Unified record, discriminated by ``kind``."""

ContentRecord = PartialContent | Movie | TVSeries
"""Anything the merge engine accepts."""

CONTENT_ADAPTER: TypeAdapter[Movie | TVSeries] = TypeAdapter(Content)


def build_content(data: dict[str, Any]) -> Movie | TVSeries:
    """Validate a plain dict into the matching content variant.

    Args:
        data: Field values including the ``kind`` discriminant.

    Returns:
        Movie or TVSeries record.
    """
    return CONTENT_ADAPTER.validate_python(data)


def lineage(record: ContentRecord) -> list[str]:
    """Ordered list of sources that contributed to a record."""
    match record:
        case Movie() | TVSeries():
            return list(record.sources) or [record.source_name]
        case PartialContent():
            return [record.source_name]
        case _:
            raise TypeError(f"Unsupported record type: {type(record).__name__}")


def present_fields(record: ContentRecord) -> dict[str, Any]:
    """Return the supplied (present) fields of a record.

    Provenance fields are excluded; they are recomputed on merge.
    """
    return {
        name: getattr(record, name)
        for name in record.model_fields_set
        if name not in PROVENANCE_FIELDS
    }


def to_content(partial: PartialContent) -> Movie | TVSeries:
    """Promote a single-source partial record to a content record."""
    data = present_fields(partial)
    data["kind"] = partial.kind
    data["source_name"] = partial.source_name
    data["sources"] = [partial.source_name]
    return build_content(data)


def parse_year(value: str | None) -> int | None:
    """Extract a four digit year from a date-like string.

    Handles ISO dates ("1972-03-14"), OMDb dates ("24 Mar 1972")
    and bare years ("1972", "2010–2014").
    """
    if not value:
        return None
    digits = ""
    for char in value:
        if char.isdigit():
            digits += char
            if len(digits) == 4:
                break
        else:
            digits = ""
    if len(digits) != 4:
        # OMDb style "24 Mar 1972": last token carries the year
        tail = value.strip().split(" ")[-1]
        return int(tail) if len(tail) == 4 and tail.isdigit() else None
    return int(digits)


# =============================================================================
# SEARCH OPTIONS
# =============================================================================


class SearchOptions(BaseModel):
    """Normalized, source-agnostic search request.

    Immutable once constructed; the sole shared input to all
    adapters within one search.

    Attributes:
        genres: Target genres (controlled vocabulary).
        languages: Original languages, each tried independently.
        year_from: Lower release year bound.
        year_to: Upper release year bound.
        min_runtime: Minimum runtime in minutes.
        max_runtime: Maximum runtime in minutes.
        content_kind: movie, tv, or None for both.
        regional_focus: Named drama-producing region.
        old_classics_only: Force the upper year bound down.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    genres: tuple[str, ...] = ()
    languages: tuple[str, ...] = ()
    year_from: int | None = Field(default=None, ge=1850, le=2100)
    year_to: int | None = Field(default=None, ge=1850, le=2100)
    min_runtime: int | None = Field(default=None, ge=0)
    max_runtime: int | None = Field(default=None, ge=0)
    content_kind: ContentKind | None = None
    regional_focus: str | None = None
    old_classics_only: bool = False

    @model_validator(mode="before")
    @classmethod
    def apply_classics_bounds(cls, data: Any) -> Any:
        """Clamp the year range for classics-only searches."""
        if not isinstance(data, dict) or not data.get("old_classics_only"):
            return data
        data = dict(data)
        data["year_from"] = data.get("year_from") or CLASSICS_YEAR_FLOOR
        data["year_to"] = min(data.get("year_to") or CLASSICS_YEAR_CAP, CLASSICS_YEAR_CAP)
        return data

    @field_validator("genres", mode="before")
    @classmethod
    def normalize_genre_set(cls, v: Any) -> tuple[str, ...]:
        """Normalize genres, preserving first-seen order."""
        return tuple(normalize_genres(_as_sequence(v)))

    @field_validator("languages", mode="before")
    @classmethod
    def normalize_language_set(cls, v: Any) -> tuple[str, ...]:
        """Lowercase and de-duplicate language codes."""
        result: list[str] = []
        for lang in _as_sequence(v):
            code = lang.strip().lower()
            if code and code not in result:
                result.append(code)
        return tuple(result)

    @field_validator("regional_focus")
    @classmethod
    def normalize_region(cls, v: str | None) -> str | None:
        """Treat blank and "Global" focus as no focus."""
        if v is None or v.strip().lower() in _NO_REGION:
            return None
        return v.strip()

    @model_validator(mode="after")
    def validate_ranges(self) -> "SearchOptions":
        """Reject inverted year or runtime ranges."""
        if self.year_from and self.year_to and self.year_from > self.year_to:
            raise ValueError("year_from must be <= year_to")
        if self.min_runtime and self.max_runtime and self.min_runtime > self.max_runtime:
            raise ValueError("min_runtime must be <= max_runtime")
        return self

    def kinds(self, kind: ContentKind | None = None) -> tuple[ContentKind, ...]:
        """Content kinds a search must cover, movies first."""
        selected = kind or self.content_kind
        return (selected,) if selected else ALL_KINDS

    def resolved_years(self, default_from: int, default_to: int) -> tuple[int, int]:
        """Year range with defaults filled in."""
        return (self.year_from or default_from, self.year_to or default_to)

    def runtime_allows(self, runtime: int | None) -> bool:
        """Check a known runtime against the bounds; unknown always passes."""
        if runtime is None:
            return True
        if self.max_runtime and runtime > self.max_runtime:
            return False
        if self.min_runtime and runtime < self.min_runtime:
            return False
        return True


def _as_sequence(value: Any) -> list[str]:
    """Accept str, list, tuple or set inputs; sets are sorted."""
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, (set, frozenset)):
        return sorted(value)
    return list(value)
