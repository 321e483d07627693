"""Mood-based discovery service.

Turns a discovery request (mood button, free text, explicit filters)
into search options, runs the aggregated search and keeps the title
cache and streaming availability warm for the results.
"""

import asyncio
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from moodreel.aggregation.cache import ResultCache
from moodreel.aggregation.orchestrator import SearchOrchestrator
from moodreel.aggregation.policy import SourcePolicy
from moodreel.aggregation.schemas import (
    KIND_MOVIE,
    ContentKind,
    Movie,
    SearchOptions,
    TVSeries,
)
from moodreel.services.availability import (
    AvailabilityService,
    StreamingSource,
    get_availability_service,
)
from moodreel.services.mood import MoodInterpretation, MoodInterpreter, get_mood_interpreter
from moodreel.services.mood.config import DEFAULT_GENRES, genres_for_mood
from moodreel.services.storage import MemoryStorage, get_storage
from moodreel.settings import settings
from moodreel.sources import OMDbSource, TMDBSource, TVMazeSource
from moodreel.utils.logger import setup_logger

logger = setup_logger("services.discovery")

Mood = Literal[
    "happy",
    "sad",
    "nostalgic",
    "adventurous",
    "romantic",
    "intense",
    "relaxed",
    "mysterious",
    "superhero",
]

# =============================================================================
# REQUEST / RESULT
# =============================================================================


class SearchRequest(BaseModel):
    """Discovery request as sent by clients.

    Accepts snake_case and camelCase keys.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    mood: Mood | None = None
    text: str | None = Field(default=None, max_length=2000)
    genres: list[str] = Field(default_factory=list)
    languages: list[str] = Field(default_factory=list)
    max_runtime: int | None = Field(
        default=None,
        ge=0,
        validation_alias=AliasChoices("maxRuntime", "max_runtime"),
    )
    year_from: int | None = Field(
        default=None,
        ge=1850,
        le=2100,
        validation_alias=AliasChoices("yearFrom", "year_from"),
    )
    year_to: int | None = Field(
        default=None,
        ge=1850,
        le=2100,
        validation_alias=AliasChoices("yearTo", "year_to"),
    )
    content_type: ContentKind | None = Field(
        default=None,
        validation_alias=AliasChoices("contentType", "content_type"),
    )
    regional_focus: str | None = Field(
        default=None,
        validation_alias=AliasChoices("regionalFocus", "regional_focus"),
    )
    old_classics_only: bool = Field(
        default=False,
        validation_alias=AliasChoices("oldClassicsOnly", "old_classics_only"),
    )


@dataclass
class DiscoveryResult:
    """Search results split by kind."""

    movies: list[Movie] = field(default_factory=list)
    tv_series: list[TVSeries] = field(default_factory=list)
    interpretation: MoodInterpretation | None = None

    @property
    def total(self) -> int:
        return len(self.movies) + len(self.tv_series)


# =============================================================================
# OPTION BUILDING
# =============================================================================


def resolve_genres(
    request: SearchRequest,
    interpretation: MoodInterpretation | None,
) -> list[str]:
    """Pick search genres by precedence.

    Explicit genres win, then the interpretation, then the mood
    configuration, then the default genres.
    """
    if request.genres:
        return list(request.genres)
    if interpretation is not None and interpretation.preferred_genres:
        return list(interpretation.preferred_genres)
    if request.mood is not None:
        return genres_for_mood(request.mood) or list(DEFAULT_GENRES)
    return list(DEFAULT_GENRES)


def build_search_options(
    request: SearchRequest,
    interpretation: MoodInterpretation | None = None,
) -> SearchOptions:
    """Build normalized search options from a request.

    Explicit request values take precedence over interpreted ones.
    The classics clamp is applied by ``SearchOptions`` itself.

    Args:
        request: Client request.
        interpretation: Interpretation of ``request.text``, if any.

    Returns:
        Immutable search options.
    """
    era = interpretation.era if interpretation else None

    languages = list(request.languages)
    if not languages and interpretation and interpretation.language_preference:
        languages = [interpretation.language_preference]

    return SearchOptions(
        genres=resolve_genres(request, interpretation),
        languages=languages,
        year_from=request.year_from or (era.year_from if era else None),
        year_to=request.year_to or (era.year_to if era else None),
        max_runtime=request.max_runtime
        or (interpretation.max_runtime_min if interpretation else None),
        min_runtime=interpretation.min_runtime_min if interpretation else None,
        content_kind=request.content_type,
        regional_focus=request.regional_focus,
        old_classics_only=request.old_classics_only,
    )


# =============================================================================
# DISCOVERY SERVICE
# =============================================================================


class DiscoveryService:
    """Search, details and availability for the HTTP API.

    Attributes:
        orchestrator: Multi-source search orchestrator.
        interpreter: Mood interpreter.
        availability_service: Streaming availability lookups.
        storage: Title and feedback store.
    """

    def __init__(
        self,
        orchestrator: SearchOrchestrator,
        interpreter: MoodInterpreter,
        availability_service: AvailabilityService,
        storage: MemoryStorage,
        prefetch_availability: bool = True,
    ) -> None:
        self.orchestrator = orchestrator
        self.interpreter = interpreter
        self.availability_service = availability_service
        self.storage = storage
        self._prefetch_availability = prefetch_availability

    async def search(self, request: SearchRequest) -> DiscoveryResult:
        """Run a discovery search.

        Args:
            request: Client request.

        Returns:
            Ranked movies and TV series plus the text interpretation.

        Raises:
            pydantic.ValidationError: When the request yields invalid
                options (e.g., an inverted year range).
        """
        interpretation = None
        if request.text and request.text.strip():
            interpretation = await self.interpreter.interpret(request.text)

        options = build_search_options(request, interpretation)
        content = await self.orchestrator.search_content(options)

        for item in content:
            self.storage.cache_title(item)
        if self._prefetch_availability:
            await self._prefetch(content)

        return DiscoveryResult(
            movies=[item for item in content if isinstance(item, Movie)],
            tv_series=[item for item in content if isinstance(item, TVSeries)],
            interpretation=interpretation,
        )

    async def _prefetch(self, content: list[Movie | TVSeries]) -> None:
        """Fetch and cache streaming sources for titles with an IMDb id."""
        targets = [item for item in content if item.external_id]
        if not targets or not self.availability_service.enabled:
            return

        found = await asyncio.gather(
            *(self.availability_service.availability(item.external_id) for item in targets)
        )
        for item, sources in zip(targets, found, strict=True):
            if sources:
                self.storage.cache_title(item, sources)
        logger.info("Prefetched availability for %d/%d titles", sum(map(bool, found)), len(targets))

    async def details(
        self,
        content_id: int,
        kind: ContentKind = KIND_MOVIE,
    ) -> Movie | TVSeries | None:
        """Enriched details for a primary-source title, cached on success."""
        cached = self.storage.get_title(kind, content_id, origin=self.orchestrator.primary.name)
        record = await self.orchestrator.get_enriched_details(
            content_id,
            external_id=cached.content.external_id if cached else None,
            kind=kind,
        )
        if record is not None:
            self.storage.cache_title(record)
        return record

    async def availability(
        self,
        content_id: int,
        kind: ContentKind = KIND_MOVIE,
    ) -> list[StreamingSource]:
        """Streaming sources for a title.

        Served from the title cache when sources are known, otherwise
        looked up through the enriched details.
        """
        cached = self.storage.get_title(kind, content_id, origin=self.orchestrator.primary.name)
        if cached is not None and cached.streaming_sources is not None:
            return cached.streaming_sources

        record = await self.orchestrator.get_enriched_details(content_id, kind=kind)
        if record is None or not record.external_id:
            return []

        sources = await self.availability_service.availability(record.external_id)
        self.storage.cache_title(record, sources)
        return sources

    async def credits(self, movie_id: int) -> list[str]:
        """Top-billed cast of a primary-source movie."""
        return await self.orchestrator.primary.fetch_credits(movie_id)

    async def aclose(self) -> None:
        await self.orchestrator.aclose()
        await self.interpreter.aclose()
        await self.availability_service.aclose()


# =============================================================================
# FACTORIES
# =============================================================================


def build_orchestrator() -> SearchOrchestrator:
    """Build the orchestrator over the configured sources.

    Sources without credentials stay registered but disabled.
    """
    cache = None
    if settings.cache.enabled:
        cache = ResultCache(
            ttl_seconds=settings.cache.ttl_seconds,
            max_entries=settings.cache.max_entries,
        )
    return SearchOrchestrator(
        primary=TMDBSource(),
        fallbacks=[OMDbSource(), TVMazeSource()],
        policy=SourcePolicy.from_settings(settings.search),
        cache=cache,
        default_languages=settings.search.default_languages,
        call_timeout=settings.search.call_timeout,
    )


@lru_cache(maxsize=1)
def get_discovery_service() -> DiscoveryService:
    """Get singleton discovery service instance.

    Returns:
        Cached DiscoveryService instance.
    """
    return DiscoveryService(
        orchestrator=build_orchestrator(),
        interpreter=get_mood_interpreter(),
        availability_service=get_availability_service(),
        storage=get_storage(),
        prefetch_availability=settings.search.prefetch_availability,
    )


__all__ = [
    "DiscoveryResult",
    "DiscoveryService",
    "SearchRequest",
    "build_orchestrator",
    "build_search_options",
    "get_discovery_service",
    "resolve_genres",
]
