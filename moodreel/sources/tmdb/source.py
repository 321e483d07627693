"""TMDB primary source adapter.

Discovers well-rated titles for one original language at a time and
resolves each result through the detail endpoint to pick up runtime,
spoken languages and the IMDb id used to join other sources.
"""

import asyncio
from typing import Any

import httpx

from moodreel.aggregation.schemas import (
    KIND_MOVIE,
    KIND_TV,
    ContentKind,
    PartialContent,
    SearchOptions,
)
from moodreel.settings import SearchSettings, TMDBSettings, settings
from moodreel.sources.base import BaseSource
from moodreel.sources.errors import SourceError, SourceNotFoundError
from moodreel.sources.tmdb.client import TMDBClient
from moodreel.sources.tmdb.normalizer import TMDBNormalizer, encode_genres

# =============================================================================
# CONSTANTS
# =============================================================================

SORT_BY = "vote_average.desc"


class TMDBSource(BaseSource):
    """Primary source: per-language discovery plus details.

    Attributes:
        client: TMDB HTTP client.
        normalizer: Raw response normalizer.
    """

    name = "tmdb"
    kinds = frozenset({KIND_MOVIE, KIND_TV})

    def __init__(
        self,
        client: TMDBClient | None = None,
        config: TMDBSettings | None = None,
        search_config: SearchSettings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize TMDB source.

        Args:
            client: Preconfigured client (built from settings if None).
            config: TMDB settings.
            search_config: Search policy settings (vote floors, era).
            transport: Optional transport for tests.
        """
        super().__init__()
        self._config = config or settings.tmdb
        self._search_config = search_config or settings.search
        self.client = client or TMDBClient(self._config, transport=transport)
        self.normalizer = TMDBNormalizer()

    @property
    def enabled(self) -> bool:
        return self._config.is_configured

    async def aclose(self) -> None:
        await self.client.aclose()

    # -------------------------------------------------------------------------
    # Search
    # -------------------------------------------------------------------------

    async def search(
        self,
        options: SearchOptions,
        kind: ContentKind,
        language: str | None = None,
    ) -> list[PartialContent]:
        """Discover titles for one original language.

        Args:
            options: Normalized search options.
            kind: movie or tv.
            language: Original language code; None searches all.

        Returns:
            Partial records resolved through details when possible.
        """
        if not self.enabled:
            return []
        return await self._gather_variants(
            [self._discover(options, kind, language)],
            operation=f"discover_{kind}",
        )

    async def _discover(
        self,
        options: SearchOptions,
        kind: ContentKind,
        language: str | None,
    ) -> list[PartialContent]:
        """Run one discover query and resolve its results."""
        response = await self.client.discover(kind, self._discover_params(options, kind, language))
        results: list[dict[str, Any]] = response.get("results") or []

        seen: set[int] = set()
        unique: list[dict[str, Any]] = []
        for raw in results:
            if raw.get("id") and raw["id"] not in seen:
                seen.add(raw["id"])
                unique.append(raw)

        slots = asyncio.Semaphore(self._search_config.detail_concurrency)
        resolved = await asyncio.gather(
            *(self._resolve(raw, kind, language, slots) for raw in unique)
        )
        records = [record for record in resolved if record is not None]
        self.logger.info(
            "TMDB discover %s lang=%s: %d results", kind, language or "any", len(records)
        )
        return records

    def _discover_params(
        self,
        options: SearchOptions,
        kind: ContentKind,
        language: str | None,
    ) -> dict[str, Any]:
        """Build discover query parameters."""
        year_from, year_to = options.resolved_years(
            self._search_config.default_year_from,
            self._search_config.default_year_to,
        )
        date_field = "primary_release_date" if kind == KIND_MOVIE else "first_air_date"

        params: dict[str, Any] = {
            f"{date_field}.gte": f"{year_from}-01-01",
            f"{date_field}.lte": f"{year_to}-12-31",
            "vote_average.gte": self._search_config.min_vote_average,
            "vote_count.gte": self._search_config.min_vote_count,
            "sort_by": SORT_BY,
            "page": 1,
        }
        with_genres = encode_genres(options.genres, kind)
        if with_genres:
            params["with_genres"] = with_genres
        if language:
            params["with_original_language"] = language
        return params

    async def _resolve(
        self,
        raw: dict[str, Any],
        kind: ContentKind,
        language: str | None,
        slots: asyncio.Semaphore,
    ) -> PartialContent | None:
        """Resolve a discover result through the detail endpoint.

        A failed detail lookup falls back to the discover record.
        """
        async with slots:
            try:
                details = await self.client.get_details(kind, raw["id"])
            except SourceError as e:
                self._record_failure("details", e)
                details = raw
        return self.normalizer.normalize(details, kind, queried_language=language)

    # -------------------------------------------------------------------------
    # Lookups
    # -------------------------------------------------------------------------

    async def fetch_by_id(self, content_id: int, kind: ContentKind) -> PartialContent | None:
        """Fetch movie or TV details by TMDB id.

        Args:
            content_id: TMDB identifier.
            kind: movie or tv.

        Returns:
            Partial record, or None when unknown or unavailable.
        """
        if not self.enabled:
            return None
        try:
            details = await self.client.get_details(kind, content_id)
        except SourceNotFoundError:
            return None
        except SourceError as e:
            self._record_failure("details", e)
            return None
        return self.normalizer.normalize(details, kind)

    async def fetch_credits(self, movie_id: int) -> list[str]:
        """Fetch top-billed cast names for a movie.

        Args:
            movie_id: TMDB movie ID.

        Returns:
            Cast names, empty when unavailable.
        """
        if not self.enabled:
            return []
        try:
            credits = await self.client.get_credits(movie_id)
        except SourceError as e:
            self._record_failure("credits", e)
            return []
        return self.normalizer.normalize_cast(credits, self._config.cast_limit)
