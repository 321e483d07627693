"""TVmaze tertiary source adapter.

Serves TV series only: genre keyword searches as a thin-results
fallback, and regional drama searches (Turkish, Pakistani, Korean).
"""

import asyncio
from collections.abc import Awaitable
from typing import Any

import httpx

from moodreel.aggregation.schemas import (
    KIND_TV,
    ContentKind,
    PartialContent,
    SearchOptions,
    parse_year,
)
from moodreel.settings import TVMazeSettings, settings
from moodreel.sources.base import BaseSource
from moodreel.sources.errors import SourceError, SourceNotFoundError
from moodreel.sources.tvmaze.client import TVMazeClient
from moodreel.sources.tvmaze.normalizer import TVMazeNormalizer

# =============================================================================
# CONSTANTS
# =============================================================================

REGIONAL_QUERIES: dict[str, tuple[str, ...]] = {
    "Turkish": ("turkish drama", "dizi", "ask"),
    "Pakistani": ("pakistani drama", "urdu"),
    "Korean": ("korean drama", "kdrama"),
    "Indian": ("indian drama", "hindi serial"),
}
"""Search queries per region; other regions search their own name."""


class TVMazeSource(BaseSource):
    """Tertiary source: regional dramas and TV genre fallback."""

    name = "tvmaze"
    kinds = frozenset({KIND_TV})
    supports_regional = True

    def __init__(
        self,
        client: TVMazeClient | None = None,
        config: TVMazeSettings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize TVmaze source.

        Args:
            client: Preconfigured client (built from settings if None).
            config: TVmaze settings.
            transport: Optional transport for tests.
        """
        super().__init__()
        self._config = config or settings.tvmaze
        self.client = client or TVMazeClient(self._config, transport=transport)
        self.normalizer = TVMazeNormalizer()

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
        """Search shows by genre keyword, filtered by year range.

        Args:
            options: Normalized search options.
            kind: Only TV series are served.
            language: Unused.

        Returns:
            Partial TV records, top hits per genre.
        """
        if kind != KIND_TV:
            return []
        return await self._gather_variants(
            [self._search_genre(genre, options) for genre in options.genres],
            operation="genre_search",
        )

    async def search_regional(
        self,
        region: str,
        options: SearchOptions,
    ) -> list[PartialContent]:
        """Search regional dramas, keeping shows sharing a genre.

        Args:
            region: Region name (e.g. "Turkish").
            options: Search options supplying the genre filter.

        Returns:
            Partial TV records, top hits per regional query.
        """
        queries = REGIONAL_QUERIES.get(region, (region.lower(),))
        return await self._gather_variants(
            [self._search_region_query(query, options) for query in queries],
            operation="regional_search",
        )

    async def _search_genre(self, genre: str, options: SearchOptions) -> list[PartialContent]:
        """Run one genre keyword search."""
        shows = await self.client.search_shows(genre.lower())
        records = await self._convert(shows[: self._config.genre_hits])
        return [record for record in records if _in_year_range(record, options)]

    async def _search_region_query(
        self,
        query: str,
        options: SearchOptions,
    ) -> list[PartialContent]:
        """Run one regional query."""
        shows = await self.client.search_shows(query)
        records = await self._convert(shows[: self._config.regional_hits])
        if not options.genres:
            return records
        wanted = {genre.lower() for genre in options.genres}
        return [
            record
            for record in records
            if any(genre.lower() in wanted for genre in record.genres or [])
        ]

    async def _convert(self, shows: list[dict[str, Any]]) -> list[PartialContent]:
        """Normalize shows, fetching each cast concurrently."""
        casts = await asyncio.gather(*(self._fetch_cast(show.get("id")) for show in shows))
        records = [
            self.normalizer.normalize(show, cast) for show, cast in zip(shows, casts, strict=True)
        ]
        return [record for record in records if record is not None]

    async def _fetch_cast(self, show_id: int | None) -> list[str] | None:
        """Fetch top cast names; failures leave cast absent."""
        if not show_id:
            return None
        try:
            members = await self.client.get_cast(show_id)
        except SourceError as e:
            self._record_failure("cast", e)
            return None
        return self.normalizer.normalize_cast(members, self._config.cast_limit)

    # -------------------------------------------------------------------------
    # Lookups
    # -------------------------------------------------------------------------

    async def fetch_by_id(self, content_id: int, kind: ContentKind) -> PartialContent | None:
        """Fetch a show by TVmaze id."""
        if kind != KIND_TV:
            return None
        return await self._lookup(self.client.get_show(content_id), "show")

    async def fetch_by_external_id(
        self,
        external_id: str,
        kind: ContentKind,
    ) -> PartialContent | None:
        """Fetch a show by IMDb id."""
        if kind != KIND_TV:
            return None
        return await self._lookup(self.client.lookup_imdb(external_id), "lookup")

    async def _lookup(
        self,
        request: Awaitable[dict[str, Any]],
        operation: str,
    ) -> PartialContent | None:
        """Await a show request and normalize it with its cast."""
        try:
            show = await request
        except SourceNotFoundError:
            return None
        except SourceError as e:
            self._record_failure(operation, e)
            return None
        records = await self._convert([show])
        return records[0] if records else None


def _in_year_range(record: PartialContent, options: SearchOptions) -> bool:
    """Check the premiere year; shows without one are kept."""
    year = parse_year(record.first_air_date)
    if year is None:
        return True
    if options.year_from and year < options.year_from:
        return False
    if options.year_to and year > options.year_to:
        return False
    return True
