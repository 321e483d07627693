"""OMDb secondary source adapter.

Specialises in classic films: searches a fixed set of landmark titles
per genre and resolves each hit by IMDb id, which also makes it the
richest source of cast, director, writers and awards.
"""

import asyncio

import httpx

from moodreel.aggregation.schemas import (
    KIND_MOVIE,
    ContentKind,
    PartialContent,
    SearchOptions,
    parse_year,
)
from moodreel.settings import OMDbSettings, settings
from moodreel.sources.base import BaseSource
from moodreel.sources.errors import SourceError, SourceNotFoundError
from moodreel.sources.omdb.client import OMDbClient
from moodreel.sources.omdb.normalizer import OMDbNormalizer, int_to_imdb

# =============================================================================
# CONSTANTS
# =============================================================================

CLASSIC_KEYWORDS: dict[str, tuple[str, ...]] = {
    "Drama": ("godfather", "casablanca", "citizen kane"),
    "Romance": ("gone with the wind", "roman holiday", "breakfast at tiffanys"),
    "Action": ("die hard", "terminator", "rambo"),
    "Comedy": ("some like it hot", "it happened one night", "the graduate"),
}
"""Landmark title keywords searched per canonical genre."""


class OMDbSource(BaseSource):
    """Secondary source: classic movies and credit enrichment.

    Disabled (empty results) when no API key is configured.
    """

    name = "omdb"
    kinds = frozenset({KIND_MOVIE})
    serves_classics = True

    def __init__(
        self,
        client: OMDbClient | None = None,
        config: OMDbSettings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize OMDb source.

        Args:
            client: Preconfigured client (built from settings if None).
            config: OMDb settings.
            transport: Optional transport for tests.
        """
        super().__init__()
        self._config = config or settings.omdb
        self.client = client or OMDbClient(self._config, transport=transport)
        self.normalizer = OMDbNormalizer()

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
        """Search classic movies for the requested genres.

        Each keyword is one query variant. Hits are filtered by the
        requested year range; the language is ignored.

        Args:
            options: Normalized search options.
            kind: Only movies are served.
            language: Unused.

        Returns:
            Partial movie records in keyword order.
        """
        if not self.enabled or kind != KIND_MOVIE:
            return []

        keywords: list[str] = []
        for genre in options.genres:
            keywords.extend(k for k in CLASSIC_KEYWORDS.get(genre, ()) if k not in keywords)

        return await self._gather_variants(
            [self._search_keyword(keyword, options) for keyword in keywords],
            operation="classic_search",
        )

    async def _search_keyword(self, keyword: str, options: SearchOptions) -> list[PartialContent]:
        """Resolve the first hits of one keyword search."""
        imdb_ids = await self.client.search(keyword, media_type="movie")
        hits = imdb_ids[: self._config.hits_per_keyword]

        records = await asyncio.gather(*(self._fetch_hit(imdb_id) for imdb_id in hits))
        return [
            record
            for record in records
            if record is not None
            and record.kind == KIND_MOVIE
            and _in_year_range(record, options)
        ]

    async def _fetch_hit(self, imdb_id: str) -> PartialContent | None:
        """Fetch one search hit, logging failures."""
        try:
            return await self._fetch(imdb_id)
        except SourceError as e:
            self._record_failure("title", e)
            return None

    async def _fetch(self, imdb_id: str) -> PartialContent | None:
        """Fetch and normalize one title by IMDb id."""
        try:
            payload = await self.client.get_by_imdb_id(imdb_id)
        except SourceNotFoundError:
            return None
        return self.normalizer.normalize(payload)

    # -------------------------------------------------------------------------
    # Lookups
    # -------------------------------------------------------------------------

    async def fetch_by_id(self, content_id: int, kind: ContentKind) -> PartialContent | None:
        """Fetch a title by its numeric OMDb id (IMDb digits)."""
        return await self.fetch_by_external_id(int_to_imdb(content_id), kind)

    async def fetch_by_external_id(
        self,
        external_id: str,
        kind: ContentKind,
    ) -> PartialContent | None:
        """Fetch a title by IMDb id.

        Args:
            external_id: IMDb identifier.
            kind: Expected content kind.

        Returns:
            Partial record, or None when unknown, of another kind,
            or unavailable.
        """
        if not self.enabled:
            return None
        record = await self._fetch_hit(external_id)
        if record is None or record.kind != kind:
            return None
        return record


def _in_year_range(record: PartialContent, options: SearchOptions) -> bool:
    """Check the release year against the requested range."""
    year = parse_year(record.release_date)
    if year is None:
        return options.year_from is None and options.year_to is None
    if options.year_from and year < options.year_from:
        return False
    if options.year_to and year > options.year_to:
        return False
    return True
