"""TMDB API client.

Handles HTTP communication with The Movie Database API: discover
queries, detail lookups with external ids, and credits.
"""

from typing import Any

import httpx

from moodreel.aggregation.schemas import KIND_MOVIE, ContentKind
from moodreel.settings import TMDBSettings, settings
from moodreel.sources.http import BaseHTTPClient


class TMDBClient(BaseHTTPClient):
    """Async HTTP client for the TMDB API.

    Authenticates with the ``api_key`` query parameter.
    """

    source_name = "tmdb"

    def __init__(
        self,
        config: TMDBSettings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        retry_wait: float = 0.5,
    ) -> None:
        """Initialize TMDB client with settings.

        Args:
            config: TMDB settings (defaults to global settings).
            transport: Optional transport for tests.
            retry_wait: Initial backoff between attempts.
        """
        config = config or settings.tmdb
        super().__init__(
            base_url=config.base_url,
            timeout=config.timeout,
            max_retries=config.max_retries,
            retry_wait=retry_wait,
            transport=transport,
        )
        self._api_key = config.api_key

    def _auth_params(self) -> dict[str, Any]:
        return {"api_key": self._api_key}

    # -------------------------------------------------------------------------
    # API Endpoints
    # -------------------------------------------------------------------------

    async def discover(self, kind: ContentKind, params: dict[str, Any]) -> dict[str, Any]:
        """Discover movies or TV series with filters.

        Args:
            kind: movie or tv.
            params: Discover query parameters.

        Returns:
            Discover response with results.
        """
        endpoint = "/discover/movie" if kind == KIND_MOVIE else "/discover/tv"
        return await self._get(endpoint, params)

    async def get_details(self, kind: ContentKind, content_id: int) -> dict[str, Any]:
        """Get title details with external ids appended.

        Args:
            kind: movie or tv.
            content_id: TMDB identifier.

        Returns:
            Details response including ``external_ids``.
        """
        path = "movie" if kind == KIND_MOVIE else "tv"
        return await self._get(
            f"/{path}/{content_id}",
            {"append_to_response": "external_ids"},
        )

    async def get_credits(self, movie_id: int) -> dict[str, Any]:
        """Get movie cast and crew.

        Args:
            movie_id: TMDB movie ID.

        Returns:
            Credits response with cast and crew.
        """
        return await self._get(f"/movie/{movie_id}/credits")
