"""TVmaze API client.

Public API, no authentication. Show lookups by IMDb id answer with a
redirect to the show resource, which the client follows.
"""

from typing import Any

import httpx

from moodreel.settings import TVMazeSettings, settings
from moodreel.sources.http import BaseHTTPClient


class TVMazeClient(BaseHTTPClient):
    """Async HTTP client for the TVmaze API."""

    source_name = "tvmaze"

    def __init__(
        self,
        config: TVMazeSettings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        retry_wait: float = 0.5,
    ) -> None:
        """Initialize TVmaze client with settings.

        Args:
            config: TVmaze settings (defaults to global settings).
            transport: Optional transport for tests.
            retry_wait: Initial backoff between attempts.
        """
        config = config or settings.tvmaze
        super().__init__(
            base_url=config.base_url,
            timeout=config.timeout,
            max_retries=config.max_retries,
            retry_wait=retry_wait,
            transport=transport,
        )

    # -------------------------------------------------------------------------
    # API Endpoints
    # -------------------------------------------------------------------------

    async def search_shows(self, query: str) -> list[dict[str, Any]]:
        """Search shows by free-text query.

        Args:
            query: Search query string.

        Returns:
            Show objects in relevance order.
        """
        payload = await self._get("/search/shows", {"q": query})
        return [item["show"] for item in payload or [] if item.get("show")]

    async def get_show(self, show_id: int) -> dict[str, Any]:
        """Get show details by TVmaze id."""
        return await self._get(f"/shows/{show_id}")

    async def lookup_imdb(self, imdb_id: str) -> dict[str, Any]:
        """Get show details by IMDb id."""
        return await self._get("/lookup/shows", {"imdb": imdb_id})

    async def get_cast(self, show_id: int) -> list[dict[str, Any]]:
        """Get show cast in billing order."""
        return await self._get(f"/shows/{show_id}/cast") or []
