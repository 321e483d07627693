"""OMDb API client.

OMDb answers most errors with HTTP 200 and a ``Response: "False"``
payload; those are mapped to source exceptions here.
"""

from typing import Any

import httpx

from moodreel.settings import OMDbSettings, settings
from moodreel.sources.errors import (
    SourceNotFoundError,
    SourceRateLimitError,
    SourceResponseError,
)
from moodreel.sources.http import BaseHTTPClient

# =============================================================================
# CONSTANTS
# =============================================================================

RATE_LIMIT_MESSAGE = "request limit reached"
NOT_FOUND_MESSAGES = ("not found", "incorrect imdb id", "too many results")


class OMDbClient(BaseHTTPClient):
    """Async HTTP client for the OMDb API.

    Authenticates with the ``apikey`` query parameter.
    """

    source_name = "omdb"

    def __init__(
        self,
        config: OMDbSettings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        retry_wait: float = 0.5,
    ) -> None:
        """Initialize OMDb client with settings.

        Args:
            config: OMDb settings (defaults to global settings).
            transport: Optional transport for tests.
            retry_wait: Initial backoff between attempts.
        """
        config = config or settings.omdb
        super().__init__(
            base_url=config.base_url,
            timeout=config.timeout,
            max_retries=config.max_retries,
            retry_wait=retry_wait,
            transport=transport,
        )
        self._api_key = config.api_key

    def _auth_params(self) -> dict[str, Any]:
        return {"apikey": self._api_key}

    # -------------------------------------------------------------------------
    # API Endpoints
    # -------------------------------------------------------------------------

    async def search(self, query: str, media_type: str = "movie") -> list[str]:
        """Search titles and return matching IMDb ids.

        Args:
            query: Title keyword.
            media_type: "movie" or "series".

        Returns:
            IMDb ids in relevance order; empty when nothing matched.
        """
        try:
            payload = self._check_payload(
                await self._get("", {"s": query, "type": media_type}), query
            )
        except SourceNotFoundError:
            return []
        return [item["imdbID"] for item in payload.get("Search") or [] if item.get("imdbID")]

    async def get_by_imdb_id(self, imdb_id: str) -> dict[str, Any]:
        """Get full title details by IMDb id.

        Args:
            imdb_id: IMDb identifier ("tt0068646").

        Returns:
            Title details payload.

        Raises:
            SourceNotFoundError: When the id is unknown.
        """
        payload = await self._get("", {"i": imdb_id, "plot": "full"})
        return self._check_payload(payload, imdb_id)

    def _check_payload(self, payload: Any, query: str) -> dict[str, Any]:
        """Map OMDb error payloads to exceptions.

        Raises:
            SourceRateLimitError: When the daily quota is exhausted.
            SourceNotFoundError: When nothing matched.
            SourceResponseError: On any other error payload.
        """
        if not isinstance(payload, dict):
            raise SourceResponseError(f"Unexpected payload for {query}", self.source_name)
        if payload.get("Response") != "False":
            return payload

        error = str(payload.get("Error", "")).lower()
        if RATE_LIMIT_MESSAGE in error:
            raise SourceRateLimitError(f"Request limit reached: {query}", self.source_name)
        if any(message in error for message in NOT_FOUND_MESSAGES):
            raise SourceNotFoundError(f"Not found: {query}", self.source_name)
        raise SourceResponseError(f"OMDb error for {query}: {error}", self.source_name)
