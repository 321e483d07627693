"""Streaming availability lookups through Watchmode.

Resolves an IMDb id to a Watchmode title, then lists the services
streaming it in the configured region.
"""

from functools import lru_cache
from typing import Any

import httpx
from pydantic import BaseModel, ConfigDict, ValidationError

from moodreel.settings import WatchmodeSettings, settings
from moodreel.sources.errors import SourceError, SourceMalformedError
from moodreel.sources.http import BaseHTTPClient
from moodreel.utils.logger import setup_logger

logger = setup_logger("services.availability")


class StreamingSource(BaseModel):
    """One service offering a title."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    name: str
    type: str
    web_url: str | None = None
    ios_url: str | None = None
    android_url: str | None = None


class WatchmodeClient(BaseHTTPClient):
    """Async client for the Watchmode v1 API."""

    source_name = "watchmode"

    def __init__(
        self,
        config: WatchmodeSettings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        config = config or settings.watchmode
        super().__init__(base_url=config.base_url, timeout=config.timeout, transport=transport)
        self._api_key = config.api_key

    def _auth_params(self) -> dict[str, Any]:
        return {"apiKey": self._api_key}

    async def find_title_id(self, imdb_id: str) -> int | None:
        """Resolve an IMDb id to a Watchmode title id."""
        response = await self._get(
            "/search/",
            params={"search_field": "imdb_id", "search_value": imdb_id},
        )
        if not isinstance(response, dict):
            return None
        results = response.get("title_results") or []
        if not isinstance(results, list) or not all(isinstance(r, dict) for r in results):
            raise SourceMalformedError("Unexpected title_results shape", self.source_name)
        return results[0].get("id") if results else None

    async def get_sources(self, title_id: int) -> list[dict[str, Any]]:
        """List every streaming source of a title, all regions.

        Entries that are not JSON objects are dropped.
        """
        response = await self._get(f"/title/{title_id}/sources/")
        if not isinstance(response, list):
            return []
        return [entry for entry in response if isinstance(entry, dict)]


class AvailabilityService:
    """Streaming availability by IMDb id. Never raises."""

    def __init__(
        self,
        config: WatchmodeSettings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._config = config or settings.watchmode
        self.client = WatchmodeClient(self._config, transport=transport)

    @property
    def enabled(self) -> bool:
        return self._config.is_configured

    async def availability(self, external_id: str | None) -> list[StreamingSource]:
        """Fetch streaming sources for a title.

        Args:
            external_id: IMDb identifier.

        Returns:
            Up to ``max_sources`` sources in the configured region;
            empty on any failure, missing key or missing data.
        """
        if not external_id or not self.enabled:
            return []

        try:
            title_id = await self.client.find_title_id(external_id)
            if title_id is None:
                return []
            raw_sources = await self.client.get_sources(title_id)
        except SourceError as e:
            logger.warning("Availability lookup failed for %s: %s", external_id, e)
            return []

        return self._select(raw_sources)

    def _select(self, raw_sources: list[dict[str, Any]]) -> list[StreamingSource]:
        """Keep the first valid sources of the configured region."""
        selected: list[StreamingSource] = []
        for raw in raw_sources:
            if raw.get("region") != self._config.region:
                continue
            try:
                selected.append(StreamingSource.model_validate(raw))
            except ValidationError:
                logger.debug("Skipping invalid streaming source: %s", raw.get("source_id"))
                continue
            if len(selected) >= self._config.max_sources:
                break
        return selected

    async def aclose(self) -> None:
        await self.client.aclose()


@lru_cache(maxsize=1)
def get_availability_service() -> AvailabilityService:
    """Get singleton availability service instance."""
    return AvailabilityService()
