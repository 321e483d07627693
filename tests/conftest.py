"""Shared pytest fixtures.

Provides record factories and an in-memory source adapter used by
orchestrator, discovery and API tests.
"""

import asyncio
from collections.abc import Iterable
from typing import Any

import pytest

from moodreel.aggregation.schemas import (
    KIND_MOVIE,
    KIND_TV,
    ContentKind,
    PartialContent,
    SearchOptions,
)
from moodreel.sources.base import BaseSource
from moodreel.sources.errors import SourceUnavailableError


@pytest.fixture(autouse=True)
def mock_env_for_tests(monkeypatch: pytest.MonkeyPatch) -> None:
    """Reproducible environment: no upstream credentials."""
    for key in ("TMDB_API_KEY", "OMDB_API_KEY", "WATCHMODE_API_KEY", "GEMINI_API_KEY"):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("ENVIRONMENT", "test")
    monkeypatch.setenv("LOG_LEVEL", "INFO")


# =============================================================================
# RECORD FACTORIES
# =============================================================================


def make_partial(**overrides: Any) -> PartialContent:
    """Build a partial movie record with sensible defaults."""
    base: dict[str, Any] = {
        "id": 238,
        "title": "The Godfather",
        "kind": KIND_MOVIE,
        "source_name": "tmdb",
        "vote_average": 8.7,
        "vote_count": 20000,
        "release_date": "1972-03-14",
        "genres": ["Drama", "Crime"],
        "original_language": "en",
        "external_id": "tt0068646",
    }
    base.update(overrides)
    return PartialContent(**{k: v for k, v in base.items() if v is not None})


def make_movies(count: int, source_name: str = "tmdb", start: int = 1, **overrides: Any) -> list[PartialContent]:
    """Build ``count`` distinct partial movies."""
    records = []
    for i in range(count):
        params: dict[str, Any] = {
            "id": start + i,
            "title": f"Movie {start + i}",
            "source_name": source_name,
            "external_id": f"tt{1000000 + start + i:07d}",
            "vote_average": 8.0,
        }
        params.update(overrides)
        records.append(make_partial(**params))
    return records


@pytest.fixture
def partial_factory():
    """Factory fixture for partial records."""
    return make_partial


@pytest.fixture
def movies_factory():
    """Factory fixture for lists of partial movies."""
    return make_movies


# =============================================================================
# FAKE SOURCE
# =============================================================================


class FakeSource(BaseSource):
    """Scripted adapter recording every call.

    Attributes:
        calls: (operation, kind, language or region) tuples, in call order.
    """

    def __init__(
        self,
        name: str,
        kinds: Iterable[ContentKind] = (KIND_MOVIE, KIND_TV),
        results: list[PartialContent] | None = None,
        by_language: dict[str, list[PartialContent]] | None = None,
        regional: list[PartialContent] | None = None,
        details: dict[int, PartialContent] | None = None,
        external: dict[str, PartialContent] | None = None,
        credits: list[str] | None = None,
        serves_classics: bool = False,
        supports_regional: bool = False,
        fail: bool = False,
        fail_languages: Iterable[str] = (),
        delay: float = 0.0,
    ) -> None:
        self.name = name
        super().__init__()
        self.kinds = frozenset(kinds)
        self.serves_classics = serves_classics
        self.supports_regional = supports_regional
        self._results = results or []
        self._by_language = by_language
        self._regional = regional or []
        self._details = details or {}
        self._external = external or {}
        self._credits = credits or []
        self._fail = fail
        self._fail_languages = frozenset(fail_languages)
        self._delay = delay
        self.calls: list[tuple[str, str | None, str | None]] = []
        self.closed = False

    async def _respond(self, records: list[PartialContent]) -> list[PartialContent]:
        if self._delay:
            await asyncio.sleep(self._delay)
        if self._fail:
            raise SourceUnavailableError("scripted failure", self.name)
        return list(records)

    async def search(
        self,
        options: SearchOptions,
        kind: ContentKind,
        language: str | None = None,
    ) -> list[PartialContent]:
        self.calls.append(("search", kind, language))
        if language in self._fail_languages:
            if self._delay:
                await asyncio.sleep(self._delay)
            raise SourceUnavailableError(f"scripted failure for {language}", self.name)
        if self._by_language is not None:
            records = self._by_language.get(language or "", [])
        else:
            records = self._results
        return await self._respond([r for r in records if r.kind == kind])

    async def search_regional(self, region: str, options: SearchOptions) -> list[PartialContent]:
        self.calls.append(("regional", None, region))
        return await self._respond(self._regional)

    async def fetch_by_id(self, content_id: int, kind: ContentKind) -> PartialContent | None:
        self.calls.append(("fetch_by_id", kind, str(content_id)))
        record = self._details.get(content_id)
        return record if record is not None and record.kind == kind else None

    async def fetch_by_external_id(self, external_id: str, kind: ContentKind) -> PartialContent | None:
        self.calls.append(("fetch_by_external_id", kind, external_id))
        record = self._external.get(external_id)
        return record if record is not None and record.kind == kind else None

    async def fetch_credits(self, content_id: int) -> list[str]:
        self.calls.append(("credits", None, str(content_id)))
        return list(self._credits)

    async def aclose(self) -> None:
        self.closed = True

    def searched(self) -> bool:
        """Whether any search call was issued."""
        return any(op in ("search", "regional") for op, _, _ in self.calls)


@pytest.fixture
def fake_source():
    """Factory fixture for scripted source adapters."""
    return FakeSource
