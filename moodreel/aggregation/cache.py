"""Time-bounded, capacity-bounded search result cache.

Memoizes complete search results keyed on the canonical form of the
search options plus content kind. Entries expire by age only; when
full, the oldest entry is evicted first. Process-local, no
coordination between instances.
"""

import json
import logging
import threading
import time
from collections import OrderedDict
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from moodreel.aggregation.schemas import ContentKind, Movie, SearchOptions, TVSeries
from moodreel.monitoring.metrics import CACHE_LOOKUPS_TOTAL

logger = logging.getLogger(__name__)

# =============================================================================
# CONSTANTS
# =============================================================================

DEFAULT_TTL_SECONDS = 15 * 60
"""Cached searches live for 15 minutes."""

DEFAULT_MAX_ENTRIES = 512

ComputeFn = Callable[[], Awaitable[list[Movie | TVSeries]]]


# =============================================================================
# CACHE ENTRY
# =============================================================================


@dataclass(frozen=True)
class CacheEntry:
    """Stored search result.

    Attributes:
        results: Immutable snapshot of the computed list.
        created_at: Monotonic creation time.
    """

    results: tuple[Movie | TVSeries, ...]
    created_at: float

    def is_fresh(self, now: float, ttl: float) -> bool:
        """Check entry age against the TTL."""
        return now - self.created_at < ttl


def cache_key(options: SearchOptions, kind: ContentKind | None) -> str:
    """Canonical, field-order independent key for a search.

    Genres and languages are compared as sets, so option objects
    built in a different order map to the same key.

    Args:
        options: Search options.
        kind: Requested content kind, or None for both.

    Returns:
        Stable JSON string.
    """
    payload = options.model_dump(mode="json")
    payload["genres"] = sorted(payload["genres"])
    payload["languages"] = sorted(payload["languages"])
    payload["kind"] = kind
    return json.dumps(payload, sort_keys=True, separators=(",", ":"))


# =============================================================================
# RESULT CACHE
# =============================================================================


class ResultCache:
    """TTL result cache with oldest-first eviction.

    Each stored search is replaced atomically; a reader never observes
    a partially written entry. Concurrent computations of the same key
    are not coalesced and the last writer wins.

    Attributes:
        ttl_seconds: Entry lifetime.
        max_entries: Capacity.
    """

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize an empty cache.

        Args:
            ttl_seconds: Entry lifetime in seconds.
            max_entries: Entries kept before evicting the oldest.
            clock: Monotonic time source (injectable for tests).
        """
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        if max_entries < 1:
            raise ValueError("max_entries must be >= 1")
        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        self._clock = clock
        self._entries: OrderedDict[str, CacheEntry] = OrderedDict()
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    async def get_or_compute(
        self,
        options: SearchOptions,
        kind: ContentKind | None,
        compute_fn: ComputeFn,
    ) -> list[Movie | TVSeries]:
        """Return a fresh cached result or compute and store one.

        Args:
            options: Search options.
            kind: Requested content kind, or None for both.
            compute_fn: Coroutine factory producing the result.

        Returns:
            Result list (a new list each call; records are shared).
        """
        key = cache_key(options, kind)

        cached = self.get(key)
        if cached is not None:
            CACHE_LOOKUPS_TOTAL.labels(outcome="hit").inc()
            logger.debug("Cache hit: %s", key)
            return list(cached)

        CACHE_LOOKUPS_TOTAL.labels(outcome="miss").inc()
        results = await compute_fn()
        self.put(key, results)
        return list(results)

    def get(self, key: str) -> tuple[Movie | TVSeries, ...] | None:
        """Look up a fresh entry, dropping it when expired."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if not entry.is_fresh(self._clock(), self.ttl_seconds):
                del self._entries[key]
                return None
            return entry.results

    def put(self, key: str, results: list[Movie | TVSeries]) -> None:
        """Store results, evicting the oldest entries when full."""
        entry = CacheEntry(results=tuple(results), created_at=self._clock())
        with self._lock:
            self._entries.pop(key, None)
            self._entries[key] = entry
            while len(self._entries) > self.max_entries:
                evicted, _ = self._entries.popitem(last=False)
                logger.debug("Cache evicted: %s", evicted)

    def clear(self) -> None:
        """Drop all entries."""
        with self._lock:
            self._entries.clear()
