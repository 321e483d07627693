"""Multi-source search orchestrator.

Coordinates source adapters, the merge engine, deduplication and
ranking to answer one search:

1. Primary: query the primary source once per language, concurrently
2. Fallbacks: query secondary sources when the policy asks for it
3. Merge: fold records sharing an IMDb id, append the others
4. Deduplicate: re-verify per-source identity
5. Filter and rank: runtime bounds, stable sort by rating, truncate

Upstream failures never propagate; a search whose every call failed
returns an empty list.
"""

import asyncio
import logging
import time
from collections.abc import Awaitable, Sequence
from dataclasses import dataclass, field

from moodreel.aggregation.cache import ResultCache
from moodreel.aggregation.deduplicator import Deduplicator
from moodreel.aggregation.merger import MergeStats, merge
from moodreel.aggregation.policy import REASON_REGIONAL, SourcePolicy
from moodreel.aggregation.schemas import (
    KIND_MOVIE,
    ContentKind,
    Movie,
    PartialContent,
    SearchOptions,
    TVSeries,
    to_content,
)
from moodreel.monitoring.metrics import SEARCH_RESULTS, UPSTREAM_CALL_DURATION, record_upstream
from moodreel.sources.base import BaseSource
from moodreel.sources.errors import SourceError

logger = logging.getLogger(__name__)

# =============================================================================
# CONSTANTS
# =============================================================================

DEFAULT_LANGUAGES: tuple[str, ...] = ("hi", "en", "es", "it", "de")
"""Primary source languages tried when a request names none."""

DEFAULT_CALL_TIMEOUT = 20.0
"""Upper bound (seconds) for one adapter call."""


# =============================================================================
# AGGREGATION STATISTICS
# =============================================================================


@dataclass
class AggregationStats:
    """Statistics for one search of one content kind.

    Attributes:
        kind: Content kind searched.
        start_time: perf_counter value at search start.
        primary_calls: Primary source calls issued.
        primary_records: Records accumulated from the primary source.
        fallback_sources: Fallback sources queried, with reasons.
        failed_calls: Adapter calls that failed or timed out.
        after_dedup: Records after deduplication.
        after_runtime: Records after the runtime filter.
        final_count: Records returned.
    """

    kind: ContentKind = KIND_MOVIE
    start_time: float = field(default_factory=time.perf_counter)
    primary_calls: int = 0
    primary_records: int = 0
    fallback_sources: list[str] = field(default_factory=list)
    failed_calls: int = 0
    after_dedup: int = 0
    after_runtime: int = 0
    final_count: int = 0

    @property
    def duration_seconds(self) -> float:
        """Elapsed time since the search started."""
        return round(time.perf_counter() - self.start_time, 2)

    def log_summary(self) -> None:
        """Log search statistics summary."""
        logger.info(
            "Search %s complete in %.2fs: %d results (primary=%d over %d calls, "
            "fallbacks=%s, failed=%d, deduped=%d, runtime_ok=%d)",
            self.kind,
            self.duration_seconds,
            self.final_count,
            self.primary_records,
            self.primary_calls,
            ",".join(self.fallback_sources) or "none",
            self.failed_calls,
            self.after_dedup,
            self.after_runtime,
        )


# =============================================================================
# RESULT ACCUMULATOR
# =============================================================================


class ResultAccumulator:
    """Accumulates records of one kind in encounter order.

    Records are indexed by (origin source, id) and by IMDb id. Numeric
    ids are only compared within one source.

    Attributes:
        kind: Content kind accepted.
        records: Accumulated records.
        stats: Merge statistics per secondary source.
    """

    def __init__(self, kind: ContentKind) -> None:
        self.kind = kind
        self.records: list[Movie | TVSeries] = []
        self.stats: dict[str, MergeStats] = {}
        self._by_source_id: dict[tuple[str, int], int] = {}
        self._by_external_id: dict[str, int] = {}

    def __len__(self) -> int:
        return len(self.records)

    def add_primary(self, partial: PartialContent) -> None:
        """Add a primary record; repeats across languages are skipped."""
        if partial.kind != self.kind:
            return
        if (partial.source_name, partial.id) in self._by_source_id:
            return
        position = self._find_external(partial.external_id)
        if position is not None:
            self._merge_at(position, partial)
            return
        self._append(partial)

    def add_secondary(self, partial: PartialContent) -> None:
        """Merge a secondary record by IMDb id, or append it."""
        stats = self.stats.setdefault(partial.source_name, MergeStats())

        if partial.kind != self.kind:
            stats.dropped_kind += 1
            return

        position = self._find_external(partial.external_id)
        if position is not None:
            self._merge_at(position, partial)
            stats.merged += 1
            return

        if (partial.source_name, partial.id) in self._by_source_id:
            stats.skipped_duplicates += 1
            return

        self._append(partial)
        stats.appended += 1

    def _find_external(self, external_id: str | None) -> int | None:
        if not external_id:
            return None
        return self._by_external_id.get(external_id)

    def _merge_at(self, position: int, partial: PartialContent) -> None:
        self.records[position] = merge(self.records[position], partial)
        self._by_source_id[(partial.source_name, partial.id)] = position

    def _append(self, partial: PartialContent) -> None:
        position = len(self.records)
        self.records.append(to_content(partial))
        self._by_source_id[(partial.source_name, partial.id)] = position
        if partial.external_id:
            self._by_external_id[partial.external_id] = position


# =============================================================================
# SEARCH ORCHESTRATOR
# =============================================================================


@dataclass
class _SourceCall:
    """One pending adapter call."""

    source: BaseSource
    request: Awaitable[list[PartialContent]]
    label: str


class SearchOrchestrator:
    """Multi-source search over a primary source and ordered fallbacks.

    Attributes:
        primary: Primary source adapter.
        fallbacks: Secondary adapters, in merge order.
        policy: Fallback invocation policy.
        cache: Optional result cache.
        last_stats: Statistics of the most recent uncached run, per kind.
    """

    def __init__(
        self,
        primary: BaseSource,
        fallbacks: Sequence[BaseSource] = (),
        policy: SourcePolicy | None = None,
        cache: ResultCache | None = None,
        default_languages: Sequence[str] = DEFAULT_LANGUAGES,
        call_timeout: float = DEFAULT_CALL_TIMEOUT,
    ) -> None:
        """Initialize orchestrator.

        Args:
            primary: Primary source adapter.
            fallbacks: Secondary adapters, merged in this order.
            policy: Fallback policy (defaults to historical thresholds).
            cache: Result cache; None disables caching.
            default_languages: Languages used when options name none.
            call_timeout: Upper bound (seconds) for one adapter call.
        """
        self.primary = primary
        self.fallbacks = list(fallbacks)
        self.policy = policy or SourcePolicy()
        self.cache = cache
        self._default_languages = tuple(default_languages)
        self._call_timeout = call_timeout
        self.last_stats: dict[ContentKind, AggregationStats] = {}

    @property
    def sources(self) -> list[BaseSource]:
        """All adapters, primary first."""
        return [self.primary, *self.fallbacks]

    async def aclose(self) -> None:
        """Close every adapter."""
        for source in self.sources:
            await source.aclose()

    # -------------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------------

    async def search_content(
        self,
        options: SearchOptions,
        kind: ContentKind | None = None,
    ) -> list[Movie | TVSeries]:
        """Search all sources and return ranked unified records.

        Movies come first, then TV series, each ranked and truncated
        independently.

        Args:
            options: Normalized search options.
            kind: Restrict to one kind; None uses ``options.content_kind``
                or both kinds.

        Returns:
            Ranked records; empty when nothing matched or every call failed.
        """
        if self.cache is None:
            return await self._search(options, kind)
        return await self.cache.get_or_compute(
            options, kind, lambda: self._search(options, kind)
        )

    async def get_enriched_details(
        self,
        content_id: int,
        external_id: str | None = None,
        kind: ContentKind = KIND_MOVIE,
    ) -> Movie | TVSeries | None:
        """Primary details merged with the first fallback's details.

        Args:
            content_id: Primary source identifier.
            external_id: IMDb id used when the primary record has none.
            kind: movie or tv.

        Returns:
            Unified record, or None when the primary source has no
            such title.
        """
        primary = await self._guarded(self.primary.fetch_by_id(content_id, kind), "details")
        if primary is None:
            return None

        external_id = primary.external_id or external_id
        if not external_id:
            return to_content(primary)

        for source in self.fallbacks:
            if not source.supports(kind):
                continue
            secondary = await self._guarded(
                source.fetch_by_external_id(external_id, kind), f"{source.name}_details"
            )
            if secondary is not None:
                return merge(primary, secondary)

        return to_content(primary)

    # -------------------------------------------------------------------------
    # Search Pipeline
    # -------------------------------------------------------------------------

    async def _search(
        self,
        options: SearchOptions,
        kind: ContentKind | None,
    ) -> list[Movie | TVSeries]:
        """Run the pipeline for every requested kind."""
        results: list[Movie | TVSeries] = []
        for current in options.kinds(kind):
            results.extend(await self._search_kind(options, current))
        return results

    async def _search_kind(
        self,
        options: SearchOptions,
        kind: ContentKind,
    ) -> list[Movie | TVSeries]:
        """Run the pipeline for one content kind."""
        stats = AggregationStats(kind=kind)
        self.last_stats[kind] = stats
        accumulator = ResultAccumulator(kind)

        # 1. Primary, one call per language
        if self.primary.supports(kind):
            languages = options.languages or self._default_languages
            calls = [
                _SourceCall(self.primary, self.primary.search(options, kind, lang), lang)
                for lang in languages
            ]
            stats.primary_calls = len(calls)
            for batch in await self._fan_out(calls, stats):
                for partial in batch:
                    accumulator.add_primary(partial)
        stats.primary_records = len(accumulator)

        # 2-3. Fallbacks, decided on the primary count
        fallback_calls = self._plan_fallbacks(options, kind, len(accumulator))
        stats.fallback_sources = [f"{call.source.name}:{call.label}" for call in fallback_calls]
        for batch in await self._fan_out(fallback_calls, stats):
            for partial in batch:
                accumulator.add_secondary(partial)
        for source_name, merge_stats in accumulator.stats.items():
            merge_stats.log_summary(source_name)

        # 4. Deduplicate
        records = Deduplicator().deduplicate(accumulator.records)
        stats.after_dedup = len(records)

        # 5. Runtime bounds, unknown runtimes kept
        records = [record for record in records if options.runtime_allows(_runtime(record))]
        stats.after_runtime = len(records)

        # 6. Stable rank and truncate
        ranked = sorted(records, key=lambda record: -record.vote_average)
        ranked = ranked[: self.policy.max_results]

        stats.final_count = len(ranked)
        stats.log_summary()
        SEARCH_RESULTS.labels(kind=kind).observe(len(ranked))
        return ranked

    def _plan_fallbacks(
        self,
        options: SearchOptions,
        kind: ContentKind,
        accumulated: int,
    ) -> list[_SourceCall]:
        """Decide which fallback calls to issue, in merge order."""
        calls: list[_SourceCall] = []
        for source in self.fallbacks:
            if not source.supports(kind):
                continue
            reason = self.policy.fallback_reason(options, accumulated, source.serves_classics)
            if reason is not None:
                calls.append(_SourceCall(source, source.search(options, kind), reason))

        if self.policy.wants_regional(options):
            for source in self.fallbacks:
                if source.supports_regional and source.supports(kind):
                    calls.append(
                        _SourceCall(
                            source,
                            source.search_regional(options.regional_focus or "", options),
                            REASON_REGIONAL,
                        )
                    )
        return calls

    # -------------------------------------------------------------------------
    # Fan-out
    # -------------------------------------------------------------------------

    async def _fan_out(
        self,
        calls: list[_SourceCall],
        stats: AggregationStats,
    ) -> list[list[PartialContent]]:
        """Run adapter calls concurrently with isolated failures.

        Args:
            calls: Pending calls.
            stats: Statistics updated with failures.

        Returns:
            One batch per call, in call order (empty for failed calls).
        """
        if not calls:
            return []

        outcomes = await asyncio.gather(
            *(self._timed(call) for call in calls),
            return_exceptions=True,
        )

        batches: list[list[PartialContent]] = []
        for call, outcome in zip(calls, outcomes, strict=True):
            if isinstance(outcome, asyncio.CancelledError):
                raise outcome
            if isinstance(outcome, Exception):
                stats.failed_calls += 1
                self._log_call_failure(call, outcome)
                batches.append([])
            else:
                batches.append(outcome)
        return batches

    async def _timed(self, call: _SourceCall) -> list[PartialContent]:
        """Await one call under the call timeout."""
        start = time.perf_counter()
        try:
            return await asyncio.wait_for(call.request, timeout=self._call_timeout)
        finally:
            UPSTREAM_CALL_DURATION.labels(source=call.source.name).observe(
                time.perf_counter() - start
            )

    @staticmethod
    def _log_call_failure(call: _SourceCall, exc: Exception) -> None:
        """Log one failed adapter call."""
        if isinstance(exc, TimeoutError):
            record_upstream(call.source.name, "timeout")
            logger.warning("%s call timed out (%s)", call.source.name, call.label)
        elif isinstance(exc, SourceError):
            logger.warning("%s call failed (%s): %s", call.source.name, call.label, exc)
        else:
            record_upstream(call.source.name, "error")
            logger.error(
                "%s call raised unexpectedly (%s)",
                call.source.name,
                call.label,
                exc_info=exc,
            )

    async def _guarded(
        self,
        request: Awaitable[PartialContent | None],
        label: str,
    ) -> PartialContent | None:
        """Await a single lookup under the call timeout."""
        try:
            return await asyncio.wait_for(request, timeout=self._call_timeout)
        except TimeoutError:
            logger.warning("Lookup timed out (%s)", label)
            return None


def _runtime(record: Movie | TVSeries) -> int | None:
    """Known runtime of a record (movies only)."""
    if isinstance(record, Movie):
        return record.runtime
    return None
