"""Unit tests for the multi-source search orchestrator."""

import asyncio

import pytest

from moodreel.aggregation.cache import ResultCache
from moodreel.aggregation.orchestrator import (
    AggregationStats,
    ResultAccumulator,
    SearchOrchestrator,
)
from moodreel.aggregation.policy import SourcePolicy
from moodreel.aggregation.schemas import Movie, SearchOptions, TVSeries

pytestmark = pytest.mark.unit


@pytest.fixture
def sources(fake_source, movies_factory):
    """Primary with five movies, classic-film and regional fallbacks."""

    def _build(primary_results=None, omdb_results=None, tvmaze_results=None, regional=None, **primary_kwargs):
        primary = fake_source(
            "tmdb",
            results=movies_factory(5) if primary_results is None else primary_results,
            **primary_kwargs,
        )
        omdb = fake_source(
            "omdb",
            kinds=("movie",),
            results=omdb_results or [],
            serves_classics=True,
        )
        tvmaze = fake_source(
            "tvmaze",
            kinds=("tv",),
            results=tvmaze_results or [],
            regional=regional or [],
            supports_regional=True,
        )
        return primary, omdb, tvmaze

    return _build


def _orchestrator(primary, *fallbacks, **kwargs) -> SearchOrchestrator:
    return SearchOrchestrator(primary, list(fallbacks), **kwargs)


# -------------------------------------------------------------------------
# Statistics / accumulator
# -------------------------------------------------------------------------


class TestAggregationStats:
    @staticmethod
    def test_log_summary_no_error() -> None:
        stats = AggregationStats(kind="tv", primary_calls=5, final_count=3)
        stats.log_summary()
        assert stats.duration_seconds >= 0


class TestResultAccumulator:
    @staticmethod
    def test_primary_repeats_skipped(partial_factory) -> None:
        acc = ResultAccumulator("movie")
        acc.add_primary(partial_factory())
        acc.add_primary(partial_factory(vote_average=1.0))
        assert len(acc) == 1
        assert acc.records[0].vote_average == 8.7

    @staticmethod
    def test_secondary_merged_by_external_id(partial_factory) -> None:
        acc = ResultAccumulator("movie")
        acc.add_primary(partial_factory())
        acc.add_secondary(partial_factory(id=68646, source_name="omdb", director="Coppola"))
        assert len(acc) == 1
        assert acc.records[0].director == "Coppola"
        assert acc.stats["omdb"].merged == 1

    @staticmethod
    def test_secondary_wrong_kind_dropped(partial_factory) -> None:
        acc = ResultAccumulator("movie")
        acc.add_secondary(partial_factory(kind="tv", source_name="tvmaze"))
        assert len(acc) == 0
        assert acc.stats["tvmaze"].dropped_kind == 1

    @staticmethod
    def test_secondary_same_source_duplicate_skipped(partial_factory) -> None:
        acc = ResultAccumulator("movie")
        acc.add_secondary(partial_factory(id=5, source_name="omdb", external_id=None))
        acc.add_secondary(partial_factory(id=5, source_name="omdb", external_id=None))
        assert len(acc) == 1
        assert acc.stats["omdb"].skipped_duplicates == 1

    @staticmethod
    def test_ids_not_compared_across_sources(partial_factory) -> None:
        acc = ResultAccumulator("movie")
        acc.add_primary(partial_factory(id=100, external_id="tt0000001"))
        acc.add_secondary(partial_factory(id=100, source_name="omdb", external_id="tt0000002"))
        assert len(acc) == 2


# -------------------------------------------------------------------------
# Fallback policy scenarios
# -------------------------------------------------------------------------


class TestFallbackScenarios:
    @staticmethod
    @pytest.mark.asyncio
    async def test_enough_modern_results_skip_secondary(sources) -> None:
        primary, omdb, tvmaze = sources()
        options = SearchOptions(genres=["Drama"], languages=["en"], year_to=2005, content_kind="movie")

        results = await _orchestrator(primary, omdb, tvmaze).search_content(options)

        assert len(results) == 5
        assert primary.calls == [("search", "movie", "en")]
        assert omdb.calls == []
        assert tvmaze.calls == []

    @staticmethod
    @pytest.mark.asyncio
    async def test_classics_search_queries_classic_source(sources, partial_factory) -> None:
        classic = partial_factory(
            id=34583, title="Casablanca", source_name="omdb", external_id="tt0034583", release_date="1943-01-23"
        )
        primary, omdb, tvmaze = sources(omdb_results=[classic])
        options = SearchOptions(genres=["Drama"], languages=["en"], old_classics_only=True, content_kind="movie")

        results = await _orchestrator(primary, omdb, tvmaze).search_content(options)

        assert omdb.calls == [("search", "movie", None)]
        assert len(results) == 6
        assert any(r.title == "Casablanca" for r in results)

    @staticmethod
    @pytest.mark.asyncio
    async def test_secondary_enriches_primary_record(sources, partial_factory) -> None:
        primary, omdb, tvmaze = sources(
            primary_results=[partial_factory()],
            omdb_results=[
                partial_factory(id=68646, source_name="omdb", director="Francis Ford Coppola")
            ],
        )
        options = SearchOptions(genres=["Drama"], languages=["en"], year_to=1990, content_kind="movie")

        results = await _orchestrator(primary, omdb, tvmaze).search_content(options)

        assert len(results) == 1
        assert results[0].id == 238
        assert results[0].director == "Francis Ford Coppola"
        assert results[0].sources == ["tmdb", "omdb"]

    @staticmethod
    @pytest.mark.asyncio
    async def test_thin_results_query_every_fallback(sources, movies_factory) -> None:
        primary, omdb, tvmaze = sources(
            primary_results=movies_factory(2),
            omdb_results=movies_factory(2, source_name="omdb", start=50),
        )
        options = SearchOptions(genres=["Drama"], languages=["en"], year_to=2005)

        results = await _orchestrator(primary, omdb, tvmaze).search_content(options)

        assert ("search", "movie", None) in omdb.calls
        assert ("search", "tv", None) in tvmaze.calls
        assert len(results) == 4

    @staticmethod
    @pytest.mark.asyncio
    async def test_regional_focus_uses_regional_search(sources, movies_factory) -> None:
        shows = movies_factory(5, kind="tv")
        regional = movies_factory(1, source_name="tvmaze", start=900, kind="tv")
        primary, omdb, tvmaze = sources(primary_results=shows, regional=regional)
        options = SearchOptions(genres=["Drama"], languages=["tr"], content_kind="tv", regional_focus="Turkish")

        results = await _orchestrator(primary, omdb, tvmaze).search_content(options)

        assert tvmaze.calls == [("regional", None, "Turkish")]
        assert len(results) == 6
        assert all(isinstance(r, TVSeries) for r in results)

    @staticmethod
    @pytest.mark.asyncio
    async def test_default_languages_used(sources) -> None:
        primary, omdb, tvmaze = sources()
        orchestrator = _orchestrator(primary, omdb, tvmaze, default_languages=("hi", "en"))

        results = await orchestrator.search_content(SearchOptions(year_to=2005, content_kind="movie"))

        assert [lang for _, _, lang in primary.calls] == ["hi", "en"]
        assert len(results) == 5


# -------------------------------------------------------------------------
# Identity
# -------------------------------------------------------------------------


class TestIdentity:
    @staticmethod
    @pytest.mark.asyncio
    async def test_same_numeric_id_different_sources_kept(sources, partial_factory) -> None:
        primary, omdb, tvmaze = sources(
            primary_results=[partial_factory(id=100, external_id="tt0000001")],
            omdb_results=[partial_factory(id=100, source_name="omdb", external_id="tt0000002")],
        )
        options = SearchOptions(languages=["en"], year_to=1990, content_kind="movie")

        results = await _orchestrator(primary, omdb, tvmaze).search_content(options)

        assert len(results) == 2
        assert {r.origin for r in results} == {"tmdb", "omdb"}

    @staticmethod
    @pytest.mark.asyncio
    async def test_language_repeats_collapse(sources, partial_factory) -> None:
        godfather = partial_factory()
        primary, omdb, tvmaze = sources(
            primary_results=None,
            by_language={"en": [godfather], "it": [godfather]},
        )
        options = SearchOptions(languages=["en", "it"], year_to=2005, content_kind="movie")

        results = await _orchestrator(primary, omdb, tvmaze).search_content(options)

        assert [r.id for r in results] == [238]


# -------------------------------------------------------------------------
# Failure isolation
# -------------------------------------------------------------------------


class TestGracefulDegradation:
    @staticmethod
    @pytest.mark.asyncio
    async def test_primary_failure_falls_back(sources, movies_factory) -> None:
        primary, omdb, tvmaze = sources(
            fail=True,
            omdb_results=movies_factory(3, source_name="omdb", start=50),
        )
        options = SearchOptions(languages=["en"], year_to=2005, content_kind="movie")

        results = await _orchestrator(primary, omdb, tvmaze).search_content(options)

        assert [r.origin for r in results] == ["omdb"] * 3

    @staticmethod
    @pytest.mark.asyncio
    async def test_every_source_failing_returns_empty(fake_source) -> None:
        primary = fake_source("tmdb", fail=True)
        omdb = fake_source("omdb", kinds=("movie",), fail=True, serves_classics=True)
        tvmaze = fake_source("tvmaze", kinds=("tv",), fail=True, supports_regional=True)
        options = SearchOptions(languages=["en"], regional_focus="Korean")

        assert await _orchestrator(primary, omdb, tvmaze).search_content(options) == []

    @staticmethod
    @pytest.mark.asyncio
    async def test_one_language_failing_keeps_others(fake_source, movies_factory) -> None:
        primary = fake_source(
            "tmdb",
            by_language={"en": movies_factory(3, start=10)},
            fail_languages=("hi",),
        )
        orchestrator = _orchestrator(primary)
        options = SearchOptions(languages=["hi", "en"], content_kind="movie")

        results = await orchestrator.search_content(options)

        assert sorted(r.id for r in results) == [10, 11, 12]
        stats = orchestrator.last_stats["movie"]
        assert stats.primary_calls == 2
        assert stats.failed_calls == 1

    @staticmethod
    @pytest.mark.asyncio
    async def test_slow_failing_language_does_not_cancel_others(fake_source, movies_factory) -> None:
        primary = fake_source(
            "tmdb",
            by_language={"en": movies_factory(2, start=10), "es": movies_factory(2, start=20)},
            fail_languages=("hi",),
            delay=0.05,
        )
        options = SearchOptions(languages=["hi", "en", "es"], content_kind="movie")

        results = await _orchestrator(primary).search_content(options)

        assert sorted(r.id for r in results) == [10, 11, 20, 21]

    @staticmethod
    @pytest.mark.asyncio
    async def test_language_calls_issued_concurrently(fake_source, movies_factory) -> None:
        class _Rendezvous(fake_source):
            """Every search waits until all expected searches have started."""

            def __init__(self, *args, expected: int, **kwargs) -> None:
                super().__init__(*args, **kwargs)
                self.expected = expected
                self.started = 0
                self.all_started = asyncio.Event()

            async def search(self, options, kind, language=None):
                self.started += 1
                if self.started >= self.expected:
                    self.all_started.set()
                await asyncio.wait_for(self.all_started.wait(), timeout=1.0)
                return await super().search(options, kind, language)

        primary = _Rendezvous(
            "tmdb",
            by_language={
                "hi": movies_factory(2, start=1),
                "en": movies_factory(2, start=10),
                "es": movies_factory(2, start=20),
            },
            expected=3,
        )
        orchestrator = _orchestrator(primary)
        options = SearchOptions(languages=["hi", "en", "es"], content_kind="movie")

        results = await orchestrator.search_content(options)

        assert len(results) == 6
        assert orchestrator.last_stats["movie"].failed_calls == 0

    @staticmethod
    @pytest.mark.asyncio
    async def test_slow_call_times_out(sources, movies_factory) -> None:
        primary, omdb, tvmaze = sources(
            delay=0.5,
            omdb_results=movies_factory(1, source_name="omdb", start=50),
        )
        orchestrator = _orchestrator(primary, omdb, tvmaze, call_timeout=0.05)
        options = SearchOptions(languages=["en"], year_to=2005, content_kind="movie")

        results = await orchestrator.search_content(options)

        assert [r.origin for r in results] == ["omdb"]


# -------------------------------------------------------------------------
# Filtering and ranking
# -------------------------------------------------------------------------


class TestRanking:
    @staticmethod
    @pytest.mark.asyncio
    async def test_stable_sort_by_rating(sources, partial_factory) -> None:
        ratings = [7.0, 9.0, 7.0, 8.0, 7.0]
        records = [
            partial_factory(id=i + 1, title=f"M{i + 1}", external_id=f"tt{i + 1:07d}", vote_average=rating)
            for i, rating in enumerate(ratings)
        ]
        primary, omdb, tvmaze = sources(primary_results=records)
        options = SearchOptions(languages=["en"], year_to=2005, content_kind="movie")

        results = await _orchestrator(primary, omdb, tvmaze).search_content(options)

        assert [r.id for r in results] == [2, 4, 1, 3, 5]

    @staticmethod
    @pytest.mark.asyncio
    async def test_truncated_to_max_results(sources) -> None:
        primary, omdb, tvmaze = sources()
        orchestrator = _orchestrator(primary, omdb, tvmaze, policy=SourcePolicy(max_results=3))
        options = SearchOptions(languages=["en"], year_to=2005, content_kind="movie")

        assert len(await orchestrator.search_content(options)) == 3

    @staticmethod
    @pytest.mark.asyncio
    async def test_runtime_filter_keeps_unknown(sources, partial_factory) -> None:
        records = [
            partial_factory(id=1, external_id="tt0000001", runtime=150),
            partial_factory(id=2, external_id="tt0000002", runtime=100),
            partial_factory(id=3, external_id="tt0000003"),
        ]
        primary, omdb, tvmaze = sources(primary_results=records)
        options = SearchOptions(languages=["en"], year_to=2005, max_runtime=120, content_kind="movie")

        results = await _orchestrator(primary, omdb, tvmaze, policy=SourcePolicy(thin_results_threshold=0)).search_content(options)

        assert sorted(r.id for r in results) == [2, 3]

    @staticmethod
    @pytest.mark.asyncio
    async def test_movies_before_tv(sources, movies_factory) -> None:
        records = movies_factory(5) + movies_factory(5, start=100, kind="tv")
        primary, omdb, tvmaze = sources(primary_results=records)
        options = SearchOptions(languages=["en"], year_to=2005)

        results = await _orchestrator(primary, omdb, tvmaze).search_content(options)

        kinds = [r.kind for r in results]
        assert kinds == ["movie"] * 5 + ["tv"] * 5
        assert isinstance(results[0], Movie)


# -------------------------------------------------------------------------
# Cache
# -------------------------------------------------------------------------


class TestCachedSearch:
    @staticmethod
    @pytest.mark.asyncio
    async def test_repeat_search_issues_no_calls(sources) -> None:
        primary, omdb, tvmaze = sources()
        orchestrator = _orchestrator(primary, omdb, tvmaze, cache=ResultCache())
        options = SearchOptions(genres=["Drama", "Comedy"], languages=["en"], year_to=2005, content_kind="movie")

        first = await orchestrator.search_content(options)
        calls = len(primary.calls)
        second = await orchestrator.search_content(
            SearchOptions(genres=["Comedy", "Drama"], languages=["en"], year_to=2005, content_kind="movie")
        )

        assert first == second
        assert len(primary.calls) == calls


# -------------------------------------------------------------------------
# Enriched details
# -------------------------------------------------------------------------


class TestEnrichedDetails:
    @staticmethod
    @pytest.mark.asyncio
    async def test_details_merged_with_fallback(fake_source, partial_factory) -> None:
        primary = fake_source("tmdb", details={238: partial_factory()})
        omdb = fake_source(
            "omdb",
            kinds=("movie",),
            external={"tt0068646": partial_factory(id=68646, source_name="omdb", awards_text="Won 3 Oscars.")},
        )

        record = await _orchestrator(primary, omdb).get_enriched_details(238)

        assert record is not None
        assert record.id == 238
        assert record.awards_text == "Won 3 Oscars."

    @staticmethod
    @pytest.mark.asyncio
    async def test_unknown_title(fake_source) -> None:
        assert await _orchestrator(fake_source("tmdb")).get_enriched_details(1) is None

    @staticmethod
    @pytest.mark.asyncio
    async def test_no_fallback_match_returns_primary(fake_source, partial_factory) -> None:
        primary = fake_source("tmdb", details={238: partial_factory()})
        omdb = fake_source("omdb", kinds=("movie",))

        record = await _orchestrator(primary, omdb).get_enriched_details(238)

        assert record is not None
        assert record.sources == ["tmdb"]

    @staticmethod
    @pytest.mark.asyncio
    async def test_primary_imdb_id_wins_over_given_one(fake_source, partial_factory) -> None:
        primary = fake_source("tmdb", details={238: partial_factory(external_id="tt0068646")})
        omdb = fake_source(
            "omdb",
            kinds=("movie",),
            external={
                "tt0068646": partial_factory(id=68646, source_name="omdb", director="Francis Ford Coppola"),
                "tt0111161": partial_factory(id=111161, source_name="omdb", director="Frank Darabont"),
            },
        )

        record = await _orchestrator(primary, omdb).get_enriched_details(238, external_id="tt0111161")

        assert record is not None
        assert record.director == "Francis Ford Coppola"

    @staticmethod
    @pytest.mark.asyncio
    async def test_aclose_closes_every_source(fake_source) -> None:
        primary, omdb = fake_source("tmdb"), fake_source("omdb")
        await _orchestrator(primary, omdb).aclose()
        assert primary.closed and omdb.closed
