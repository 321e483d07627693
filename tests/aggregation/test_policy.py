"""Unit tests for the fallback invocation policy."""

import pytest

from moodreel.aggregation.policy import (
    REASON_CLASSICS,
    REASON_THIN,
    SourcePolicy,
)
from moodreel.aggregation.schemas import SearchOptions
from moodreel.settings import SearchSettings

pytestmark = pytest.mark.unit


class TestSourcePolicy:
    @staticmethod
    def test_defaults() -> None:
        policy = SourcePolicy()
        assert policy.thin_results_threshold == 5
        assert policy.classics_year_cutoff == 2000
        assert policy.max_results == 20
        assert policy.regional_focus == frozenset({"Turkish", "Pakistani", "Korean"})

    @staticmethod
    def test_from_settings() -> None:
        search = SearchSettings(SEARCH_THIN_RESULTS_THRESHOLD=3, SEARCH_MAX_RESULTS=10)
        policy = SourcePolicy.from_settings(search)
        assert policy.thin_results_threshold == 3
        assert policy.max_results == 10

    @staticmethod
    def test_classics_search_detection() -> None:
        policy = SourcePolicy()
        assert policy.is_classics_search(SearchOptions(old_classics_only=True))
        assert policy.is_classics_search(SearchOptions(year_to=1995))
        assert not policy.is_classics_search(SearchOptions(year_to=2005))
        assert not policy.is_classics_search(SearchOptions())

    @staticmethod
    def test_classics_source_queried_for_old_searches() -> None:
        reason = SourcePolicy().fallback_reason(SearchOptions(year_to=1990), 20, serves_classics=True)
        assert reason == REASON_CLASSICS

    @staticmethod
    def test_non_classics_source_skipped_when_enough() -> None:
        assert SourcePolicy().fallback_reason(SearchOptions(year_to=1990), 20, serves_classics=False) is None

    @staticmethod
    def test_thin_results_threshold_boundary() -> None:
        policy = SourcePolicy()
        options = SearchOptions(year_to=2005)
        assert policy.fallback_reason(options, 4, serves_classics=False) == REASON_THIN
        assert policy.fallback_reason(options, 5, serves_classics=True) is None

    @staticmethod
    def test_wants_regional() -> None:
        policy = SourcePolicy()
        assert policy.wants_regional(SearchOptions(regional_focus="Korean"))
        assert not policy.wants_regional(SearchOptions(regional_focus="Indian"))
        assert not policy.wants_regional(SearchOptions(regional_focus="Global"))
