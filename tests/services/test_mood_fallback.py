"""Unit tests for the offline keyword mood classifier."""

import pytest

from moodreel.services.mood import classify_mood, genres_for_mood
from moodreel.services.mood.fallback import MATCHED_CONFIDENCE, UNMATCHED_CONFIDENCE

pytestmark = pytest.mark.unit


class TestClassifyMood:
    @staticmethod
    def test_most_keyword_hits_wins() -> None:
        result = classify_mood("Something happy and fun, I want to laugh")
        assert result.mood == "happy"
        assert result.preferred_genres == ["Comedy", "Family", "Music"]
        assert result.confidence == MATCHED_CONFIDENCE

    @staticmethod
    def test_no_hit_defaults_to_relaxed() -> None:
        result = classify_mood("whatever")
        assert result.mood == "relaxed"
        assert result.preferred_genres == genres_for_mood("relaxed")
        assert result.confidence == UNMATCHED_CONFIDENCE

    @staticmethod
    def test_tie_keeps_declaration_order() -> None:
        assert classify_mood("sad love").mood == "sad"

    @staticmethod
    def test_superhero_not_inferred_from_text() -> None:
        assert classify_mood("superhero").mood == "relaxed"

    @staticmethod
    def test_short_request_caps_runtime() -> None:
        result = classify_mood("a quick dark thriller")
        assert result.mood == "intense"
        assert result.max_runtime_min == 120

    @staticmethod
    def test_classic_era_always_set() -> None:
        era = classify_mood("anything").era
        assert era is not None
        assert (era.year_from, era.year_to) == (1970, 2005)

    @staticmethod
    def test_case_insensitive() -> None:
        assert classify_mood("MYSTERY and a DETECTIVE").mood == "mysterious"
