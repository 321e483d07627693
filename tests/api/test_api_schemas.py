"""Unit tests for API request and response schemas."""

import pytest
from pydantic import ValidationError

from moodreel.api.schemas import (
    FeedbackRequest,
    HealthResponse,
    InterpretMoodRequest,
    SearchResponse,
)

pytestmark = pytest.mark.unit


class TestFeedbackRequest:
    @staticmethod
    @pytest.mark.parametrize("key", ["content_id", "contentId", "movieId"])
    def test_id_aliases(key: str) -> None:
        assert FeedbackRequest.model_validate({key: 238, "liked": True}).content_id == 238

    @staticmethod
    def test_user_id_optional() -> None:
        assert FeedbackRequest.model_validate({"content_id": 1, "liked": False}).user_id is None

    @staticmethod
    @pytest.mark.parametrize(
        "payload",
        [{"content_id": 0, "liked": True}, {"content_id": 1}, {"content_id": 1, "liked": True, "user_id": "x" * 101}],
    )
    def test_invalid(payload: dict) -> None:
        with pytest.raises(ValidationError):
            FeedbackRequest.model_validate(payload)


class TestOtherSchemas:
    @staticmethod
    def test_interpret_text_limit() -> None:
        assert InterpretMoodRequest().text == ""
        with pytest.raises(ValidationError):
            InterpretMoodRequest(text="x" * 2001)

    @staticmethod
    def test_health_timestamp_utc() -> None:
        health = HealthResponse(status="ok", version="1.0.0")
        assert health.timestamp.tzinfo is not None
        assert health.sources == {}

    @staticmethod
    def test_empty_search_response() -> None:
        response = SearchResponse(movies=[], tv_series=[], total=0)
        assert response.model_dump()["interpretation"] is None
