"""Pydantic schemas for API request/response validation."""

from datetime import datetime, timezone

from pydantic import AliasChoices, BaseModel, Field

from moodreel.aggregation.schemas import Movie, TVSeries
from moodreel.services.availability import StreamingSource
from moodreel.services.discovery import SearchRequest
from moodreel.services.mood import MoodInterpretation

__all__ = [
    "AvailabilityResponse",
    "CreditsResponse",
    "DeleteResponse",
    "FeedbackRequest",
    "HealthResponse",
    "InterpretMoodRequest",
    "LikedResponse",
    "SearchRequest",
    "SearchResponse",
]

# =============================================================================
# HEALTH
# =============================================================================


class HealthResponse(BaseModel):
    """Health check response schema."""

    status: str = Field(examples=["ok"])
    version: str = Field(examples=["1.0.0"])
    sources: dict[str, bool] = Field(default_factory=dict)
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


# =============================================================================
# MOOD
# =============================================================================


class InterpretMoodRequest(BaseModel):
    """Free-text mood description."""

    text: str = Field(default="", max_length=2000)


# =============================================================================
# SEARCH
# =============================================================================


class SearchResponse(BaseModel):
    """Discovery search results."""

    movies: list[Movie]
    tv_series: list[TVSeries]
    interpretation: MoodInterpretation | None = None
    total: int


class AvailabilityResponse(BaseModel):
    """Streaming sources of a title."""

    sources: list[StreamingSource]


class CreditsResponse(BaseModel):
    """Top-billed cast of a movie."""

    cast: list[str]


# =============================================================================
# FEEDBACK
# =============================================================================


class FeedbackRequest(BaseModel):
    """Like or dislike for a title."""

    content_id: int = Field(
        gt=0,
        validation_alias=AliasChoices("content_id", "contentId", "movieId"),
    )
    user_id: str | None = Field(
        default=None,
        max_length=100,
        validation_alias=AliasChoices("user_id", "userId"),
    )
    liked: bool


class DeleteResponse(BaseModel):
    success: bool = True


class LikedResponse(BaseModel):
    """Ids of liked titles."""

    content_ids: list[int]
