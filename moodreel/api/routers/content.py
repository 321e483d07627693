"""Title detail, availability and credits endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Path, status

from moodreel.aggregation.schemas import KIND_MOVIE, KIND_TV, Movie, TVSeries
from moodreel.api.dependencies import DiscoveryDep, check_rate_limit
from moodreel.api.schemas import AvailabilityResponse, CreditsResponse

router = APIRouter(
    tags=["Content"],
    dependencies=[Depends(check_rate_limit)],
)

ContentId = Annotated[int, Path(gt=0, description="Primary source (TMDB) id")]


@router.get(
    "/movie/{content_id}",
    response_model=Movie,
    summary="Get movie details",
    description="Primary details enriched with credits and ratings from secondary sources.",
)
async def get_movie(content_id: ContentId, discovery: DiscoveryDep) -> Movie:
    """Get enriched movie details.

    Raises:
        HTTPException: 404 if the movie is unknown.
    """
    record = await discovery.details(content_id, KIND_MOVIE)
    if not isinstance(record, Movie):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Movie with id {content_id} not found",
        )
    return record


@router.get(
    "/tv/{content_id}",
    response_model=TVSeries,
    summary="Get TV series details",
)
async def get_tv_series(content_id: ContentId, discovery: DiscoveryDep) -> TVSeries:
    """Get enriched TV series details.

    Raises:
        HTTPException: 404 if the series is unknown.
    """
    record = await discovery.details(content_id, KIND_TV)
    if not isinstance(record, TVSeries):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"TV series with id {content_id} not found",
        )
    return record


@router.get(
    "/movie/{content_id}/availability",
    response_model=AvailabilityResponse,
    summary="Get streaming availability",
)
async def get_availability(content_id: ContentId, discovery: DiscoveryDep) -> AvailabilityResponse:
    """Streaming sources, empty when unknown."""
    return AvailabilityResponse(sources=await discovery.availability(content_id, KIND_MOVIE))


@router.get(
    "/movie/{content_id}/credits",
    response_model=CreditsResponse,
    summary="Get movie cast",
)
async def get_credits(content_id: ContentId, discovery: DiscoveryDep) -> CreditsResponse:
    """Top-billed cast, empty when unknown."""
    return CreditsResponse(cast=await discovery.credits(content_id))
