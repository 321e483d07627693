"""Discovery search endpoint."""

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import ValidationError

from moodreel.api.dependencies import DiscoveryDep, check_rate_limit
from moodreel.api.schemas import SearchRequest, SearchResponse

router = APIRouter(
    tags=["Search"],
    dependencies=[Depends(check_rate_limit)],
)


@router.post(
    "/search-movies",
    response_model=SearchResponse,
    summary="Search movies and TV series",
    description="Aggregated multi-source search driven by mood, text and filters.",
)
async def search_movies(
    request: SearchRequest,
    discovery: DiscoveryDep,
) -> SearchResponse:
    """Run a discovery search.

    Raises:
        HTTPException: 400 if the filters are inconsistent.
    """
    try:
        result = await discovery.search(request)
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=[err["msg"] for err in e.errors()],
        ) from e

    return SearchResponse(
        movies=result.movies,
        tv_series=result.tv_series,
        interpretation=result.interpretation,
        total=result.total,
    )
