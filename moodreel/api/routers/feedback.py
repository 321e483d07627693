"""Feedback endpoints."""

from fastapi import APIRouter, Depends, HTTPException, status

from moodreel.api.dependencies import StorageDep, check_rate_limit
from moodreel.api.schemas import DeleteResponse, FeedbackRequest, LikedResponse
from moodreel.services.storage import FeedbackRecord

router = APIRouter(
    prefix="/feedback",
    tags=["Feedback"],
    dependencies=[Depends(check_rate_limit)],
)


@router.post(
    "",
    response_model=FeedbackRecord,
    summary="Record feedback",
)
def create_feedback(request: FeedbackRequest, storage: StorageDep) -> FeedbackRecord:
    """Store a like or dislike."""
    return storage.record(request.content_id, request.liked, user_id=request.user_id)


@router.get(
    "/liked",
    response_model=LikedResponse,
    summary="List liked titles",
)
def list_liked(storage: StorageDep) -> LikedResponse:
    return LikedResponse(content_ids=storage.list_liked())


@router.delete(
    "/{feedback_id}",
    response_model=DeleteResponse,
    summary="Delete feedback",
)
def delete_feedback(feedback_id: str, storage: StorageDep) -> DeleteResponse:
    """Delete a feedback entry.

    Raises:
        HTTPException: 404 if the entry is unknown.
    """
    if not storage.remove(feedback_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Feedback not found",
        )
    return DeleteResponse()
