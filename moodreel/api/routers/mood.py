"""Mood interpretation endpoint."""

from fastapi import APIRouter, Depends, HTTPException, status

from moodreel.api.dependencies import InterpreterDep, check_rate_limit
from moodreel.api.schemas import InterpretMoodRequest
from moodreel.services.mood import MoodInterpretation

router = APIRouter(
    tags=["Mood"],
    dependencies=[Depends(check_rate_limit)],
)


@router.post(
    "/interpret-mood",
    response_model=MoodInterpretation,
    summary="Interpret a mood description",
    description="Map free text to a mood, genres, runtime and era.",
)
async def interpret_mood(
    request: InterpretMoodRequest,
    interpreter: InterpreterDep,
) -> MoodInterpretation:
    """Interpret free-text mood.

    Raises:
        HTTPException: 400 if the text is blank.
    """
    if not request.text.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Text is required",
        )
    return await interpreter.interpret(request.text)
