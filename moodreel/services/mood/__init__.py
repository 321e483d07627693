"""Mood interpretation collaborator."""

from moodreel.services.mood.config import DEFAULT_GENRES, MOOD_CONFIG, MOODS, genres_for_mood
from moodreel.services.mood.fallback import classify_mood
from moodreel.services.mood.interpreter import MoodInterpreter, get_mood_interpreter
from moodreel.services.mood.schemas import Era, MoodInterpretation

__all__ = [
    "DEFAULT_GENRES",
    "MOODS",
    "MOOD_CONFIG",
    "Era",
    "MoodInterpretation",
    "MoodInterpreter",
    "classify_mood",
    "genres_for_mood",
    "get_mood_interpreter",
]
