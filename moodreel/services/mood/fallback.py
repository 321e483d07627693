"""Offline keyword mood classifier.

Used whenever the language model is unavailable or returns something
unusable.
"""

from moodreel.services.mood.config import (
    CLASSIC_ERA,
    DEFAULT_MOOD,
    MOOD_KEYWORDS,
    SHORT_RUNTIME_KEYWORDS,
    SHORT_RUNTIME_MAX,
    genres_for_mood,
)
from moodreel.services.mood.schemas import Era, MoodInterpretation

MATCHED_CONFIDENCE = 0.7
UNMATCHED_CONFIDENCE = 0.5


def classify_mood(text: str) -> MoodInterpretation:
    """Classify mood text by keyword counts.

    The mood with the most keyword hits wins; ties keep the first
    mood in declaration order. Without any hit the mood is "relaxed".

    Args:
        text: Free-text mood description.

    Returns:
        Interpretation with the classic era and optional short runtime.
    """
    lower = text.lower()

    detected = DEFAULT_MOOD
    best = 0
    for mood, words in MOOD_KEYWORDS.items():
        matches = sum(1 for word in words if word in lower)
        if matches > best:
            best = matches
            detected = mood

    max_runtime = (
        SHORT_RUNTIME_MAX if any(word in lower for word in SHORT_RUNTIME_KEYWORDS) else None
    )

    return MoodInterpretation(
        mood=detected,
        preferred_genres=genres_for_mood(detected) or ["Drama"],
        max_runtime_min=max_runtime,
        era=Era(year_from=CLASSIC_ERA[0], year_to=CLASSIC_ERA[1]),
        confidence=MATCHED_CONFIDENCE if best > 0 else UNMATCHED_CONFIDENCE,
    )
