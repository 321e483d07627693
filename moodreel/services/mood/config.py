"""Mood vocabulary and mood-to-genre configuration."""

from dataclasses import dataclass

# =============================================================================
# MOODS
# =============================================================================

MOODS: tuple[str, ...] = (
    "happy",
    "sad",
    "nostalgic",
    "adventurous",
    "romantic",
    "intense",
    "relaxed",
    "mysterious",
    "superhero",
)

DEFAULT_MOOD = "relaxed"
"""Mood used when nothing can be inferred."""

DEFAULT_GENRES: tuple[str, ...] = ("Drama",)
"""Genres searched when neither request nor mood supplies any."""


# =============================================================================
# MOOD CONFIGURATION
# =============================================================================


@dataclass(frozen=True)
class MoodProfile:
    """Display label and genres searched for a mood."""

    label: str
    genres: tuple[str, ...]


MOOD_CONFIG: dict[str, MoodProfile] = {
    "happy": MoodProfile("Happy", ("Comedy", "Family", "Music")),
    "sad": MoodProfile("Sad", ("Drama", "Romance")),
    "nostalgic": MoodProfile("Nostalgic", ("Drama", "Family", "Romance")),
    "adventurous": MoodProfile("Adventurous", ("Adventure", "Action", "Western")),
    "romantic": MoodProfile("Romantic", ("Romance", "Drama")),
    "intense": MoodProfile("Intense", ("Thriller", "Crime", "Mystery")),
    "relaxed": MoodProfile("Relaxed", ("Comedy", "Drama", "Family")),
    "mysterious": MoodProfile("Mysterious", ("Mystery", "Thriller", "Crime")),
    "superhero": MoodProfile("Superhero", ("Action", "Adventure", "Science Fiction", "Fantasy")),
}

# Keywords for the offline classifier; superhero is button-only
MOOD_KEYWORDS: dict[str, tuple[str, ...]] = {
    "happy": ("happy", "cheerful", "uplifting", "joyful", "fun", "comedy", "laugh"),
    "sad": ("sad", "melancholy", "emotional", "cry", "tears", "depressing"),
    "nostalgic": ("nostalgic", "classic", "old", "vintage", "memories", "remember"),
    "adventurous": ("adventure", "exciting", "action", "thrilling", "explore"),
    "romantic": ("romantic", "love", "romance", "date", "couple"),
    "intense": ("intense", "thriller", "suspense", "dark", "serious", "crime"),
    "relaxed": ("relaxed", "calm", "peaceful", "easy", "light", "comfortable"),
    "mysterious": ("mysterious", "mystery", "detective", "puzzle", "enigma"),
}

SHORT_RUNTIME_KEYWORDS: tuple[str, ...] = ("short", "quick")
SHORT_RUNTIME_MAX = 120

CLASSIC_ERA: tuple[int, int] = (1970, 2005)


def genres_for_mood(mood: str | None) -> list[str]:
    """Canonical genres configured for a mood (empty when unknown)."""
    if not mood or mood not in MOOD_CONFIG:
        return []
    return list(MOOD_CONFIG[mood].genres)
