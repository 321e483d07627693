"""Controlled genre vocabulary.

Every source maps its own genre labels onto these canonical names.
Labels outside the vocabulary pass through unchanged.
"""

from collections.abc import Iterable

CANONICAL_GENRES: tuple[str, ...] = (
    "Action",
    "Adventure",
    "Animation",
    "Comedy",
    "Crime",
    "Documentary",
    "Drama",
    "Family",
    "Fantasy",
    "History",
    "Horror",
    "Music",
    "Mystery",
    "Romance",
    "Science Fiction",
    "Thriller",
    "TV Movie",
    "War",
    "Western",
)

# Upstream spellings that differ from the canonical name
_ALIASES: dict[str, str] = {
    "sci-fi": "Science Fiction",
    "science-fiction": "Science Fiction",
    "scifi": "Science Fiction",
    "historical": "History",
    "musical": "Music",
    "suspense": "Thriller",
    "romantic": "Romance",
}

_LOOKUP: dict[str, str] = {g.lower(): g for g in CANONICAL_GENRES} | _ALIASES


def normalize_genre(label: str) -> str:
    """Map a genre label onto the controlled vocabulary.

    Args:
        label: Genre label from a request or an upstream source.

    Returns:
        Canonical genre name, or the stripped label when unknown.
    """
    cleaned = label.strip()
    return _LOOKUP.get(cleaned.lower(), cleaned)


def normalize_genres(labels: Iterable[str]) -> list[str]:
    """Normalize labels, dropping blanks and duplicates (first wins)."""
    seen: set[str] = set()
    result: list[str] = []
    for label in labels:
        if not label or not label.strip():
            continue
        genre = normalize_genre(label)
        if genre not in seen:
            seen.add(genre)
            result.append(genre)
    return result


def is_canonical(label: str) -> bool:
    """Check if a label belongs to the controlled vocabulary."""
    return label in CANONICAL_GENRES
