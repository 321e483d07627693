"""Field helpers shared by source normalizers."""

from typing import Any

NOT_AVAILABLE = "N/A"


def compact(data: dict[str, Any]) -> dict[str, Any]:
    """Drop unknown values so they stay absent on the partial record.

    None, empty strings and empty lists are treated as "not supplied";
    zeros and False are real values and are kept.
    """
    return {key: value for key, value in data.items() if not _is_empty(value)}


def _is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, (str, list, tuple)):
        return len(value) == 0
    return False


def clamp_rating(value: float | None, scale: float = 10.0) -> float | None:
    """Rescale a rating to the 0-10 range.

    Args:
        value: Raw rating.
        scale: Upper bound of the source scale (10 or 100).

    Returns:
        Rating on a 0-10 scale rounded to one decimal, or None.
    """
    if value is None:
        return None
    rescaled = float(value) * 10.0 / scale
    return round(min(max(rescaled, 0.0), 10.0), 1)


def parse_int(value: Any) -> int | None:
    """Parse integers such as "1,234,567" or "142 min"."""
    if value is None or value == NOT_AVAILABLE:
        return None
    if isinstance(value, int):
        return value
    digits = "".join(ch for ch in str(value).split(" ")[0] if ch.isdigit())
    return int(digits) if digits else None


def parse_float(value: Any) -> float | None:
    """Parse floats, treating "N/A" and garbage as unknown."""
    if value is None or value == NOT_AVAILABLE:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def split_names(value: str | None) -> list[str]:
    """Split a comma-separated name list ("A, B, C")."""
    if not value or value == NOT_AVAILABLE:
        return []
    return [name.strip() for name in value.split(",") if name.strip()]


# Language names used by OMDb and TVmaze
LANGUAGE_CODES: dict[str, str] = {
    "english": "en",
    "turkish": "tr",
    "urdu": "ur",
    "korean": "ko",
    "hindi": "hi",
    "spanish": "es",
    "german": "de",
    "italian": "it",
    "french": "fr",
    "japanese": "ja",
}


def language_code(name: str | None) -> str | None:
    """Map a language name ("Turkish") to its ISO 639-1 code."""
    if not name or name == NOT_AVAILABLE:
        return None
    return LANGUAGE_CODES.get(name.strip().lower())
