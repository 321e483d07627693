"""OMDb data normalizer.

Transforms OMDb title payloads into partial content records.
OMDb marks unknown values with the literal "N/A"; those stay absent.
"""

import logging
from typing import Any

from pydantic import ValidationError

from moodreel.aggregation.schemas import KIND_MOVIE, KIND_TV, ContentKind, PartialContent
from moodreel.sources.normalize import (
    NOT_AVAILABLE,
    clamp_rating,
    compact,
    language_code,
    parse_float,
    parse_int,
    split_names,
)

logger = logging.getLogger(__name__)

SOURCE_NAME = "omdb"

ROTTEN_TOMATOES = "Rotten Tomatoes"

_KINDS_BY_TYPE: dict[str, ContentKind] = {"movie": KIND_MOVIE, "series": KIND_TV}


def imdb_to_int(imdb_id: str) -> int | None:
    """Numeric part of an IMDb id ("tt0068646" -> 68646)."""
    digits = imdb_id.removeprefix("tt")
    return int(digits) if digits.isdigit() and int(digits) > 0 else None


def int_to_imdb(content_id: int) -> str:
    """IMDb id for a numeric OMDb id (68646 -> "tt0068646")."""
    return f"tt{content_id:07d}"


def _value(raw: dict[str, Any], key: str) -> str | None:
    """Field value with "N/A" treated as unknown."""
    value = raw.get(key)
    if value is None or value == NOT_AVAILABLE:
        return None
    return str(value).strip() or None


class OMDbNormalizer:
    """Normalizes OMDb title payloads into partial content records."""

    def normalize(self, raw: dict[str, Any]) -> PartialContent | None:
        """Normalize a title details payload.

        Args:
            raw: OMDb payload fetched by IMDb id.

        Returns:
            Partial record, or None for unsupported types or invalid data.
        """
        kind = _KINDS_BY_TYPE.get(str(raw.get("Type", "")).lower())
        imdb_id = _value(raw, "imdbID")
        content_id = imdb_to_int(imdb_id) if imdb_id else None
        if kind is None or content_id is None:
            logger.debug("Skipping OMDb record %s (type=%s)", imdb_id, raw.get("Type"))
            return None

        imdb_rating = clamp_rating(parse_float(raw.get("imdbRating")))
        languages = split_names(raw.get("Language"))
        released = _value(raw, "Released") or _value(raw, "Year")

        data: dict[str, Any] = {
            "id": content_id,
            "kind": kind,
            "source_name": SOURCE_NAME,
            "title": _value(raw, "Title"),
            "original_title": _value(raw, "Title"),
            "overview": _value(raw, "Plot"),
            "poster_path": _value(raw, "Poster"),
            "vote_average": imdb_rating,
            "vote_count": parse_int(raw.get("imdbVotes")),
            "genres": split_names(raw.get("Genre")),
            "original_language": language_code(languages[0]) if languages else None,
            "spoken_languages": [code for code in map(language_code, languages) if code],
            "external_id": imdb_id,
            "cast": split_names(raw.get("Actors")),
            "director": _value(raw, "Director"),
            "writers": split_names(raw.get("Writer")),
            "awards_text": _value(raw, "Awards"),
            "external_rating": imdb_rating,
            "critic_rating": self._critic_rating(raw),
        }
        if kind == KIND_MOVIE:
            data["release_date"] = released
            data["runtime"] = parse_int(raw.get("Runtime"))
        else:
            data["first_air_date"] = released

        try:
            return PartialContent(**compact(data))
        except ValidationError as e:
            logger.warning("Invalid OMDb record %s: %s", imdb_id, e.error_count())
            return None

    @staticmethod
    def _critic_rating(raw: dict[str, Any]) -> str | None:
        """Rotten Tomatoes score ("91%") from the Ratings list."""
        for rating in raw.get("Ratings") or []:
            if rating.get("Source") == ROTTEN_TOMATOES:
                return rating.get("Value")
        return None
