"""TMDB data normalizer.

Transforms raw TMDB API responses (discover results and details)
into partial content records, and maps canonical genres onto TMDB
genre ids.
"""

import logging
from typing import Any

from pydantic import ValidationError

from moodreel.aggregation.genres import normalize_genre
from moodreel.aggregation.schemas import KIND_MOVIE, ContentKind, PartialContent
from moodreel.sources.normalize import clamp_rating, compact

logger = logging.getLogger(__name__)

SOURCE_NAME = "tmdb"

# =============================================================================
# GENRE ENCODING
# =============================================================================

MOVIE_GENRE_IDS: dict[str, int] = {
    "Action": 28,
    "Adventure": 12,
    "Animation": 16,
    "Comedy": 35,
    "Crime": 80,
    "Documentary": 99,
    "Drama": 18,
    "Family": 10751,
    "Fantasy": 14,
    "History": 36,
    "Horror": 27,
    "Music": 10402,
    "Mystery": 9648,
    "Romance": 10749,
    "Science Fiction": 878,
    "TV Movie": 10770,
    "Thriller": 53,
    "War": 10752,
    "Western": 37,
}

# TV genres merge some movie genres ("Action & Adventure")
TV_GENRE_IDS: dict[str, int] = {
    "Action": 10759,
    "Adventure": 10759,
    "Animation": 16,
    "Comedy": 35,
    "Crime": 80,
    "Documentary": 99,
    "Drama": 18,
    "Family": 10751,
    "Fantasy": 10765,
    "Mystery": 9648,
    "Science Fiction": 10765,
    "War": 10768,
    "Western": 37,
}

_TV_COMPOUND_GENRES: dict[str, list[str]] = {
    "Action & Adventure": ["Action", "Adventure"],
    "Sci-Fi & Fantasy": ["Science Fiction", "Fantasy"],
    "War & Politics": ["War"],
}

_GENRE_NAMES_BY_ID: dict[int, list[str]] = {
    genre_id: [name] for name, genre_id in MOVIE_GENRE_IDS.items()
} | {10759: ["Action", "Adventure"], 10765: ["Science Fiction", "Fantasy"], 10768: ["War"]}


def encode_genres(genres: tuple[str, ...] | list[str], kind: ContentKind) -> str:
    """Translate canonical genres to a TMDB ``with_genres`` value.

    Unmapped genres are dropped silently.

    Args:
        genres: Canonical genre names.
        kind: movie or tv.

    Returns:
        Comma-separated genre ids (empty when none map).
    """
    mapping = MOVIE_GENRE_IDS if kind == KIND_MOVIE else TV_GENRE_IDS
    ids: list[str] = []
    for genre in genres:
        genre_id = mapping.get(genre)
        if genre_id is not None and str(genre_id) not in ids:
            ids.append(str(genre_id))
    return ",".join(ids)


def decode_genre_names(names: list[str]) -> list[str]:
    """Map TMDB genre names (including TV compounds) to canonical names."""
    result: list[str] = []
    for name in names:
        result.extend(_TV_COMPOUND_GENRES.get(name, [normalize_genre(name)]))
    return result


def decode_genre_ids(genre_ids: list[int]) -> list[str]:
    """Map TMDB genre ids from discover results to canonical names."""
    result: list[str] = []
    for genre_id in genre_ids:
        result.extend(_GENRE_NAMES_BY_ID.get(genre_id, []))
    return result


# =============================================================================
# NORMALIZER
# =============================================================================


class TMDBNormalizer:
    """Normalizes TMDB API data into partial content records.

    Unknown values are left absent. Invalid records are logged
    and skipped.
    """

    def normalize(
        self,
        raw: dict[str, Any],
        kind: ContentKind,
        queried_language: str | None = None,
    ) -> PartialContent | None:
        """Normalize a discover result or a details response.

        Args:
            raw: Raw TMDB object.
            kind: movie or tv.
            queried_language: Language the discover query targeted.

        Returns:
            Partial record, or None when invalid.
        """
        data = self._common_fields(raw, kind)
        if kind == KIND_MOVIE:
            data.update(self._movie_fields(raw))
        else:
            data.update(self._tv_fields(raw))

        original_language = raw.get("original_language")
        if queried_language and original_language:
            data["is_dubbed"] = original_language != queried_language

        return self._validate(compact(data), raw.get("id"))

    def normalize_cast(self, credits: dict[str, Any], limit: int) -> list[str]:
        """Extract top-billed cast names from a credits response.

        Args:
            credits: Raw credits response.
            limit: Maximum names kept.

        Returns:
            Cast names in billing order.
        """
        cast = sorted(credits.get("cast") or [], key=lambda member: member.get("order", 0))
        return [member["name"] for member in cast[:limit] if member.get("name")]

    # -------------------------------------------------------------------------
    # Field Extraction
    # -------------------------------------------------------------------------

    @staticmethod
    def _common_fields(raw: dict[str, Any], kind: ContentKind) -> dict[str, Any]:
        """Fields shared by movies and TV series."""
        if raw.get("genres") is not None:
            genres = decode_genre_names([g["name"] for g in raw["genres"] if g.get("name")])
        else:
            genres = decode_genre_ids(raw.get("genre_ids") or [])

        spoken = [lang.get("iso_639_1") for lang in raw.get("spoken_languages") or []]
        external_ids = raw.get("external_ids") or {}

        return {
            "id": raw.get("id"),
            "kind": kind,
            "source_name": SOURCE_NAME,
            "overview": raw.get("overview"),
            "poster_path": raw.get("poster_path"),
            "backdrop_path": raw.get("backdrop_path"),
            "vote_average": clamp_rating(raw.get("vote_average")),
            "vote_count": raw.get("vote_count"),
            "genres": genres,
            "original_language": raw.get("original_language"),
            "spoken_languages": [code for code in spoken if code],
            "external_id": raw.get("imdb_id") or external_ids.get("imdb_id"),
        }

    @staticmethod
    def _movie_fields(raw: dict[str, Any]) -> dict[str, Any]:
        """Movie-only fields."""
        return {
            "title": raw.get("title"),
            "original_title": raw.get("original_title"),
            "release_date": raw.get("release_date"),
            "runtime": raw.get("runtime") or None,
        }

    @staticmethod
    def _tv_fields(raw: dict[str, Any]) -> dict[str, Any]:
        """TV-only fields."""
        networks = raw.get("networks") or []
        return {
            "title": raw.get("name"),
            "original_title": raw.get("original_name"),
            "first_air_date": raw.get("first_air_date"),
            "number_of_seasons": raw.get("number_of_seasons"),
            "number_of_episodes": raw.get("number_of_episodes"),
            "episode_runtimes": raw.get("episode_run_time"),
            "status": raw.get("status"),
            "network": networks[0].get("name") if networks else None,
        }

    @staticmethod
    def _validate(data: dict[str, Any], raw_id: Any) -> PartialContent | None:
        """Validate normalized data, logging failures."""
        try:
            return PartialContent(**data)
        except ValidationError as e:
            logger.warning("Invalid TMDB record %s: %s", raw_id, e.error_count())
            return None
