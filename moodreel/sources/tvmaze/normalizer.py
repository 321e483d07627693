"""TVmaze data normalizer.

Transforms TVmaze show objects into partial TV series records.
Summaries arrive as HTML fragments and are reduced to plain text.
"""

import logging
from typing import Any

from bs4 import BeautifulSoup
from pydantic import ValidationError

from moodreel.aggregation.schemas import KIND_TV, PartialContent
from moodreel.sources.normalize import clamp_rating, compact, language_code

logger = logging.getLogger(__name__)

SOURCE_NAME = "tvmaze"


def strip_html(fragment: str | None) -> str | None:
    """Reduce an HTML fragment to plain text."""
    if not fragment:
        return None
    return BeautifulSoup(fragment, "html.parser").get_text(" ", strip=True) or None


class TVMazeNormalizer:
    """Normalizes TVmaze shows into partial TV series records.

    TVmaze has no vote count; ``vote_count`` is left absent.
    """

    def normalize(
        self,
        show: dict[str, Any],
        cast: list[str] | None = None,
    ) -> PartialContent | None:
        """Normalize a show object.

        Args:
            show: TVmaze show object.
            cast: Cast names when fetched.

        Returns:
            Partial record, or None when invalid.
        """
        image = show.get("image") or {}
        rating = (show.get("rating") or {}).get("average")
        network = (show.get("network") or {}).get("name") or (show.get("webChannel") or {}).get(
            "name"
        )
        runtime = show.get("averageRuntime") or show.get("runtime")
        language = show.get("language")
        code = language_code(language)

        data: dict[str, Any] = {
            "id": show.get("id"),
            "kind": KIND_TV,
            "source_name": SOURCE_NAME,
            "title": show.get("name"),
            "original_title": show.get("name"),
            "overview": strip_html(show.get("summary")),
            "poster_path": image.get("original") or image.get("medium"),
            "backdrop_path": image.get("original"),
            "vote_average": clamp_rating(rating),
            "genres": show.get("genres"),
            "original_language": code,
            "spoken_languages": [code] if code else None,
            "external_id": (show.get("externals") or {}).get("imdb"),
            "first_air_date": show.get("premiered"),
            "episode_runtimes": [runtime] if runtime else None,
            "status": show.get("status"),
            "network": network,
            "cast": cast,
        }

        try:
            return PartialContent(**compact(data))
        except ValidationError as e:
            logger.warning("Invalid TVmaze show %s: %s", show.get("id"), e.error_count())
            return None

    @staticmethod
    def normalize_cast(members: list[dict[str, Any]], limit: int) -> list[str]:
        """Extract top cast names from a cast response."""
        names = [(member.get("person") or {}).get("name") for member in members[:limit]]
        return [name for name in names if name]
