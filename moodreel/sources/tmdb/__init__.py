"""TMDB primary source."""

from moodreel.sources.tmdb.client import TMDBClient
from moodreel.sources.tmdb.normalizer import TMDBNormalizer
from moodreel.sources.tmdb.source import TMDBSource

__all__ = ["TMDBClient", "TMDBNormalizer", "TMDBSource"]
