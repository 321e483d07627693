"""OMDb secondary source."""

from moodreel.sources.omdb.client import OMDbClient
from moodreel.sources.omdb.normalizer import OMDbNormalizer
from moodreel.sources.omdb.source import OMDbSource

__all__ = ["OMDbClient", "OMDbNormalizer", "OMDbSource"]
