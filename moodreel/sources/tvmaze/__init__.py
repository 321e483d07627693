"""TVmaze tertiary source."""

from moodreel.sources.tvmaze.client import TVMazeClient
from moodreel.sources.tvmaze.normalizer import TVMazeNormalizer
from moodreel.sources.tvmaze.source import TVMazeSource

__all__ = ["TVMazeClient", "TVMazeNormalizer", "TVMazeSource"]
