"""Upstream catalog settings."""

from moodreel.settings.sources.omdb import OMDbSettings
from moodreel.settings.sources.tmdb import TMDBSettings
from moodreel.settings.sources.tvmaze import TVMazeSettings
from moodreel.settings.sources.watchmode import WatchmodeSettings

__all__ = [
    "OMDbSettings",
    "TMDBSettings",
    "TVMazeSettings",
    "WatchmodeSettings",
]
