"""Upstream catalog adapters.

Each source is a package with a ``client`` (HTTP, retries, error
mapping), a ``normalizer`` (raw payload to partial record) and a
``source`` implementing the adapter contract.
"""

from moodreel.sources.base import BaseSource
from moodreel.sources.errors import (
    SourceError,
    SourceMalformedError,
    SourceNotFoundError,
    SourceRateLimitError,
    SourceResponseError,
    SourceTimeoutError,
    SourceUnavailableError,
)
from moodreel.sources.omdb import OMDbSource
from moodreel.sources.tmdb import TMDBSource
from moodreel.sources.tvmaze import TVMazeSource

__all__ = [
    "BaseSource",
    "OMDbSource",
    "SourceError",
    "SourceMalformedError",
    "SourceNotFoundError",
    "SourceRateLimitError",
    "SourceResponseError",
    "SourceTimeoutError",
    "SourceUnavailableError",
    "TMDBSource",
    "TVMazeSource",
]
