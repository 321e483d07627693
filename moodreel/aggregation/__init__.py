"""Multi-source content aggregation.

Unified content model, merge engine, deduplication, fallback policy
and result cache. The search orchestrator lives in
``moodreel.aggregation.orchestrator``.
"""

from moodreel.aggregation.cache import ResultCache, cache_key
from moodreel.aggregation.deduplicator import Deduplicator
from moodreel.aggregation.genres import CANONICAL_GENRES, normalize_genre, normalize_genres
from moodreel.aggregation.merger import merge
from moodreel.aggregation.policy import SourcePolicy
from moodreel.aggregation.schemas import (
    Content,
    ContentKind,
    Movie,
    PartialContent,
    SearchOptions,
    TVSeries,
    lineage,
    to_content,
)

__all__ = [
    # Schemas
    "Content",
    "ContentKind",
    "Movie",
    "PartialContent",
    "SearchOptions",
    "TVSeries",
    "lineage",
    "to_content",
    # Genres
    "CANONICAL_GENRES",
    "normalize_genre",
    "normalize_genres",
    # Merge and dedup
    "Deduplicator",
    "merge",
    # Search
    "ResultCache",
    "SourcePolicy",
    "cache_key",
]
