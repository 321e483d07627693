"""In-memory storage for feedback and looked-up titles.

Both stores are process-local and guarded by a single lock. Titles are
keyed by kind, origin source and the id that source assigned.
"""

import uuid
from datetime import datetime, timezone
from functools import lru_cache
from threading import Lock

from pydantic import BaseModel, Field

from moodreel.aggregation.schemas import Content, ContentKind, Movie, TVSeries
from moodreel.services.availability import StreamingSource

PRIMARY_ORIGIN = "tmdb"

# =============================================================================
# RECORDS
# =============================================================================


def _now() -> datetime:
    return datetime.now(timezone.utc)


class FeedbackRecord(BaseModel):
    """A like or dislike for one title."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    content_id: int
    user_id: str | None = None
    liked: bool
    timestamp: datetime = Field(default_factory=_now)


class CachedTitle(BaseModel):
    """A title seen in a search or detail lookup."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    content: Content
    streaming_sources: list[StreamingSource] | None = None
    cached_at: datetime = Field(default_factory=_now)


# =============================================================================
# STORAGE
# =============================================================================


class MemoryStorage:
    """Thread-safe in-memory feedback and title store."""

    def __init__(self) -> None:
        self._feedback: dict[str, FeedbackRecord] = {}
        self._titles: dict[tuple[ContentKind, str, int], CachedTitle] = {}
        self._lock = Lock()

    # -------------------------------------------------------------------------
    # Feedback
    # -------------------------------------------------------------------------

    def record(self, content_id: int, liked: bool, user_id: str | None = None) -> FeedbackRecord:
        """Store a new feedback entry."""
        feedback = FeedbackRecord(content_id=content_id, liked=liked, user_id=user_id)
        with self._lock:
            self._feedback[feedback.id] = feedback
        return feedback

    def remove(self, feedback_id: str) -> bool:
        """Delete a feedback entry.

        Returns:
            True if an entry was deleted.
        """
        with self._lock:
            return self._feedback.pop(feedback_id, None) is not None

    def get(self, feedback_id: str) -> FeedbackRecord | None:
        with self._lock:
            return self._feedback.get(feedback_id)

    def for_content(self, content_id: int) -> list[FeedbackRecord]:
        """All feedback entries for one title, oldest first."""
        with self._lock:
            return [f for f in self._feedback.values() if f.content_id == content_id]

    def list_liked(self) -> list[int]:
        """Ids of liked titles, in feedback order."""
        with self._lock:
            return [f.content_id for f in self._feedback.values() if f.liked]

    # -------------------------------------------------------------------------
    # Title Cache
    # -------------------------------------------------------------------------

    def cache_title(
        self,
        content: Movie | TVSeries,
        streaming_sources: list[StreamingSource] | None = None,
    ) -> CachedTitle:
        """Store a title, replacing any previous entry.

        Known streaming sources are kept when the new entry has none.
        """
        key = (content.kind, content.origin, content.id)
        with self._lock:
            previous = self._titles.get(key)
            if streaming_sources is None and previous is not None:
                streaming_sources = previous.streaming_sources
            entry = CachedTitle(content=content, streaming_sources=streaming_sources)
            self._titles[key] = entry
        return entry

    def get_title(
        self,
        kind: ContentKind,
        content_id: int,
        origin: str = PRIMARY_ORIGIN,
    ) -> CachedTitle | None:
        """Cached title numbered ``content_id`` by ``origin``."""
        with self._lock:
            return self._titles.get((kind, origin, content_id))


@lru_cache(maxsize=1)
def get_storage() -> MemoryStorage:
    """Get singleton storage instance."""
    return MemoryStorage()
