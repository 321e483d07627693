"""Content deduplication module.

Re-verifies uniqueness of accumulated search results using the
per-source identity (origin source, id) and the shared IMDb id.
Numeric ids are never compared across sources.
"""

import logging
from dataclasses import dataclass, field

from moodreel.aggregation.merger import merge
from moodreel.aggregation.schemas import Movie, TVSeries

logger = logging.getLogger(__name__)


# =============================================================================
# DEDUPLICATION STATISTICS
# =============================================================================


@dataclass
class DeduplicationStats:
    """Statistics for deduplication operations.

    Attributes:
        total_input: Records before deduplication.
        duplicates_source_id: Duplicates found by (source, id).
        duplicates_external_id: Duplicates folded by external id.
        total_output: Records after deduplication.
    """

    total_input: int = 0
    duplicates_source_id: int = 0
    duplicates_external_id: int = 0
    total_output: int = 0

    @property
    def total_duplicates(self) -> int:
        """Calculate total duplicates found."""
        return self.duplicates_source_id + self.duplicates_external_id

    def log_summary(self) -> None:
        """Log deduplication statistics summary."""
        if not self.total_duplicates:
            return
        logger.info(
            "Deduplication: %d -> %d records (source_id=%d, external_id=%d)",
            self.total_input,
            self.total_output,
            self.duplicates_source_id,
            self.duplicates_external_id,
        )


# =============================================================================
# SEEN CONTENT TRACKER
# =============================================================================


@dataclass
class SeenContentTracker:
    """Tracks positions of seen records.

    Attributes:
        by_source_id: Mapping of (origin source, id) to output position.
        by_external_id: Mapping of IMDb id to output position.
    """

    by_source_id: dict[tuple[str, int], int] = field(default_factory=dict)
    by_external_id: dict[str, int] = field(default_factory=dict)

    def add(self, record: Movie | TVSeries, position: int) -> None:
        """Register record at an output position."""
        self.by_source_id[record.identity_key] = position
        if record.external_id:
            self.by_external_id.setdefault(record.external_id, position)

    def find_external(self, external_id: str | None) -> int | None:
        """Find output position of a record sharing the IMDb id."""
        if not external_id:
            return None
        return self.by_external_id.get(external_id)


# =============================================================================
# DEDUPLICATOR
# =============================================================================


class Deduplicator:
    """Removes duplicate records from an accumulated result list.

    Two-stage detection:
    1. Exact (origin source, id) match: later record dropped
    2. Shared external id: later record merged into the earlier one

    Order of first appearance is preserved.

    Attributes:
        stats: Deduplication statistics.
    """

    def __init__(self) -> None:
        """Initialize deduplicator with empty state."""
        self.stats = DeduplicationStats()
        self._tracker = SeenContentTracker()

    def deduplicate(self, records: list[Movie | TVSeries]) -> list[Movie | TVSeries]:
        """Remove duplicate records from list.

        Args:
            records: Accumulated records, in encounter order.

        Returns:
            List with duplicates removed.
        """
        self.stats = DeduplicationStats(total_input=len(records))
        self._tracker = SeenContentTracker()

        unique: list[Movie | TVSeries] = []

        for record in records:
            if record.identity_key in self._tracker.by_source_id:
                self.stats.duplicates_source_id += 1
                logger.debug("Duplicate (source id): %s %s", record.origin, record.id)
                continue

            position = self._tracker.find_external(record.external_id)
            if position is not None:
                self.stats.duplicates_external_id += 1
                logger.debug("Duplicate (external id): %s", record.external_id)
                unique[position] = merge(unique[position], record)
                self._tracker.by_source_id[record.identity_key] = position
                continue

            self._tracker.add(record, len(unique))
            unique.append(record)

        self.stats.total_output = len(unique)
        self.stats.log_summary()
        return unique
