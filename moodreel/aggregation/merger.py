"""Field-level merge engine for multi-source content.

Combines two records describing the same title (joined on the shared
IMDb external id) into one unified record. Identity always comes from
the primary record, descriptive fields from whichever side supplied
them (primary first) and enrichment fields from the specialised
secondary source when it supplied them.
"""

import logging
from dataclasses import dataclass
from typing import Any

from moodreel.aggregation.schemas import (
    ENRICHMENT_FIELDS,
    IDENTITY_FIELDS,
    ContentRecord,
    Movie,
    TVSeries,
    build_content,
    lineage,
    present_fields,
)

logger = logging.getLogger(__name__)


# =============================================================================
# MERGE STATISTICS
# =============================================================================


@dataclass
class MergeStats:
    """Statistics for merge operations within one search.

    Attributes:
        merged: Records enriched in place by a secondary source.
        appended: Secondary records added as new entries.
        skipped_duplicates: Secondary records already accumulated.
        dropped_kind: Secondary records of the wrong content kind.
    """

    merged: int = 0
    appended: int = 0
    skipped_duplicates: int = 0
    dropped_kind: int = 0

    def log_summary(self, source_name: str) -> None:
        """Log merge statistics summary."""
        logger.info(
            "Merge %s: merged=%d, appended=%d, duplicates=%d, wrong_kind=%d",
            source_name,
            self.merged,
            self.appended,
            self.skipped_duplicates,
            self.dropped_kind,
        )


# =============================================================================
# MERGE ENGINE
# =============================================================================


def merge(primary: ContentRecord, secondary: ContentRecord) -> Movie | TVSeries:
    """Merge two records about the same title.

    Rules, applied per field:
    - identity (id, title, kind): primary
    - descriptive fields: primary when present, else secondary
    - enrichment fields: secondary when present, else primary

    The result is attributed to the secondary source only when it
    contributed at least one field, so merging a merged record with
    one of its inputs again yields the same record.

    Args:
        primary: Record whose identity is kept.
        secondary: Record supplying missing and enrichment fields.

    Returns:
        Unified Movie or TVSeries record.
    """
    primary_fields = present_fields(primary)
    secondary_fields = present_fields(secondary)

    data, contributed = _combine_fields(primary_fields, secondary_fields)
    data["kind"] = primary.kind

    primary_lineage = lineage(primary)
    if contributed:
        data["source_name"] = secondary.source_name
        data["sources"] = _ordered_union(primary_lineage, lineage(secondary))
    else:
        data["source_name"] = primary.source_name
        data["sources"] = primary_lineage

    return build_content(data)


def _combine_fields(
    primary_fields: dict[str, Any],
    secondary_fields: dict[str, Any],
) -> tuple[dict[str, Any], bool]:
    """Apply precedence rules to present fields.

    Args:
        primary_fields: Present fields of the primary record.
        secondary_fields: Present fields of the secondary record.

    Returns:
        Tuple of (combined fields, whether secondary contributed).
    """
    data: dict[str, Any] = {}
    contributed = False

    for name in primary_fields.keys() | secondary_fields.keys():
        in_primary = name in primary_fields
        in_secondary = name in secondary_fields

        if name in IDENTITY_FIELDS:
            if in_primary:
                data[name] = primary_fields[name]
            continue

        if name in ENRICHMENT_FIELDS:
            take_secondary = in_secondary
        else:
            take_secondary = in_secondary and not in_primary

        if take_secondary:
            data[name] = secondary_fields[name]
            contributed = True
        else:
            data[name] = primary_fields[name]

    return data, contributed


def _ordered_union(first: list[str], second: list[str]) -> list[str]:
    """Union of two lineages preserving first-seen order."""
    result = list(first)
    for name in second:
        if name not in result:
            result.append(name)
    return result
