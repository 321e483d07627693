"""Secondary source invocation policy.

Decides, per search and per content kind, which fallback sources the
orchestrator queries after the primary source has settled. Thresholds
are tunable through ``SearchSettings``.
"""

from dataclasses import dataclass, field
from typing import Self

from moodreel.aggregation.schemas import SearchOptions
from moodreel.settings import SearchSettings

# =============================================================================
# CONSTANTS
# =============================================================================

REASON_CLASSICS = "classics"
REASON_THIN = "thin_results"
REASON_REGIONAL = "regional_focus"


# =============================================================================
# SOURCE POLICY
# =============================================================================


@dataclass(frozen=True)
class SourcePolicy:
    """Fallback invocation rules.

    Attributes:
        thin_results_threshold: Accumulated count below which every
            fallback source serving the kind is queried.
        classics_year_cutoff: Searches ending before this year always
            query classic-film sources.
        regional_focus: Regions handled by regional search.
        max_results: Results kept per content kind.
    """

    thin_results_threshold: int = 5
    classics_year_cutoff: int = 2000
    regional_focus: frozenset[str] = field(
        default_factory=lambda: frozenset({"Turkish", "Pakistani", "Korean"})
    )
    max_results: int = 20

    @classmethod
    def from_settings(cls, search: SearchSettings) -> Self:
        """Build policy from search settings.

        Args:
            search: Search settings section.

        Returns:
            Configured policy.
        """
        return cls(
            thin_results_threshold=search.thin_results_threshold,
            classics_year_cutoff=search.classics_year_cutoff,
            regional_focus=search.regional_focus,
            max_results=search.max_results,
        )

    def is_classics_search(self, options: SearchOptions) -> bool:
        """Check whether the search targets older titles."""
        if options.old_classics_only:
            return True
        return options.year_to is not None and options.year_to < self.classics_year_cutoff

    def is_thin(self, accumulated: int) -> bool:
        """Check whether too few results were accumulated."""
        return accumulated < self.thin_results_threshold

    def fallback_reason(
        self,
        options: SearchOptions,
        accumulated: int,
        serves_classics: bool,
    ) -> str | None:
        """Reason to query a fallback source, or None to skip it.

        Args:
            options: Search options.
            accumulated: Records accumulated so far for the kind.
            serves_classics: Whether the source specialises in classics.

        Returns:
            Reason tag when the source must be queried.
        """
        if serves_classics and self.is_classics_search(options):
            return REASON_CLASSICS
        if self.is_thin(accumulated):
            return REASON_THIN
        return None

    def wants_regional(self, options: SearchOptions) -> bool:
        """Check whether regional search applies to the request."""
        return options.regional_focus is not None and options.regional_focus in self.regional_focus
