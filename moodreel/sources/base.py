"""Base source adapter abstract class.

Provides the common adapter contract used by the search orchestrator
and the failure isolation shared by every adapter: each query variant
of a call (one keyword, one language, one region query) may fail on
its own without failing the whole call.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from collections.abc import Awaitable

import structlog

from moodreel.aggregation.schemas import ContentKind, PartialContent, SearchOptions
from moodreel.monitoring.metrics import record_upstream
from moodreel.sources.errors import (
    SourceError,
    SourceMalformedError,
    SourceRateLimitError,
    SourceUnavailableError,
)

# =============================================================================
# CONSTANTS
# =============================================================================

REASON_RATE_LIMITED = "rate_limited"
REASON_MALFORMED = "malformed"
REASON_ERROR = "error"

_MALFORMED_ERRORS = (SourceMalformedError, KeyError, TypeError, ValueError)


def failure_reason(exc: BaseException) -> str:
    """Classify an adapter failure for logs and metrics.

    Args:
        exc: Exception raised by a query variant.

    Returns:
        One of rate_limited, malformed or error.
    """
    if isinstance(exc, SourceRateLimitError):
        return REASON_RATE_LIMITED
    if isinstance(exc, _MALFORMED_ERRORS):
        return REASON_MALFORMED
    return REASON_ERROR


# =============================================================================
# BASE SOURCE
# =============================================================================


class BaseSource(ABC):
    """Abstract base class for content source adapters.

    Attributes:
        name: Source identifier (e.g., 'tmdb', 'omdb').
        kinds: Content kinds the source can return.
        serves_classics: Whether the source specialises in older films.
        supports_regional: Whether ``search_regional`` is implemented.
    """

    name: str = "base"
    kinds: frozenset[ContentKind] = frozenset()
    serves_classics: bool = False
    supports_regional: bool = False

    def __init__(self) -> None:
        """Initialize adapter loggers."""
        self._logger = logging.getLogger(f"sources.{self.name}")
        self._events = structlog.get_logger("moodreel.sources").bind(source=self.name)

    @property
    def logger(self) -> logging.Logger:
        """Get the logger instance."""
        return self._logger

    @property
    def enabled(self) -> bool:
        """Whether the source is configured and may be queried."""
        return True

    def supports(self, kind: ContentKind) -> bool:
        """Check whether the source returns records of this kind."""
        return self.enabled and kind in self.kinds

    # -------------------------------------------------------------------------
    # Adapter Contract
    # -------------------------------------------------------------------------

    @abstractmethod
    async def search(
        self,
        options: SearchOptions,
        kind: ContentKind,
        language: str | None = None,
    ) -> list[PartialContent]:
        """Search the catalog.

        Args:
            options: Normalized search options.
            kind: Content kind to return.
            language: Original language for per-language sources.

        Returns:
            Partial records, possibly empty.

        Raises:
            SourceUnavailableError: When every query variant failed.
        """

    @abstractmethod
    async def fetch_by_id(self, content_id: int, kind: ContentKind) -> PartialContent | None:
        """Fetch one title by its source-local id.

        Args:
            content_id: Source-local identifier.
            kind: Content kind.

        Returns:
            Partial record, or None when unknown.
        """

    async def fetch_by_external_id(
        self,
        external_id: str,
        kind: ContentKind,
    ) -> PartialContent | None:
        """Fetch one title by IMDb id; unsupported by default."""
        return None

    async def search_regional(
        self,
        region: str,
        options: SearchOptions,
    ) -> list[PartialContent]:
        """Search regional productions; unsupported by default."""
        return []

    async def fetch_credits(self, content_id: int) -> list[str]:
        """Top-billed cast names for a movie; unsupported by default."""
        return []

    async def aclose(self) -> None:
        """Release network resources."""
        return None

    # -------------------------------------------------------------------------
    # Failure Isolation
    # -------------------------------------------------------------------------

    async def _gather_variants(
        self,
        variants: list[Awaitable[list[PartialContent]]],
        operation: str,
    ) -> list[PartialContent]:
        """Run query variants concurrently, isolating failures.

        Results keep variant order. A failed variant is logged, counted
        and contributes nothing.

        Args:
            variants: Awaitables, one per query variant.
            operation: Operation name for logs.

        Returns:
            Concatenated records of successful variants.

        Raises:
            SourceUnavailableError: When every variant failed.
        """
        if not variants:
            return []

        results = await asyncio.gather(*variants, return_exceptions=True)

        collected: list[PartialContent] = []
        failures = 0
        for result in results:
            if isinstance(result, asyncio.CancelledError):
                raise result
            if isinstance(result, Exception):
                failures += 1
                self._record_failure(operation, result)
                continue
            record_upstream(self.name, "ok")
            collected.extend(result)

        if failures == len(variants):
            raise SourceUnavailableError(
                f"All {failures} {operation} variants failed",
                self.name,
            )
        return collected

    def _record_failure(self, operation: str, exc: Exception) -> None:
        """Log and count one failed query variant.

        Raises:
            Exception: Re-raises errors that are neither upstream
                failures nor malformed data.
        """
        if not isinstance(exc, (SourceError, *_MALFORMED_ERRORS)):
            raise exc
        reason = failure_reason(exc)
        self._events.warning(
            "upstream_call_failed",
            operation=operation,
            reason=reason,
            error=str(exc),
        )
        record_upstream(self.name, reason)
