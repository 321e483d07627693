"""Exceptions raised by upstream source clients and adapters."""


class SourceError(Exception):
    """Base exception for upstream source errors.

    Attributes:
        source: Name of the failing source.
    """

    def __init__(self, message: str, source: str = "unknown") -> None:
        super().__init__(message)
        self.source = source


class SourceRateLimitError(SourceError):
    """Raised when the upstream quota or rate limit is exceeded."""

    pass


class SourceNotFoundError(SourceError):
    """Raised when the requested resource does not exist."""

    pass


class SourceResponseError(SourceError):
    """Raised on non-success status codes or malformed bodies."""

    pass


class SourceUnavailableError(SourceError):
    """Raised when every query variant of an adapter call failed."""

    pass


class SourceTimeoutError(SourceError):
    """Raised when a request still times out after retries."""

    pass


class SourceMalformedError(SourceResponseError):
    """Raised when a response body cannot be decoded or interpreted."""

    pass
