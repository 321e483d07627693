"""Per-client rate limiting dependency.

Token bucket per client IP, refilled continuously at the configured
requests-per-minute rate. Idle buckets are pruned so the table does
not grow with every address ever seen.
"""

import time
from collections.abc import Callable
from dataclasses import dataclass
from threading import Lock
from typing import Annotated

from fastapi import Depends, HTTPException, Request, Response, status

from moodreel.settings import settings

IDLE_BUCKET_SECONDS = 600.0
"""Buckets untouched for this long are dropped on the next prune."""

PRUNE_EVERY = 1000
"""Requests between two prunes of idle buckets."""


@dataclass
class TokenBucket:
    """Tokens left for one client and the time of the last refill."""

    tokens: float
    updated_at: float


class RateLimiter:
    """Thread-safe token bucket limiter keyed by client IP.

    Attributes:
        capacity: Burst size, equal to the per-minute limit.
    """

    def __init__(
        self,
        requests_per_minute: int,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize limiter.

        Args:
            requests_per_minute: Sustained request rate per client.
            clock: Monotonic time source (injectable for tests).
        """
        self.capacity = float(requests_per_minute)
        self._refill_per_second = requests_per_minute / 60.0
        self._clock = clock
        self._buckets: dict[str, TokenBucket] = {}
        self._lock = Lock()
        self._since_prune = 0

    def acquire(self, client: str) -> tuple[bool, int]:
        """Take one token for a client.

        Args:
            client: Client key (IP address).

        Returns:
            Whether the request is allowed and the tokens left.
        """
        with self._lock:
            now = self._clock()
            bucket = self._buckets.get(client)
            if bucket is None:
                bucket = self._buckets[client] = TokenBucket(self.capacity, now)
            else:
                elapsed = now - bucket.updated_at
                bucket.tokens = min(self.capacity, bucket.tokens + elapsed * self._refill_per_second)
                bucket.updated_at = now

            allowed = bucket.tokens >= 1.0
            if allowed:
                bucket.tokens -= 1.0

            self._since_prune += 1
            if self._since_prune >= PRUNE_EVERY:
                self._prune(now)
            return allowed, int(bucket.tokens)

    def _prune(self, now: float) -> None:
        """Drop idle buckets (lock held)."""
        self._since_prune = 0
        idle = [key for key, b in self._buckets.items() if now - b.updated_at > IDLE_BUCKET_SECONDS]
        for key in idle:
            del self._buckets[key]

    def __len__(self) -> int:
        return len(self._buckets)


_rate_limiter: RateLimiter | None = None


def get_rate_limiter() -> RateLimiter:
    """Get or create the process-wide limiter."""
    global _rate_limiter
    if _rate_limiter is None:
        _rate_limiter = RateLimiter(settings.api.rate_limit_per_minute)
    return _rate_limiter


def check_rate_limit(
    request: Request,
    response: Response,
    limiter: Annotated[RateLimiter, Depends(get_rate_limiter)],
) -> None:
    """Reject clients over their request budget.

    Raises:
        HTTPException: 429 with ``Retry-After`` when the bucket is empty.
    """
    allowed, remaining = limiter.acquire(client_ip(request))
    if not allowed:
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail="Rate limit exceeded. Try again later.",
            headers={"Retry-After": "60"},
        )
    response.headers["X-RateLimit-Remaining"] = str(remaining)


def client_ip(request: Request) -> str:
    """First X-Forwarded-For hop, else the socket peer."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"
