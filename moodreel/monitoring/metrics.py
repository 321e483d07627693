"""Prometheus metrics for HTTP traffic, upstream sources and the result cache."""

from prometheus_client import Counter, Histogram

# =============================================================================
# HTTP METRICS
# =============================================================================

HTTP_REQUESTS_TOTAL = Counter(
    "moodreel_http_requests_total",
    "API requests by method, route template and status",
    ["method", "path", "status"],
)

HTTP_REQUEST_DURATION = Histogram(
    "moodreel_http_request_duration_seconds",
    "API request latency by method and route template",
    ["method", "path"],
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0],
)

# =============================================================================
# UPSTREAM METRICS
# =============================================================================

UPSTREAM_CALLS_TOTAL = Counter(
    "moodreel_upstream_calls_total",
    "Upstream catalog calls by source and outcome",
    ["source", "outcome"],
)

UPSTREAM_CALL_DURATION = Histogram(
    "moodreel_upstream_call_duration_seconds",
    "Upstream adapter call duration in seconds",
    ["source"],
    buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 20.0],
)


# =============================================================================
# SEARCH METRICS
# =============================================================================

CACHE_LOOKUPS_TOTAL = Counter(
    "moodreel_cache_lookups_total",
    "Result cache lookups by outcome",
    ["outcome"],
)

SEARCH_RESULTS = Histogram(
    "moodreel_search_results",
    "Records returned per search and content kind",
    ["kind"],
    buckets=[0, 1, 5, 10, 20, 40],
)


def record_upstream(source: str, outcome: str) -> None:
    """Count one upstream call outcome.

    Args:
        source: Adapter name (tmdb, omdb, tvmaze, watchmode, gemini).
        outcome: ok, rate_limited, error, malformed or timeout.
    """
    UPSTREAM_CALLS_TOTAL.labels(source=source, outcome=outcome).inc()


def record_request(method: str, path: str, status: int, duration: float) -> None:
    """Count one API request and observe its latency."""
    HTTP_REQUESTS_TOTAL.labels(method=method, path=path, status=str(status)).inc()
    HTTP_REQUEST_DURATION.labels(method=method, path=path).observe(duration)
