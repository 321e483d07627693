"""Prometheus monitoring for the MoodReel API."""

from moodreel.monitoring.metrics import (
    CACHE_LOOKUPS_TOTAL,
    HTTP_REQUEST_DURATION,
    HTTP_REQUESTS_TOTAL,
    SEARCH_RESULTS,
    UPSTREAM_CALL_DURATION,
    UPSTREAM_CALLS_TOTAL,
    record_request,
    record_upstream,
)
from moodreel.monitoring.middleware import PrometheusMiddleware, mount_metrics

__all__ = [
    "CACHE_LOOKUPS_TOTAL",
    "HTTP_REQUESTS_TOTAL",
    "HTTP_REQUEST_DURATION",
    "SEARCH_RESULTS",
    "UPSTREAM_CALLS_TOTAL",
    "UPSTREAM_CALL_DURATION",
    "PrometheusMiddleware",
    "mount_metrics",
    "record_request",
    "record_upstream",
]
