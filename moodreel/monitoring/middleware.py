"""Request metrics middleware and the /metrics mount."""

import time

from fastapi import FastAPI
from prometheus_client import make_asgi_app
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from moodreel.monitoring.metrics import record_request

METRICS_PATH = "/metrics"


class PrometheusMiddleware(BaseHTTPMiddleware):
    """Time every API request and count it by route template.

    Requests to the metrics endpoint are not recorded. A handler that
    raises is counted as a 500 before the exception propagates.
    """

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if request.url.path.startswith(METRICS_PATH):
            return await call_next(request)

        start = time.perf_counter()
        status = 500
        try:
            response = await call_next(request)
            status = response.status_code
            return response
        finally:
            record_request(
                request.method,
                _route_template(request),
                status,
                time.perf_counter() - start,
            )


def _route_template(request: Request) -> str:
    """Matched route template (e.g. /api/movie/{content_id}), else the raw path."""
    route = request.scope.get("route")
    return getattr(route, "path", None) or request.url.path


def mount_metrics(app: FastAPI) -> None:
    """Serve every registered metric in Prometheus text format at /metrics."""
    app.mount(METRICS_PATH, make_asgi_app())
