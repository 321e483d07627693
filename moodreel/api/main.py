"""FastAPI application entry point.

Creates and configures the MoodReel REST API with CORS, rate
limiting, Prometheus metrics and OpenAPI documentation.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from moodreel.api.routers import content, feedback, mood, search
from moodreel.api.schemas import HealthResponse
from moodreel.monitoring.middleware import PrometheusMiddleware, mount_metrics
from moodreel.services.discovery import get_discovery_service
from moodreel.settings import settings, sources_status
from moodreel.utils.logger import setup_logger, setup_logging

logger = setup_logger("api")

API_PREFIX = "/api"

# =============================================================================
# LIFESPAN
# =============================================================================


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Configures structured logging on startup and closes upstream
    HTTP clients on shutdown.

    Args:
        _app: FastAPI application instance.

    Yields:
        None after startup tasks complete.
    """
    setup_logging()
    status = sources_status()
    logger.info(
        "MoodReel API starting (sources: %s)",
        ", ".join(name for name, configured in status.items() if configured) or "none",
    )
    yield
    if get_discovery_service.cache_info().currsize:
        await get_discovery_service().aclose()


# =============================================================================
# APPLICATION FACTORY
# =============================================================================


def create_app() -> FastAPI:
    """Create and configure FastAPI application.

    Returns:
        Configured FastAPI instance.
    """
    app = FastAPI(
        title=settings.api.title,
        version=settings.api.version,
        description="Mood-based movie and TV discovery",
        lifespan=lifespan,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        openapi_url="/api/openapi.json",
    )
    _configure_cors(app)
    app.add_middleware(PrometheusMiddleware)
    mount_metrics(app)
    _register_routers(app)
    return app


def _configure_cors(app: FastAPI) -> None:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors.origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "DELETE"],
        allow_headers=["Content-Type"],
    )


def _register_routers(app: FastAPI) -> None:
    """Register health and API routers."""
    app.add_api_route(
        f"{API_PREFIX}/health",
        health_check,
        methods=["GET"],
        response_model=HealthResponse,
        tags=["Health"],
        summary="Health check",
    )
    app.include_router(mood.router, prefix=API_PREFIX)
    app.include_router(search.router, prefix=API_PREFIX)
    app.include_router(content.router, prefix=API_PREFIX)
    app.include_router(feedback.router, prefix=API_PREFIX)


def health_check() -> HealthResponse:
    """Health check endpoint.

    Returns:
        API status with version and configured upstream services.
    """
    return HealthResponse(
        status="ok",
        version=settings.api.version,
        sources=sources_status(),
    )


app = create_app()
