"""Shared fixtures for API integration tests.

Uses the module-level ``app`` from ``moodreel.api.main`` with every
service dependency overridden: scripted sources instead of upstream
catalogs, keyword-only mood interpretation, and a fresh store per test.
"""

from collections.abc import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient

from moodreel.aggregation.orchestrator import SearchOrchestrator
from moodreel.api.dependencies.rate_limit import RateLimiter, get_rate_limiter
from moodreel.api.main import app
from moodreel.services.availability import AvailabilityService
from moodreel.services.discovery import DiscoveryService, get_discovery_service
from moodreel.services.mood import MoodInterpreter, get_mood_interpreter
from moodreel.services.storage import MemoryStorage, get_storage
from moodreel.settings import GeminiSettings, WatchmodeSettings

# ---------------------------------------------------------------------------
# Auto-mark all tests in this directory as "integration"
# ---------------------------------------------------------------------------


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    """Auto-apply ``@pytest.mark.integration`` to every test collected here."""
    integration_marker = pytest.mark.integration
    for item in items:
        if "integration" in str(item.fspath):
            item.add_marker(integration_marker)


# ---------------------------------------------------------------------------
# Service overrides
# ---------------------------------------------------------------------------


@pytest.fixture
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def interpreter() -> MoodInterpreter:
    return MoodInterpreter(config=GeminiSettings(GEMINI_API_KEY=""))


@pytest.fixture
def primary(fake_source, movies_factory, partial_factory):
    """Primary source with three movies, one series and The Godfather."""
    series = partial_factory(id=1396, title="Breaking Bad", kind="tv", release_date=None, external_id="tt0903747")
    return fake_source(
        "tmdb",
        results=[*movies_factory(3), series],
        details={238: partial_factory()},
        credits=["Marlon Brando", "Al Pacino"],
    )


@pytest.fixture
def discovery(primary, interpreter, storage) -> DiscoveryService:
    return DiscoveryService(
        orchestrator=SearchOrchestrator(primary, [], default_languages=("en",)),
        interpreter=interpreter,
        availability_service=AvailabilityService(config=WatchmodeSettings(WATCHMODE_API_KEY="")),
        storage=storage,
    )


@pytest.fixture
def limiter() -> RateLimiter:
    return RateLimiter(10_000)


@pytest.fixture
async def client(discovery, interpreter, storage, limiter) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client bound to the app with overridden services."""
    app.dependency_overrides[get_discovery_service] = lambda: discovery
    app.dependency_overrides[get_mood_interpreter] = lambda: interpreter
    app.dependency_overrides[get_storage] = lambda: storage
    app.dependency_overrides[get_rate_limiter] = lambda: limiter

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test", follow_redirects=True) as ac:
        yield ac

    app.dependency_overrides.clear()
