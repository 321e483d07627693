"""Integration tests for health, mood, search and content endpoints."""

import pytest
from httpx import AsyncClient

from moodreel.aggregation.schemas import to_content
from moodreel.api.dependencies.rate_limit import RateLimiter, get_rate_limiter
from moodreel.api.main import app
from moodreel.services.availability import StreamingSource

# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------


class TestHealth:
    @staticmethod
    async def test_health_ok(client: AsyncClient) -> None:
        response = await client.get("/api/health")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "ok"
        assert body["version"] == "1.0.0"
        assert body["sources"]["tvmaze"] is True
        assert "timestamp" in body


# ---------------------------------------------------------------------------
# Mood
# ---------------------------------------------------------------------------


class TestInterpretMood:
    @staticmethod
    async def test_keyword_interpretation(client: AsyncClient) -> None:
        response = await client.post("/api/interpret-mood", json={"text": "something cheerful and fun"})
        assert response.status_code == 200
        body = response.json()
        assert body["mood"] == "happy"
        assert body["preferred_genres"] == ["Comedy", "Family", "Music"]
        assert body["era"] == {"from": 1970, "to": 2005}
        assert body["confidence"] == 0.7

    @staticmethod
    @pytest.mark.parametrize("payload", [{"text": "   "}, {}])
    async def test_blank_text_rejected(client: AsyncClient, payload: dict) -> None:
        response = await client.post("/api/interpret-mood", json=payload)
        assert response.status_code == 400
        assert response.json()["detail"] == "Text is required"

    @staticmethod
    async def test_text_too_long(client: AsyncClient) -> None:
        response = await client.post("/api/interpret-mood", json={"text": "x" * 2001})
        assert response.status_code == 422


# ---------------------------------------------------------------------------
# Search
# ---------------------------------------------------------------------------


class TestSearch:
    @staticmethod
    async def test_mood_search(client: AsyncClient) -> None:
        response = await client.post("/api/search-movies", json={"mood": "happy"})
        assert response.status_code == 200
        body = response.json()
        assert [m["title"] for m in body["movies"]] == ["Movie 1", "Movie 2", "Movie 3"]
        assert [s["title"] for s in body["tv_series"]] == ["Breaking Bad"]
        assert body["total"] == 4
        assert body["interpretation"] is None
        assert body["movies"][0]["kind"] == "movie"
        assert body["movies"][0]["sources"] == ["tmdb"]

    @staticmethod
    async def test_camel_case_filters(client: AsyncClient) -> None:
        response = await client.post("/api/search-movies", json={"contentType": "tv", "yearTo": 2010})
        assert response.status_code == 200
        body = response.json()
        assert body["movies"] == []
        assert body["total"] == 1

    @staticmethod
    async def test_text_search_returns_interpretation(client: AsyncClient) -> None:
        response = await client.post("/api/search-movies", json={"text": "a mystery for a detective fan"})
        assert response.status_code == 200
        assert response.json()["interpretation"]["mood"] == "mysterious"

    @staticmethod
    async def test_inverted_years_bad_request(client: AsyncClient) -> None:
        response = await client.post("/api/search-movies", json={"yearFrom": 2000, "yearTo": 1990})
        assert response.status_code == 400

    @staticmethod
    async def test_unknown_mood_unprocessable(client: AsyncClient) -> None:
        response = await client.post("/api/search-movies", json={"mood": "furious"})
        assert response.status_code == 422

    @staticmethod
    async def test_results_cached_in_store(client: AsyncClient, storage) -> None:
        await client.post("/api/search-movies", json={"mood": "sad"})
        assert storage.get_title("tv", 1396) is not None


# ---------------------------------------------------------------------------
# Content
# ---------------------------------------------------------------------------


class TestContent:
    @staticmethod
    async def test_movie_details(client: AsyncClient) -> None:
        response = await client.get("/api/movie/238")
        assert response.status_code == 200
        body = response.json()
        assert body["title"] == "The Godfather"
        assert body["external_id"] == "tt0068646"
        assert body["release_date"] == "1972-03-14"

    @staticmethod
    async def test_unknown_movie(client: AsyncClient) -> None:
        response = await client.get("/api/movie/999")
        assert response.status_code == 404
        assert response.json()["detail"] == "Movie with id 999 not found"

    @staticmethod
    async def test_unknown_series(client: AsyncClient) -> None:
        assert (await client.get("/api/tv/238")).status_code == 404

    @staticmethod
    async def test_invalid_id(client: AsyncClient) -> None:
        assert (await client.get("/api/movie/0")).status_code == 422

    @staticmethod
    async def test_cached_availability(client: AsyncClient, storage, partial_factory) -> None:
        netflix = StreamingSource(name="Netflix", type="sub", web_url="https://netflix.com/title/1")
        storage.cache_title(to_content(partial_factory()), [netflix])

        response = await client.get("/api/movie/238/availability")

        assert response.status_code == 200
        assert response.json() == {
            "sources": [
                {
                    "name": "Netflix",
                    "type": "sub",
                    "web_url": "https://netflix.com/title/1",
                    "ios_url": None,
                    "android_url": None,
                }
            ]
        }

    @staticmethod
    async def test_availability_without_watchmode(client: AsyncClient) -> None:
        response = await client.get("/api/movie/238/availability")
        assert response.json() == {"sources": []}

    @staticmethod
    async def test_credits(client: AsyncClient) -> None:
        response = await client.get("/api/movie/238/credits")
        assert response.json() == {"cast": ["Marlon Brando", "Al Pacino"]}


# ---------------------------------------------------------------------------
# Rate limiting / metrics
# ---------------------------------------------------------------------------


class TestRateLimiting:
    @staticmethod
    async def test_remaining_header(client: AsyncClient) -> None:
        response = await client.post("/api/interpret-mood", json={"text": "calm"})
        assert "x-ratelimit-remaining" in response.headers

    @staticmethod
    async def test_exhausted_budget(client: AsyncClient) -> None:
        one_request = RateLimiter(1, clock=lambda: 0.0)
        app.dependency_overrides[get_rate_limiter] = lambda: one_request
        assert (await client.get("/api/movie/238/credits")).status_code == 200
        response = await client.get("/api/movie/238/credits")
        assert response.status_code == 429
        assert response.headers["retry-after"] == "60"

    @staticmethod
    async def test_health_not_limited(client: AsyncClient) -> None:
        app.dependency_overrides[get_rate_limiter] = lambda: RateLimiter(0, clock=lambda: 0.0)
        assert (await client.get("/api/health")).status_code == 200


class TestMetrics:
    @staticmethod
    async def test_requests_counted(client: AsyncClient) -> None:
        await client.get("/api/health")
        response = await client.get("/metrics")
        assert response.status_code == 200
        assert "moodreel_http_requests_total" in response.text
