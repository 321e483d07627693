"""Unit tests for Gemini-backed mood interpretation."""

import json

import httpx
import pytest

from moodreel.services.mood import MoodInterpretation, MoodInterpreter
from moodreel.settings import GeminiSettings

pytestmark = pytest.mark.unit


def _gemini_response(payload: dict | str) -> dict:
    text = payload if isinstance(payload, str) else json.dumps(payload)
    return {"candidates": [{"content": {"role": "model", "parts": [{"text": text}]}}]}


def _interpreter(handler) -> MoodInterpreter:
    return MoodInterpreter(
        config=GeminiSettings(GEMINI_API_KEY="test-key"),
        transport=httpx.MockTransport(handler),
    )


class TestMoodInterpretationSchema:
    @staticmethod
    def test_camel_case_keys_accepted() -> None:
        result = MoodInterpretation.model_validate(
            {
                "mood": "Romantic",
                "preferredGenres": ["romance", "Sci-Fi"],
                "maxRuntimeMin": 110.4,
                "era": {"from": 1995, "to": 1980},
                "languagePreference": "KO",
                "confidence": 0.9,
            }
        )
        assert result.mood == "romantic"
        assert result.preferred_genres == ["Romance", "Science Fiction"]
        assert result.max_runtime_min == 110
        assert result.era is not None
        assert (result.era.year_from, result.era.year_to) == (1980, 1995)
        assert result.language_preference == "ko"

    @staticmethod
    def test_unknown_mood_becomes_relaxed() -> None:
        assert MoodInterpretation(mood="ecstatic", confidence=0.4).mood == "relaxed"

    @staticmethod
    def test_era_serializes_from_to() -> None:
        result = MoodInterpretation.model_validate(
            {"confidence": 0.5, "era": {"year_from": 1970, "year_to": 1980}}
        )
        assert result.model_dump(by_alias=True)["era"] == {"from": 1970, "to": 1980}


class TestMoodInterpreter:
    @staticmethod
    @pytest.mark.asyncio
    async def test_model_answer_used() -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            answer = {"mood": "intense", "preferredGenres": ["Thriller"], "confidence": 0.92}
            return httpx.Response(200, json=_gemini_response(answer))

        interpreter = _interpreter(handler)
        result = await interpreter.interpret("something gripping")
        await interpreter.aclose()

        assert result.mood == "intense"
        assert result.preferred_genres == ["Thriller"]
        assert result.confidence == 0.92
        request = seen[0]
        assert request.url.path.endswith(":generateContent")
        assert request.headers["x-goog-api-key"] == "test-key"
        body = json.loads(request.content)
        assert body["contents"][0]["parts"][0]["text"] == "something gripping"
        assert body["generationConfig"]["responseMimeType"] == "application/json"

    @staticmethod
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "response",
        [
            httpx.Response(200, json=_gemini_response("not json at all")),
            httpx.Response(200, json=_gemini_response({"mood": "happy"})),
            httpx.Response(200, json={"candidates": []}),
            httpx.Response(200, json={"candidates": [{"content": {"parts": ["oops"]}}]}),
            httpx.Response(200, json={"candidates": [{"content": {"parts": {"text": "{}"}}}]}),
            httpx.Response(200, json={"candidates": ["oops"]}),
            httpx.Response(200, json=[]),
            httpx.Response(500),
            httpx.Response(429),
        ],
        ids=[
            "invalid-json",
            "missing-confidence",
            "no-candidates",
            "non-object-part",
            "parts-not-a-list",
            "non-object-candidate",
            "top-level-array",
            "server-error",
            "rate-limited",
        ],
    )
    async def test_falls_back_to_keywords(response: httpx.Response) -> None:
        interpreter = _interpreter(lambda request: response)
        result = await interpreter.interpret("I feel sad and want to cry")
        assert result.mood == "sad"
        assert result.confidence == 0.7

    @staticmethod
    @pytest.mark.asyncio
    async def test_without_key_uses_keywords() -> None:
        interpreter = MoodInterpreter(config=GeminiSettings(GEMINI_API_KEY=""))
        assert interpreter.client is None
        result = await interpreter.interpret("cheerful comedy")
        assert result.mood == "happy"
        await interpreter.aclose()
