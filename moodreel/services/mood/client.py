"""Gemini generateContent REST client."""

from typing import Any

import httpx

from moodreel.settings import GeminiSettings, settings
from moodreel.sources.errors import SourceMalformedError
from moodreel.sources.http import BaseHTTPClient

# =============================================================================
# RESPONSE SCHEMA
# =============================================================================

INTERPRETATION_SCHEMA: dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "mood": {"type": "STRING"},
        "preferredGenres": {"type": "ARRAY", "items": {"type": "STRING"}},
        "maxRuntimeMin": {"type": "NUMBER"},
        "minRuntimeMin": {"type": "NUMBER"},
        "era": {
            "type": "OBJECT",
            "properties": {
                "from": {"type": "NUMBER"},
                "to": {"type": "NUMBER"},
            },
        },
        "languagePreference": {"type": "STRING"},
        "confidence": {"type": "NUMBER"},
    },
    "required": ["mood", "preferredGenres", "confidence"],
}


class GeminiClient(BaseHTTPClient):
    """Async client for the Gemini ``generateContent`` endpoint.

    Authenticates with the ``x-goog-api-key`` header.
    """

    source_name = "gemini"

    def __init__(
        self,
        config: GeminiSettings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize Gemini client with settings.

        Args:
            config: Gemini settings (defaults to global settings).
            transport: Optional transport for tests.
        """
        config = config or settings.gemini
        super().__init__(
            base_url=config.base_url,
            timeout=config.timeout_seconds,
            max_retries=1,
            transport=transport,
        )
        self._api_key = config.api_key
        self._model = config.model

    def _auth_headers(self) -> dict[str, str]:
        return {"x-goog-api-key": self._api_key}

    async def generate_json(self, system_prompt: str, text: str) -> str:
        """Request a JSON answer constrained by the interpretation schema.

        Args:
            system_prompt: System instruction.
            text: User text.

        Returns:
            Raw JSON text of the first candidate.

        Raises:
            SourceMalformedError: When the response carries no text.
        """
        payload = {
            "systemInstruction": {"parts": [{"text": system_prompt}]},
            "contents": [{"role": "user", "parts": [{"text": text}]}],
            "generationConfig": {
                "responseMimeType": "application/json",
                "responseSchema": INTERPRETATION_SCHEMA,
            },
        }
        response = await self._post(f"/models/{self._model}:generateContent", payload)

        try:
            parts = response["candidates"][0]["content"]["parts"]
        except (KeyError, IndexError, TypeError) as e:
            raise SourceMalformedError("Empty response from Gemini", self.source_name) from e

        if not isinstance(parts, list) or not all(isinstance(part, dict) for part in parts):
            raise SourceMalformedError("Unexpected candidate parts from Gemini", self.source_name)

        texts = [part.get("text") for part in parts]
        raw = "".join(text for text in texts if isinstance(text, str))
        if not raw.strip():
            raise SourceMalformedError("Empty response from Gemini", self.source_name)
        return raw
