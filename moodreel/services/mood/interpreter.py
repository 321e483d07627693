"""Mood interpretation service.

Asks Gemini for a structured reading of free-text mood descriptions
and falls back to the offline keyword classifier on any failure.
"""

from functools import lru_cache

import httpx
from pydantic import ValidationError

from moodreel.services.mood.client import GeminiClient
from moodreel.services.mood.config import CLASSIC_ERA, MOODS
from moodreel.services.mood.fallback import classify_mood
from moodreel.services.mood.schemas import MoodInterpretation
from moodreel.settings import GeminiSettings, settings
from moodreel.sources.errors import SourceError
from moodreel.utils.logger import setup_logger

logger = setup_logger("services.mood.interpreter")

SYSTEM_PROMPT = (
    "You are a mood analysis expert for classic movie recommendations. "
    "Analyze the user's text and extract:\n"
    f"1. The primary mood from: {', '.join(MOODS)}\n"
    "2. Preferred movie genres\n"
    "3. Runtime preferences (min/max in minutes)\n"
    f"4. Era preferences (year range, default to {CLASSIC_ERA[0]}-{CLASSIC_ERA[1]} "
    "for classics)\n"
    "5. Language preference as an ISO 639-1 code (if mentioned)\n"
    "6. Confidence score (0-1)\n"
    "Respond with JSON only."
)


class MoodInterpreter:
    """Free-text mood interpretation with an offline fallback.

    Attributes:
        client: Gemini client, or None when no API key is configured.
    """

    def __init__(
        self,
        config: GeminiSettings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize interpreter from settings.

        Args:
            config: Gemini settings (defaults to global settings).
            transport: Optional transport for tests.
        """
        config = config or settings.gemini
        self.client = GeminiClient(config, transport=transport) if config.is_configured else None

    async def interpret(self, text: str) -> MoodInterpretation:
        """Interpret a mood description. Never raises.

        Args:
            text: Free-text mood description.

        Returns:
            Model interpretation, or the keyword classification when
            the model is unavailable or its answer is unusable.
        """
        if self.client is None:
            return classify_mood(text)

        try:
            raw = await self.client.generate_json(SYSTEM_PROMPT, text)
            return MoodInterpretation.model_validate_json(raw)
        except SourceError as e:
            logger.warning("Gemini unavailable, using keyword fallback: %s", e)
        except ValidationError as e:
            logger.warning("Gemini answer rejected (%d errors), using keyword fallback", e.error_count())
        return classify_mood(text)

    async def aclose(self) -> None:
        """Close the model client."""
        if self.client is not None:
            await self.client.aclose()


@lru_cache(maxsize=1)
def get_mood_interpreter() -> MoodInterpreter:
    """Get singleton mood interpreter instance.

    Returns:
        Cached MoodInterpreter instance.
    """
    return MoodInterpreter()
