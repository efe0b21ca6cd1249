import json
import logging
from typing import Any, Dict, Optional

from google import genai
from google.genai import types

from app.config import get_settings
from app.errors import SuggestionUnavailable

logger = logging.getLogger(__name__)


class GeminiProvider:
    """Gemini provider using the google-genai SDK."""

    def __init__(self, api_key: Optional[str] = None, model: Optional[str] = None):
        settings = get_settings()
        self.api_key = api_key if api_key is not None else settings.gemini_api_key
        self.model = model or settings.gemini_model
        self._client = None

    @property
    def client(self) -> genai.Client:
        if not self.api_key:
            raise SuggestionUnavailable("Gemini API key not configured.")
        if self._client is None:
            self._client = genai.Client(api_key=self.api_key)
        return self._client

    async def complete_json(
        self,
        prompt: str,
        temperature: float = 0.4,
    ) -> Dict[str, Any]:
        """Generate a JSON response. Returns {} when the model reply is unusable."""
        client = self.client

        config = types.GenerateContentConfig(
            temperature=temperature,
            response_mime_type="application/json",
        )
        contents = [types.Content(role="user", parts=[types.Part.from_text(text=prompt)])]

        try:
            response = await client.aio.models.generate_content(
                model=self.model,
                contents=contents,
                config=config,
            )
        except Exception as e:
            logger.error("Gemini request failed: %s", e)
            return {}

        if response.candidates and response.candidates[0].content and response.candidates[0].content.parts:
            text = response.candidates[0].content.parts[0].text
            if text:
                try:
                    return json.loads(text)
                except json.JSONDecodeError:
                    logger.warning("Gemini returned non-JSON text: %.200s", text)
        return {}


class LLMService:
    def __init__(self, provider: Optional[GeminiProvider] = None):
        self.provider = provider or GeminiProvider()

    async def suggest_workout(self, prompt: str) -> Dict[str, Any]:
        """Ask the model for ``{"response": {"workoutPhrase", "rationale"}}``."""
        return await self.provider.complete_json(prompt)
