from __future__ import annotations

import json
import logging
from typing import Any, Optional

from google import genai
from google.genai import errors, types

from ..core.exceptions import CollaboratorError
from .service import TextGenerator

logger = logging.getLogger(__name__)


def _strip_code_fence(text: str) -> str:
    text = text.strip()
    if text.startswith("```"):
        text = text.split("\n", 1)[1] if "\n" in text else ""
        if text.rstrip().endswith("```"):
            text = text.rstrip()[:-3]
    return text.strip()


class GeminiTextGenerator(TextGenerator):
    """Google Gemini behind the TextGenerator port."""

    def __init__(self, *, api_key: str, model: str, client: Optional[genai.Client] = None):
        self._model = model
        self._client = client or genai.Client(api_key=api_key)

    def _generate(self, prompt: str, config: Optional[types.GenerateContentConfig] = None) -> str:
        try:
            response = self._client.models.generate_content(model=self._model, contents=prompt, config=config)
        except errors.APIError as e:
            logger.error("Gemini request failed: %s", e)
            raise CollaboratorError(f"AI service error: {e}") from e
        return response.text or ""

    def generate_text(self, prompt: str) -> str:
        return self._generate(prompt)

    def generate_json(self, prompt: str) -> Any:
        text = self._generate(prompt, types.GenerateContentConfig(response_mime_type="application/json"))
        try:
            return json.loads(_strip_code_fence(text))
        except json.JSONDecodeError as e:
            raise CollaboratorError("AI service returned malformed JSON") from e


def build_text_generator(api_key: Optional[str], model: str) -> Optional[TextGenerator]:
    if not api_key:
        logger.info("GEMINI_API_KEY not set; AI features use fallbacks")
        return None
    return GeminiTextGenerator(api_key=api_key, model=model)
