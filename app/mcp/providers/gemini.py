"""Google Gemini model handler."""
from typing import Any

import google.generativeai as genai
from google.generativeai.types import GenerationConfig

from app.mcp.engine import PromptEnvelope
from app.mcp.providers.base import ModelHandler, SYSTEM_PROMPT

GEMINI_MODELS = {
    "gemini:gemini-1.5-pro": {"temperature": 0.7, "max_tokens": 500},
    "gemini:gemini-1.5-flash": {"temperature": 0.7, "max_tokens": 500},
}


class GeminiHandler(ModelHandler):
    """Handler for ``gemini:*`` models."""

    provider_name = "gemini"

    def __init__(self, api_key: str):
        self.api_key = api_key
        genai.configure(api_key=self.api_key)

    def _get_client(self, model: str) -> genai.GenerativeModel:
        return genai.GenerativeModel(
            self.variant(model) or "gemini-1.5-flash",
            system_instruction=SYSTEM_PROMPT,
        )

    async def generate(
        self,
        envelope: PromptEnvelope,
        model: str,
        temperature: float = 0.7,
        max_tokens: int = 500,
        **kwargs: Any,
    ) -> str:
        response = await self._get_client(model).generate_content_async(
            envelope.text,
            generation_config=GenerationConfig(
                temperature=temperature,
                max_output_tokens=max_tokens,
            ),
        )
        return response.text
