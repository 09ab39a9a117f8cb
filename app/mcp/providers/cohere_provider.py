"""
Cohere model handler

Uses Cohere's chat endpoint with the task-assistant preamble as system prompt.
"""

from typing import Any, Optional
import logging

import cohere

from app.mcp.engine import PromptEnvelope
from app.mcp.providers.base import ModelHandler, SYSTEM_PROMPT

logger = logging.getLogger(__name__)

COHERE_MODELS = {
    "cohere:command-r-plus": {"temperature": 0.7, "max_tokens": 500},
    "cohere:command-r": {"temperature": 0.7, "max_tokens": 500},
}


class CohereHandler(ModelHandler):
    """Handler for ``cohere:*`` models"""

    provider_name = "cohere"

    def __init__(self, api_key: str):
        self.api_key = api_key
        self._client: Optional[cohere.AsyncClient] = None

    def _get_client(self) -> cohere.AsyncClient:
        if self._client is None:
            self._client = cohere.AsyncClient(api_key=self.api_key)
        return self._client

    async def generate(
        self,
        envelope: PromptEnvelope,
        model: str,
        temperature: float = 0.7,
        max_tokens: int = 500,
        **kwargs: Any,
    ) -> str:
        try:
            response = await self._get_client().chat(
                model=self.variant(model) or "command-r-plus",
                message=envelope.text,
                temperature=temperature,
                max_tokens=max_tokens,
                preamble=SYSTEM_PROMPT,
            )
        except Exception as e:
            error_str = str(e).lower()
            if "model" in error_str and ("removed" in error_str or "deprecated" in error_str):
                logger.warning(f"Cohere model {model} is deprecated. Please update your configuration.")
            raise

        return response.text
