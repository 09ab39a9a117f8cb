"""OpenAI model handler."""
from typing import Any, Optional

from openai import AsyncOpenAI

from app.mcp.engine import PromptEnvelope
from app.mcp.providers.base import ModelHandler, SYSTEM_PROMPT

OPENAI_MODELS = {
    "openai:gpt-4o": {"temperature": 0.7, "max_tokens": 1000},
    "openai:gpt-4o-mini": {"temperature": 0.7, "max_tokens": 500},
    "openai:gpt-3.5-turbo": {"temperature": 0.7, "max_tokens": 500},
}


class OpenAIHandler(ModelHandler):
    """Chat-completions handler for ``openai:*`` models."""

    provider_name = "openai"

    def __init__(self, api_key: str):
        self.api_key = api_key
        self._client: Optional[AsyncOpenAI] = None

    def _get_client(self) -> AsyncOpenAI:
        """Lazy load OpenAI client."""
        if self._client is None:
            self._client = AsyncOpenAI(api_key=self.api_key)
        return self._client

    async def generate(
        self,
        envelope: PromptEnvelope,
        model: str,
        temperature: float = 0.7,
        max_tokens: int = 500,
        **kwargs: Any,
    ) -> str:
        response = await self._get_client().chat.completions.create(
            model=self.variant(model) or "gpt-3.5-turbo",
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": envelope.text},
            ],
            temperature=temperature,
            max_tokens=max_tokens,
        )
        return response.choices[0].message.content or ""
