"""Base model handler interface."""
from abc import ABC, abstractmethod
from typing import Any

from app.mcp.engine import PromptEnvelope

SYSTEM_PROMPT = "You are a helpful task management assistant."


class ModelHandler(ABC):
    """
    One provider variant behind the ``ModelHandler(envelope) -> text`` contract.

    Instances are registered as binding handlers; the engine calls them with
    the envelope, the registered model name and the binding's default params.
    """

    provider_name: str = ""

    @staticmethod
    def variant(model: str) -> str:
        """``openai:gpt-4o`` -> ``gpt-4o``"""
        return model.split(":", 1)[1] if ":" in model else model

    @abstractmethod
    async def generate(self, envelope: PromptEnvelope, model: str, **params: Any) -> str:
        """Return the raw model text for ``envelope``"""

    async def __call__(self, envelope: PromptEnvelope, model: str, **params: Any) -> str:
        return await self.generate(envelope, model, **params)
