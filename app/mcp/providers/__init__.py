"""
Model providers

``register_models`` binds every provider whose credentials are configured,
in a fixed order, and always finishes with the deterministic mock model.
"""

import logging

from app.config import AISettings
from app.mcp.engine import MCPEngine
from app.mcp.models import MOCK_MODEL, MOCK_PROVIDER
from app.mcp.providers.mock import MockHandler

logger = logging.getLogger(__name__)


def register_models(engine: MCPEngine, settings: AISettings) -> None:
    """Register provider bindings gated on configured credentials"""
    if settings.openai_api_key:
        from app.mcp.providers.openai_provider import OPENAI_MODELS, OpenAIHandler

        handler = OpenAIHandler(settings.openai_api_key)
        for name, params in OPENAI_MODELS.items():
            engine.register_model(name, handler.provider_name, handler, params)

    if settings.gemini_api_key:
        from app.mcp.providers.gemini import GEMINI_MODELS, GeminiHandler

        handler = GeminiHandler(settings.gemini_api_key)
        for name, params in GEMINI_MODELS.items():
            engine.register_model(name, handler.provider_name, handler, params)

    if settings.cohere_api_key:
        from app.mcp.providers.cohere_provider import COHERE_MODELS, CohereHandler

        handler = CohereHandler(settings.cohere_api_key)
        for name, params in COHERE_MODELS.items():
            engine.register_model(name, handler.provider_name, handler, params)

    engine.register_model(MOCK_MODEL, MOCK_PROVIDER, MockHandler())

    logger.info(f"Model providers registered: {engine.available_models()}")
