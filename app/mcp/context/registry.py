"""Context builder registry for the MCP engine."""

from typing import Any, Awaitable, Callable, Dict, List
import logging

from app.mcp.errors import UnknownContextBuilder

logger = logging.getLogger(__name__)

ContextBuilder = Callable[[Dict[str, Any]], Awaitable[Dict[str, Any]]]


class ContextBuilderRegistry:
    """Named async builders that assemble read-only context objects"""

    def __init__(self):
        self._builders: Dict[str, ContextBuilder] = {}

    def register(self, name: str, builder: ContextBuilder) -> None:
        if name in self._builders:
            logger.warning(f"Context builder {name} already registered, overwriting")

        self._builders[name] = builder
        logger.info(f"Registered context builder: {name}")

    async def build(self, name: str, params: Dict[str, Any]) -> Dict[str, Any]:
        """Run the builder registered under ``name``"""
        builder = self._builders.get(name)
        if builder is None:
            raise UnknownContextBuilder(name)
        return await builder(dict(params or {}))

    def list(self) -> List[str]:
        return list(self._builders.keys())

    def __contains__(self, name: str) -> bool:
        return name in self._builders
