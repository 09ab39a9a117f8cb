"""
MCP Tool Registry

Named callables the model can be told about. Tool availability is advisory:
prompt building silently drops names that are not registered.
"""

from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Iterable, List
import logging

from app.mcp.errors import UnknownTool

logger = logging.getLogger(__name__)

ToolHandler = Callable[[Dict[str, Any]], Awaitable[Dict[str, Any]]]


@dataclass(frozen=True)
class ToolDefinition:
    """MCP Tool definition"""
    name: str
    handler: ToolHandler
    description: str


class ToolRegistry:
    """Registry of tools keyed by name (last registration wins)"""

    def __init__(self):
        self._tools: Dict[str, ToolDefinition] = {}

    def register(self, name: str, handler: ToolHandler, description: str) -> None:
        """Register a tool"""
        if name in self._tools:
            logger.warning(f"Tool {name} already registered, overwriting")

        self._tools[name] = ToolDefinition(name=name, handler=handler, description=description)
        logger.info(f"Registered MCP tool: {name}")

    def resolve(self, name: str) -> ToolDefinition:
        """Get a registered tool by name"""
        if name not in self._tools:
            raise UnknownTool(name)
        return self._tools[name]

    def describe_all(self, names: Iterable[str]) -> List[Dict[str, str]]:
        """Name/description pairs for ``names`` in order, skipping unknown tools"""
        descriptions = []
        for name in names:
            tool = self._tools.get(name)
            if tool is None:
                logger.debug(f"Skipping unknown tool in prompt: {name}")
                continue
            descriptions.append({"name": tool.name, "description": tool.description})
        return descriptions

    def list(self) -> List[Dict[str, str]]:
        """Descriptions of every registered tool"""
        return self.describe_all(self._tools.keys())

    def __contains__(self, name: str) -> bool:
        return name in self._tools
