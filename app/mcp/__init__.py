"""
MCP (Model Context Protocol) Package

Orchestration layer between the task AI operations and pluggable model
providers. ``create_mcp_engine`` wires one engine per process: models gated
on configured credentials, task tools and context builders.
"""

from app.config import AISettings
from app.mcp.context.builders import register_context_builders
from app.mcp.engine import MCPEngine, OperationRequest, PromptEnvelope, ResponseFormat
from app.mcp.errors import MCPError, ProviderError, UnknownContextBuilder, UnknownModel, UnknownTool
from app.mcp.providers import register_models
from app.mcp.tools.task_tools import register_task_tools


def create_mcp_engine(settings: AISettings, tasks, users) -> MCPEngine:
    """Build the process-wide engine with every provider, tool and context builder"""
    engine = MCPEngine(handler_timeout=settings.handler_timeout)
    register_models(engine, settings)
    register_task_tools(engine, tasks)
    register_context_builders(engine, tasks, users)
    return engine


__all__ = [
    "MCPEngine",
    "OperationRequest",
    "PromptEnvelope",
    "ResponseFormat",
    "MCPError",
    "ProviderError",
    "UnknownContextBuilder",
    "UnknownModel",
    "UnknownTool",
    "create_mcp_engine",
]
