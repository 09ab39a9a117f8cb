"""
MCP Engine

Model-agnostic orchestration between application operations, registered model
providers, context builders and advisory tools.

One engine is built at process startup (see ``create_mcp_engine``) and handed
to every call site; its registries are treated as read-only afterwards.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Union
import asyncio
import json
import logging
import time

from app.mcp.context.registry import ContextBuilder, ContextBuilderRegistry
from app.mcp.errors import MCPError, ProviderError
from app.mcp.models import HandlerFn, ModelBinding, ModelRegistry, select_default_model
from app.mcp.tools.registry import ToolHandler, ToolRegistry
from app.utils.logger import get_logger
from app.utils.metrics import MetricsCollector, metrics_collector

logger = logging.getLogger(__name__)
run_logger = get_logger("mcp.runs")

ParsedResult = Union[Dict[str, Any], str]


class ResponseFormat(str, Enum):
    """Response format requested from the model"""
    JSON = "json"
    TEXT = "text"


@dataclass
class OperationRequest:
    """Everything needed for one model invocation"""
    model: str
    instructions: str
    inputs: Any
    context_type: Optional[str] = None
    context_params: Dict[str, Any] = field(default_factory=dict)
    available_tools: List[str] = field(default_factory=list)
    response_format: ResponseFormat = ResponseFormat.JSON


@dataclass(frozen=True)
class PromptEnvelope:
    """Composed prompt handed to a model handler"""
    operation: str
    text: str
    response_format: ResponseFormat = ResponseFormat.JSON

    def __str__(self) -> str:
        return self.text


def _json_default(value: Any) -> Any:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    return str(value)


def serialize(value: Any) -> str:
    """Deterministic JSON used inside prompts"""
    return json.dumps(value, indent=2, ensure_ascii=False, default=_json_default)


def extract_json_object(text: str) -> Optional[Dict[str, Any]]:
    """
    Find the first balanced ``{...}`` substring of ``text`` that parses to a
    JSON object. Braces inside JSON strings are ignored while scanning.
    """
    start = text.find("{")
    while start != -1:
        depth = 0
        in_string = False
        escaped = False
        for index in range(start, len(text)):
            char = text[index]
            if in_string:
                if escaped:
                    escaped = False
                elif char == "\\":
                    escaped = True
                elif char == '"':
                    in_string = False
                continue

            if char == '"':
                in_string = True
            elif char == "{":
                depth += 1
            elif char == "}":
                depth -= 1
                if depth == 0:
                    try:
                        parsed = json.loads(text[start:index + 1])
                    except ValueError:
                        break
                    if isinstance(parsed, dict):
                        return parsed
                    break
        start = text.find("{", start + 1)
    return None


class MCPEngine:
    """
    Orchestrator for AI operations

    Responsibilities:
    - Resolve the requested model binding
    - Build context through registered context builders
    - Describe the advisory tools in the prompt
    - Invoke the model handler and parse its answer

    The engine never retries and never substitutes fallbacks; that is left to
    the operation adapters.
    """

    def __init__(
        self,
        handler_timeout: Optional[float] = None,
        metrics: Optional[MetricsCollector] = None,
    ):
        self.models = ModelRegistry()
        self.tools = ToolRegistry()
        self.contexts = ContextBuilderRegistry()
        self.handler_timeout = handler_timeout
        self.metrics = metrics or metrics_collector
        self.name = "task-mcp-engine"
        logger.info(f"Initializing MCP engine: {self.name}")

    # Registration

    def register_model(self, name: str, provider: str, handler: HandlerFn,
                       default_params: Optional[Dict[str, Any]] = None) -> None:
        self.models.register(ModelBinding(
            name=name,
            provider=provider,
            handler=handler,
            default_params=dict(default_params or {}),
        ))

    def register_tool(self, name: str, handler: ToolHandler, description: str) -> None:
        self.tools.register(name, handler, description)

    def register_context_builder(self, name: str, builder: ContextBuilder) -> None:
        self.contexts.register(name, builder)

    # Lookups

    def available_models(self) -> List[str]:
        return self.models.list()

    def available_tools(self) -> List[Dict[str, str]]:
        return self.tools.list()

    def default_model(self, preference: str) -> str:
        return select_default_model(self.models, preference)

    async def build_context(self, context_type: str, params: Dict[str, Any]) -> Dict[str, Any]:
        return await self.contexts.build(context_type, params)

    async def execute_tool(self, tool_name: str, params: Dict[str, Any]) -> Dict[str, Any]:
        """Invoke a registered tool handler"""
        tool = self.tools.resolve(tool_name)
        logger.info(f"Invoking MCP tool: {tool_name}")

        try:
            result = await tool.handler(dict(params or {}))
            logger.info(f"Tool {tool_name} executed successfully")
            return result
        except Exception as e:
            logger.error(f"Tool {tool_name} failed: {str(e)}")
            raise

    # Operations

    async def run(self, operation: str, request: OperationRequest) -> ParsedResult:
        """
        Run an AI operation

        Args:
            operation: Operation name (e.g. "task_suggester")
            request: Model, instructions, inputs, context and tool selection

        Returns:
            Parsed JSON object, ``{"text": raw}`` when JSON could not be
            recovered, or the raw text for text-format requests

        Raises:
            UnknownModel, UnknownContextBuilder: resolution failures
            ProviderError: the model handler failed or timed out
        """
        binding = self.models.resolve(request.model)
        self.metrics.mcp_run(operation)

        context: Dict[str, Any] = {}
        if request.context_type:
            context = await self.build_context(request.context_type, request.context_params)

        tool_descriptions = self.tools.describe_all(request.available_tools)

        envelope = self.build_prompt(
            operation=operation,
            instructions=request.instructions,
            inputs=request.inputs,
            context=context,
            tools=tool_descriptions,
            response_format=request.response_format,
        )

        run_logger.info(
            "mcp.run.start",
            operation=operation,
            model=binding.name,
            context_type=request.context_type,
            tools=[tool["name"] for tool in tool_descriptions],
        )
        raw = await self._invoke(binding, envelope)
        result = self.parse_response(raw, request.response_format)
        run_logger.info(
            "mcp.run.complete",
            operation=operation,
            model=binding.name,
            parsed=not (isinstance(result, dict) and set(result) == {"text"}),
        )
        return result

    async def _invoke(self, binding: ModelBinding, envelope: PromptEnvelope) -> str:
        started = time.perf_counter()

        try:
            call = binding.handler(envelope, binding.name, **dict(binding.default_params))
            if self.handler_timeout:
                return await asyncio.wait_for(call, timeout=self.handler_timeout)
            return await call
        except asyncio.TimeoutError as e:
            self.metrics.provider_error(binding.name)
            raise ProviderError(
                binding.name, f"Model '{binding.name}' timed out after {self.handler_timeout}s"
            ) from e
        except MCPError:
            self.metrics.provider_error(binding.name)
            raise
        except Exception as e:
            self.metrics.provider_error(binding.name)
            logger.error(f"Model {binding.name} failed: {str(e)}")
            raise ProviderError(binding.name, str(e)) from e
        finally:
            self.metrics.record_timer(f"mcp_handler_seconds.{binding.provider}", time.perf_counter() - started)

    def build_prompt(
        self,
        operation: str,
        instructions: str,
        inputs: Any,
        context: Dict[str, Any],
        tools: List[Dict[str, str]],
        response_format: ResponseFormat,
    ) -> PromptEnvelope:
        """Compose the prompt: instructions, context, input, tools, format directive"""
        prompt = instructions + "\n\n"

        if context:
            prompt += "## Context\n"
            prompt += serialize(context) + "\n\n"

        prompt += "## Input\n"
        prompt += serialize(inputs) + "\n\n"

        if tools:
            prompt += "## Available Tools\n"
            for tool in tools:
                prompt += f"- {tool['name']}: {tool['description']}\n"
            prompt += "\n"

        if response_format == ResponseFormat.JSON:
            prompt += "## Response Format\n"
            prompt += "Return a valid JSON object.\n"

        return PromptEnvelope(operation=operation, text=prompt, response_format=ResponseFormat(response_format))

    def parse_response(self, response: str, response_format: ResponseFormat) -> ParsedResult:
        """Strict JSON parse first, then the first balanced object, then a text wrapper"""
        if response_format != ResponseFormat.JSON:
            return response

        try:
            parsed = json.loads(response)
            if isinstance(parsed, dict):
                return parsed
        except (TypeError, ValueError):
            pass

        extracted = extract_json_object(response or "")
        if extracted is not None:
            return extracted

        logger.warning("Model response did not contain a JSON object, returning text wrapper")
        self.metrics.unparsed_response()
        return {"text": response}
