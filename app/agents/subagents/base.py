"""
Operation Subagent Base

Shared model-first / fallback-always flow for the task AI operations:
run the request through the MCP engine, validate the parsed result, and
fall back to a deterministic answer on any failure.
"""

from typing import Any, Callable, Optional, TypeVar
import logging

from app.mcp.engine import MCPEngine, OperationRequest, ParsedResult
from app.mcp.errors import MCPError
from app.utils.metrics import MetricsCollector, metrics_collector

logger = logging.getLogger(__name__)

T = TypeVar("T")


class OperationSubagent:
    """Base class for subagents that wrap one MCP operation"""

    operation: str = ""

    def __init__(
        self,
        engine: MCPEngine,
        provider_preference: str = "openai",
        metrics: Optional[MetricsCollector] = None,
    ):
        self.engine = engine
        self.provider_preference = provider_preference
        self.metrics = metrics or metrics_collector

    def select_model(self, model: Optional[str] = None) -> str:
        """Explicit model, or the engine's default-selection policy"""
        return model or self.engine.default_model(self.provider_preference)

    async def run_with_fallback(
        self,
        request: OperationRequest,
        validate: Callable[[ParsedResult], Optional[T]],
        fallback: Callable[[], T],
    ) -> T:
        """
        Run ``request`` and return the validated result

        ``validate`` returns ``None`` for unusable results. Any exception from
        the engine, and any unusable result, yields ``fallback()`` instead.
        """
        try:
            result = await self.engine.run(self.operation, request)
        except MCPError as e:
            logger.error(f"AI operation {self.operation} failed [{e.code}]: {e.message}")
            return self._fallback(fallback)
        except Exception as e:
            logger.error(f"AI operation {self.operation} failed: {str(e)}")
            return self._fallback(fallback)

        validated = validate(result)
        if validated is None:
            logger.warning(f"AI operation {self.operation} returned an unusable result, using fallback")
            return self._fallback(fallback)

        return validated

    def _fallback(self, fallback: Callable[[], T]) -> T:
        self.metrics.fallback_used(self.operation)
        return fallback()

    @staticmethod
    def non_blank(value: Any) -> Optional[str]:
        if isinstance(value, str) and value.strip():
            return value.strip()
        return None
