"""
Task AI Agent

Entry point for the AI suggestion features. Coordinates the operation
subagents, all sharing one MCP engine and provider preference.

None of the operations raise for ordinary "no data" conditions or provider
outages; they return degenerate-but-valid results or deterministic fallbacks.
"""

from typing import Any, Dict, List, Optional, Sequence
import logging

from app.agents.subagents.subtask_suggester import SubtaskSuggester
from app.agents.subagents.task_prioritizer import TaskPrioritizer
from app.agents.subagents.task_summarizer import TaskSummarizer
from app.mcp.engine import MCPEngine
from app.utils.metrics import MetricsCollector

logger = logging.getLogger(__name__)


class TaskAIAgent:
    """
    Facade over the subtask, summary and priority subagents

    Responsibilities:
    - Hold the engine handle and provider preference
    - Delegate each operation to its subagent
    """

    def __init__(self, engine: MCPEngine, provider_preference: str = "openai",
                 metrics: Optional[MetricsCollector] = None):
        self.engine = engine
        self.provider_preference = provider_preference

        self.suggester = SubtaskSuggester(engine, provider_preference, metrics)
        self.summarizer = TaskSummarizer(engine, provider_preference, metrics)
        self.prioritizer = TaskPrioritizer(engine, provider_preference, metrics)

    @property
    def default_model(self) -> str:
        return self.engine.default_model(self.provider_preference)

    async def suggest_subtasks(self, description: str, user_id: Optional[str] = None,
                               model: Optional[str] = None) -> List[str]:
        return await self.suggester.suggest(description, user_id=user_id, model=model)

    async def summarize_pending_tasks(self, tasks: Sequence[Any], user_id: Optional[str] = None,
                                      model: Optional[str] = None) -> str:
        return await self.summarizer.summarize(tasks, user_id=user_id, model=model)

    async def suggest_priority(self, tasks: Sequence[Any], user_id: Optional[str] = None,
                               model: Optional[str] = None) -> Dict[str, str]:
        return await self.prioritizer.suggest(tasks, user_id=user_id, model=model)


def create_task_ai_agent(engine: MCPEngine, provider_preference: str = "openai") -> TaskAIAgent:
    """Factory function to create a task AI agent"""
    return TaskAIAgent(engine, provider_preference)
