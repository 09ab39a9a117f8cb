"""
Task Summarization Subagent

Summarizes a user's pending tasks in a short, actionable paragraph.
"""

from typing import Any, Optional, Sequence

from app.agents.skills.fallbacks import fallback_summary
from app.agents.subagents.base import OperationSubagent
from app.mcp.engine import OperationRequest, ParsedResult, ResponseFormat
from app.mcp.operations import CONTEXT_SUMMARY, TASK_SUMMARIZER
from app.services.task_projection import project_tasks

NO_PENDING_TASKS = "No pending tasks."

SUMMARY_INSTRUCTIONS = """You are a task management assistant. Summarize the user's pending tasks in a concise, actionable paragraph (2-3 sentences).

Focus on:
- Overall task count and status
- High-priority items and deadlines
- Suggested focus areas

Return a JSON object with a "summary" field containing the text summary."""


class TaskSummarizer(OperationSubagent):
    """Subagent for pending-task summaries"""

    operation = TASK_SUMMARIZER

    async def summarize(self, tasks: Sequence[Any], user_id: Optional[str] = None,
                        model: Optional[str] = None) -> str:
        if not tasks:
            return NO_PENDING_TASKS

        request = OperationRequest(
            model=self.select_model(model),
            instructions=SUMMARY_INSTRUCTIONS,
            inputs={
                "task_count": len(tasks),
                "tasks": project_tasks(tasks),
            },
            context_type=CONTEXT_SUMMARY if user_id else None,
            context_params={"user_id": user_id} if user_id else {},
            response_format=ResponseFormat.JSON,
        )

        return await self.run_with_fallback(
            request,
            validate=self._validate,
            fallback=lambda: fallback_summary(tasks),
        )

    def _validate(self, result: ParsedResult) -> Optional[str]:
        if not isinstance(result, dict):
            return None
        return self.non_blank(result.get("summary"))
