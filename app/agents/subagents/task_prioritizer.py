"""
Task Prioritization Subagent

Recommends which task the user should tackle next and why.
"""

from typing import Any, Dict, Optional, Sequence

from app.agents.skills.fallbacks import fallback_priority
from app.agents.subagents.base import OperationSubagent
from app.mcp.engine import OperationRequest, ParsedResult, ResponseFormat
from app.mcp.operations import CONTEXT_PRIORITY, TASK_PRIORITIZER, TOOL_GET_TASKS, TOOL_UPDATE_TASK_PRIORITY
from app.services.task_projection import project_tasks

NO_TASKS_TO_PRIORITIZE = "No tasks to prioritize."

PRIORITY_INSTRUCTIONS = """You are a task management assistant. Analyze the user's tasks and suggest which one should be prioritized next.

Consider:
- Upcoming deadlines (earliest first)
- Current priority levels (urgent > high > medium > low)
- Task dependencies and context
- User's task history and patterns

Return a JSON object with:
- "taskTitle": The title of the recommended task
- "reason": A brief explanation (1-2 sentences) of why this task should be prioritized"""


class TaskPrioritizer(OperationSubagent):
    """Subagent for next-action suggestions"""

    operation = TASK_PRIORITIZER

    async def suggest(self, tasks: Sequence[Any], user_id: Optional[str] = None,
                      model: Optional[str] = None) -> Dict[str, str]:
        """
        Returns:
            ``{"task_title", "reason"}``, or ``{"message"}`` when there is nothing to rank
        """
        if not tasks:
            return {"message": NO_TASKS_TO_PRIORITIZE}

        request = OperationRequest(
            model=self.select_model(model),
            instructions=PRIORITY_INSTRUCTIONS,
            inputs={"tasks": project_tasks(tasks)},
            context_type=CONTEXT_PRIORITY if user_id else None,
            context_params={"user_id": user_id} if user_id else {},
            available_tools=[TOOL_GET_TASKS, TOOL_UPDATE_TASK_PRIORITY],
            response_format=ResponseFormat.JSON,
        )

        return await self.run_with_fallback(
            request,
            validate=self._validate,
            fallback=lambda: fallback_priority(tasks),
        )

    def _validate(self, result: ParsedResult) -> Optional[Dict[str, str]]:
        if not isinstance(result, dict):
            return None

        title = self.non_blank(result.get("taskTitle"))
        reason = self.non_blank(result.get("reason"))
        if not title or not reason:
            return None
        return {"task_title": title, "reason": reason}
