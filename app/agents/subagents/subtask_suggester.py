"""
Subtask Suggestion Subagent

Breaks a task description into 3-5 actionable subtasks.
"""

from typing import List, Optional

from app.agents.skills.fallbacks import fallback_subtasks
from app.agents.subagents.base import OperationSubagent
from app.mcp.engine import OperationRequest, ParsedResult, ResponseFormat
from app.mcp.operations import CONTEXT_TASK, TASK_SUGGESTER, TOOL_GET_TASKS

SUBTASK_INSTRUCTIONS = """You are a task management assistant. Based on the task description, suggest 3-5 specific, actionable subtasks that would help complete this task.

Return a JSON object with a "subtasks" array containing the subtask titles."""


class SubtaskSuggester(OperationSubagent):
    """Subagent for subtask suggestions"""

    operation = TASK_SUGGESTER

    async def suggest(self, description: str, user_id: Optional[str] = None,
                      model: Optional[str] = None) -> List[str]:
        """
        Suggest subtasks for a task description

        Args:
            description: Task description; blank input returns ``[]`` without a model call
            user_id: Owner, enables the task context
            model: Explicit model name, overrides default selection

        Returns:
            Subtask titles
        """
        if not description or not description.strip():
            return []

        description = description.strip()
        request = OperationRequest(
            model=self.select_model(model),
            instructions=SUBTASK_INSTRUCTIONS,
            inputs={"task_description": description},
            context_type=CONTEXT_TASK if user_id else None,
            context_params={"user_id": user_id, "include_history": True} if user_id else {},
            available_tools=[TOOL_GET_TASKS],
            response_format=ResponseFormat.JSON,
        )

        return await self.run_with_fallback(
            request,
            validate=self._validate,
            fallback=lambda: fallback_subtasks(description),
        )

    def _validate(self, result: ParsedResult) -> Optional[List[str]]:
        if not isinstance(result, dict) or not isinstance(result.get("subtasks"), list):
            return None

        subtasks = [s for s in (self.non_blank(item) for item in result["subtasks"]) if s]
        return subtasks or None
