"""
Task MCP Tools

Tools the model is told about when it runs task operations:
- get_tasks: read the user's tasks with optional filters
- create_task: add a task
- update_task_priority: change one task's priority
"""

from typing import Any, Dict, Optional
import logging

from app.mcp.base_tool import BaseMCPTool, create_error_response, create_success_response
from app.mcp.errors import MCPToolError
from app.mcp.operations import TOOL_CREATE_TASK, TOOL_GET_TASKS, TOOL_UPDATE_TASK_PRIORITY
from app.services.task_projection import project_tasks
from app.services.task_repository import PRIORITY_VALUES, parse_bool

logger = logging.getLogger(__name__)

GET_TASKS_LIMIT = 20
ALLOWED_FILTERS = ("status", "priority", "category", "project", "completed")


class GetTasksTool(BaseMCPTool):
    """MCP Tool for listing a user's tasks"""

    name = TOOL_GET_TASKS

    async def execute(self, user_id: str = None, filters: Optional[Dict[str, Any]] = None, **kwargs) -> Dict[str, Any]:
        """
        Args:
            user_id: Owner of the tasks
            filters: Any of status, priority, category, project, completed

        Returns:
            Success payload with ``tasks`` and ``count``
        """
        filters = filters or {}
        self.log_tool_invocation(user_id, {"filters": filters})
        self.validate_user_id(user_id)

        unknown = [key for key in filters if key not in ALLOWED_FILTERS]
        if unknown:
            raise MCPToolError(
                code="VALIDATION_ERROR",
                message=f"Unsupported filters. Must be any of: {', '.join(ALLOWED_FILTERS)}",
                details={"field": "filters", "value": unknown}
            )

        if filters.get("completed") is not None:
            try:
                filters = {**filters, "completed": parse_bool(filters["completed"])}
            except ValueError:
                raise MCPToolError(
                    code="VALIDATION_ERROR",
                    message="completed must be true or false",
                    details={"field": "completed", "value": filters["completed"]}
                )

        tasks = await self.repository.find_tasks_by_owner(
            user_id,
            filters,
            sort=[("created_at", "desc")],
            limit=GET_TASKS_LIMIT
        )
        tasks_data = project_tasks(tasks, extra_fields=("completed",))

        return create_success_response(
            data={"tasks": tasks_data, "count": len(tasks_data)},
            message=f"Found {len(tasks_data)} task{'s' if len(tasks_data) != 1 else ''}."
        )


class CreateTaskTool(BaseMCPTool):
    """MCP Tool for creating tasks"""

    name = TOOL_CREATE_TASK

    async def execute(self, user_id: str = None, task_data: Optional[Dict[str, Any]] = None, **kwargs) -> Dict[str, Any]:
        task_data = task_data or {}
        self.log_tool_invocation(user_id, {"title": task_data.get("title")})
        self.validate_user_id(user_id)

        try:
            task = await self.repository.create_task(user_id, task_data)
        except ValueError as e:
            raise MCPToolError(
                code="VALIDATION_ERROR",
                message=str(e),
                details={"task_data": task_data}
            )

        return create_success_response(
            data={
                "task": {
                    "id": task.id,
                    "title": task.title,
                    "description": task.description,
                    "status": task.status,
                    "priority": task.priority
                }
            },
            message=f"Task '{task.title}' created."
        )


class UpdateTaskPriorityTool(BaseMCPTool):
    """MCP Tool for changing a task's priority"""

    name = TOOL_UPDATE_TASK_PRIORITY

    async def execute(self, user_id: str = None, task_id: Any = None, priority: str = None, **kwargs) -> Dict[str, Any]:
        self.log_tool_invocation(user_id, {"task_id": task_id, "priority": priority})
        self.validate_user_id(user_id)

        if priority not in PRIORITY_VALUES:
            raise MCPToolError(
                code="VALIDATION_ERROR",
                message=f"Priority must be one of: {', '.join(PRIORITY_VALUES)}",
                details={"field": "priority", "value": priority}
            )

        try:
            task_id = int(task_id)
        except (TypeError, ValueError):
            raise MCPToolError(
                code="VALIDATION_ERROR",
                message="task_id must be an integer",
                details={"field": "task_id", "value": task_id}
            )

        task = await self.repository.update_task_priority(user_id, task_id, priority)
        if task is None:
            return create_error_response(
                MCPToolError(code="NOT_FOUND", message="Task not found", details={"task_id": task_id})
            )

        return create_success_response(
            data={"task": {"id": task.id, "title": task.title, "priority": task.priority}},
            message=f"Priority of '{task.title}' set to {task.priority}."
        )


def register_task_tools(engine, repository) -> None:
    """Register the task tools with the MCP engine"""
    engine.register_tool(
        TOOL_GET_TASKS,
        lambda params: GetTasksTool(repository).execute(**params),
        "Retrieve user tasks with optional filters (status, priority, category, project)"
    )
    engine.register_tool(
        TOOL_CREATE_TASK,
        lambda params: CreateTaskTool(repository).execute(**params),
        "Create a new task with title, description, status, priority, due_date, category, and project"
    )
    engine.register_tool(
        TOOL_UPDATE_TASK_PRIORITY,
        lambda params: UpdateTaskPriorityTool(repository).execute(**params),
        "Update the priority of a specific task (low, medium, high, urgent)"
    )
