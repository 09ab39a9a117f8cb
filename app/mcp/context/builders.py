"""
MCP Context Builders

Assemble read-only context objects from the task repository and user
directory. Builders only query; they never write.
"""

from datetime import datetime, timezone
from typing import Any, Dict
import logging

from app.mcp.operations import CONTEXT_PRIORITY, CONTEXT_SUMMARY, CONTEXT_TASK
from app.services.task_projection import project_task, project_tasks

logger = logging.getLogger(__name__)

RECENT_TASKS_LIMIT = 10
SUMMARY_TASKS_LIMIT = 50
PRIORITY_TASKS_LIMIT = 20


class TaskContextBuilders:
    """Context builders bound to the task repository and user directory"""

    def __init__(self, tasks, users):
        self.tasks = tasks
        self.users = users

    async def build_task_context(self, params: Dict[str, Any]) -> Dict[str, Any]:
        """
        User, current task, recent tasks and statistics

        Args:
            params: ``user_id`` (required), ``task_id``, ``include_history`` (default True)
        """
        user_id = params["user_id"]
        task_id = params.get("task_id")
        include_history = params.get("include_history", True)

        context: Dict[str, Any] = {
            "user": None,
            "current_task": None,
            "recent_tasks": [],
            "task_stats": {},
        }

        context["user"] = await self.users.find_user_by_id(user_id)

        if task_id is not None:
            matches = await self.tasks.find_tasks_by_owner(user_id, {"id": task_id}, limit=1)
            if matches:
                context["current_task"] = project_task(matches[0])

        if include_history:
            recent = await self.tasks.find_tasks_by_owner(
                user_id, sort=[("updated_at", "desc")], limit=RECENT_TASKS_LIMIT
            )
            context["recent_tasks"] = project_tasks(recent, extra_fields=("completed",))

        now = datetime.now(timezone.utc)
        context["task_stats"] = {
            "total": await self.tasks.count_tasks_by_owner(user_id),
            "completed": await self.tasks.count_tasks_by_owner(user_id, {"completed": True}),
            "pending": await self.tasks.count_tasks_by_owner(user_id, {"completed": False}),
            "overdue": await self.tasks.count_tasks_by_owner(
                user_id, {"completed": False, "overdue_as_of": now}
            ),
        }

        return context

    async def build_summary_context(self, params: Dict[str, Any]) -> Dict[str, Any]:
        """Pending tasks, most important first"""
        pending = await self.tasks.find_tasks_by_owner(
            params["user_id"],
            {"completed": False},
            sort=[("priority", "desc"), ("due_date", "asc")],
            limit=SUMMARY_TASKS_LIMIT,
        )
        return {
            "pending_tasks": project_tasks(pending),
            "count": len(pending),
        }

    async def build_priority_context(self, params: Dict[str, Any]) -> Dict[str, Any]:
        """Pending tasks, earliest deadline first"""
        pending = await self.tasks.find_tasks_by_owner(
            params["user_id"],
            {"completed": False},
            sort=[("due_date", "asc"), ("priority", "desc")],
            limit=PRIORITY_TASKS_LIMIT,
        )
        return {"tasks": project_tasks(pending)}


def register_context_builders(engine, tasks, users) -> TaskContextBuilders:
    """Register the task, summary and priority context builders"""
    builders = TaskContextBuilders(tasks, users)
    engine.register_context_builder(CONTEXT_TASK, builders.build_task_context)
    engine.register_context_builder(CONTEXT_SUMMARY, builders.build_summary_context)
    engine.register_context_builder(CONTEXT_PRIORITY, builders.build_priority_context)
    return builders
