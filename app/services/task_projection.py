"""Projection of task fields shared by prompts, context and fallbacks."""
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional
import logging

logger = logging.getLogger(__name__)

PROJECTED_FIELDS = ("title", "description", "status", "priority", "due_date", "category", "project")

FIELD_DEFAULTS = {
    "description": "",
    "status": "pending",
    "priority": "medium",
    "category": "",
    "project": "",
    "completed": False,
}


def task_field(task: Any, name: str) -> Any:
    """Read a field from a Task model or a plain mapping."""
    if isinstance(task, Mapping):
        value = task.get(name)
    else:
        value = getattr(task, name, None)
    if value is None:
        return FIELD_DEFAULTS.get(name)
    return value


def due_date_of(task: Any) -> Optional[datetime]:
    """
    Due date as an aware UTC datetime (naive values are taken as UTC).

    Strings that are not ISO-8601 count as no due date.
    """
    value = task_field(task, "due_date")
    if not value:
        return None
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value.replace('Z', '+00:00'))
        except ValueError:
            logger.warning(f"Ignoring unparseable due date: {value!r}")
            return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def project_task(task: Any, extra_fields: Iterable[str] = ()) -> Dict[str, Any]:
    """Only the fields a model should see; never ids, owners or timestamps."""
    data = {name: task_field(task, name) for name in (*PROJECTED_FIELDS, *extra_fields)}
    due = due_date_of(task)
    data["due_date"] = due.isoformat() if due else None
    return data


def project_tasks(tasks: Iterable[Any], extra_fields: Iterable[str] = ()) -> List[Dict[str, Any]]:
    extra_fields = tuple(extra_fields)
    return [project_task(task, extra_fields) for task in tasks]
