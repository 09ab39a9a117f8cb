"""
Fallback Heuristics Skill

Deterministic, non-AI answers for the task operations. Used whenever the model
path fails or returns something unusable, so the AI features always respond.
"""

from typing import Any, Dict, List, Sequence

from app.models.task import PRIORITY_RANK
from app.services.task_projection import due_date_of, task_field

MARKETING_SUBTASKS = [
    "Define target audience",
    "Create ad budget",
    "Design marketing materials",
    "Schedule campaign launch",
]
MEETING_SUBTASKS = [
    "Prepare agenda",
    "Create presentation slides",
    "Send meeting invites",
    "Prepare talking points",
]
GENERIC_SUBTASKS = [
    "Research and plan",
    "Execute main task",
    "Review and refine",
    "Complete and document",
]

SUBTASK_TEMPLATES = [
    (("marketing", "campaign"), MARKETING_SUBTASKS),
    (("meeting", "presentation"), MEETING_SUBTASKS),
]

HIGH_PRIORITIES = ("urgent", "high")


def fallback_subtasks(description: str) -> List[str]:
    """Canned subtask template chosen by keywords in the description"""
    lowered = description.lower()
    for keywords, template in SUBTASK_TEMPLATES:
        if any(keyword in lowered for keyword in keywords):
            return list(template)
    return list(GENERIC_SUBTASKS)


def fallback_summary(tasks: Sequence[Any]) -> str:
    """Templated sentence with pending, high-priority and dated counts"""
    high_count = sum(1 for task in tasks if task_field(task, "priority") in HIGH_PRIORITIES)
    dated_count = sum(1 for task in tasks if due_date_of(task) is not None)

    summary = f"You have {len(tasks)} pending tasks. "
    if high_count > 0:
        summary += f"{high_count} are high priority. "
    if dated_count > 0:
        summary += f"{dated_count} have upcoming deadlines. "
    summary += "Focus on completing high-priority items first."
    return summary


def _priority_sort_key(task: Any):
    due = due_date_of(task)
    if due is not None:
        return (0, due.timestamp())
    return (1, -PRIORITY_RANK.get(task_field(task, "priority"), 0))


def fallback_priority(tasks: Sequence[Any]) -> Dict[str, str]:
    """
    Next task to work on

    Dated tasks come first, earliest deadline first; undated tasks follow by
    priority rank. Ties keep the input order.
    """
    next_task = sorted(tasks, key=_priority_sort_key)[0]
    due = due_date_of(next_task)

    if due is not None:
        reason = f"This task has the earliest deadline ({due.strftime('%Y-%m-%d')})"
    else:
        reason = f"This task has {task_field(next_task, 'priority')} priority and should be addressed next"

    return {"task_title": task_field(next_task, "title"), "reason": reason}
