"""Task repository consumed by the MCP tools and context builders."""
from fastapi.concurrency import run_in_threadpool
from sqlmodel import Session, select
from sqlalchemy import case, func
from sqlalchemy.engine import Engine
from typing import Any, Dict, List, Optional, Sequence, Tuple
from datetime import datetime, timezone

from app.models.task import Task, TaskPriority, TaskStatus

SortSpec = Sequence[Tuple[str, str]]

SORTABLE_FIELDS = {"created_at", "updated_at", "due_date", "priority", "title"}
PRIORITY_VALUES = [p.value for p in TaskPriority]
STATUS_VALUES = [s.value for s in TaskStatus]


def parse_datetime(value: Any) -> Optional[datetime]:
    """Accept datetimes or ISO strings; return aware UTC (naive values are taken as UTC)."""
    if value is None or value == "":
        return None
    if isinstance(value, str):
        value = datetime.fromisoformat(value.replace('Z', '+00:00'))
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_bool(value: Any) -> bool:
    """Booleans, or the strings "true"/"false" (any case) as sent by models."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in ("true", "false"):
        return value.strip().lower() == "true"
    raise ValueError(f"Expected a boolean, got {value!r}")


def _priority_rank():
    return case(
        (Task.priority == TaskPriority.URGENT.value, 4),
        (Task.priority == TaskPriority.HIGH.value, 3),
        (Task.priority == TaskPriority.MEDIUM.value, 2),
        (Task.priority == TaskPriority.LOW.value, 1),
        else_=0
    )


class TaskRepository:
    """
    Owner-scoped task queries on top of SQLModel.

    Each call opens its own session in the threadpool so a single repository
    instance can be shared by the engine for the lifetime of the process
    without blocking the event loop.
    """

    def __init__(self, engine: Engine):
        self.engine = engine

    def _apply_filters(self, statement, owner_id: str, filters: Optional[Dict[str, Any]]):
        statement = statement.where(Task.user_id == owner_id)
        filters = filters or {}

        if filters.get("id") is not None:
            statement = statement.where(Task.id == int(filters["id"]))

        for field in ("status", "priority", "category", "project"):
            if filters.get(field):
                statement = statement.where(getattr(Task, field) == filters[field])

        if filters.get("completed") is not None:
            statement = statement.where(Task.completed == parse_bool(filters["completed"]))

        # inclusive on both ends
        if filters.get("due_from"):
            statement = statement.where(Task.due_date >= parse_datetime(filters["due_from"]))
        if filters.get("due_to"):
            statement = statement.where(Task.due_date <= parse_datetime(filters["due_to"]))

        # due before the reference time and still set
        if filters.get("overdue_as_of"):
            statement = statement.where(
                Task.due_date.is_not(None),
                Task.due_date < parse_datetime(filters["overdue_as_of"])
            )

        return statement

    def _apply_sort(self, statement, sort: Optional[SortSpec]):
        if not sort:
            return statement.order_by(Task.created_at.desc())

        for field, direction in sort:
            if field not in SORTABLE_FIELDS:
                raise ValueError(f"Sort field must be one of: {', '.join(sorted(SORTABLE_FIELDS))}")
            descending = direction == "desc"

            if field == "priority":
                column = _priority_rank()
                statement = statement.order_by(column.desc() if descending else column.asc())
            elif field == "due_date":
                column = Task.due_date.desc() if descending else Task.due_date.asc()
                statement = statement.order_by(column.nullslast())
            else:
                column = getattr(Task, field)
                statement = statement.order_by(column.desc() if descending else column.asc())

        return statement

    async def find_tasks_by_owner(
        self,
        owner_id: str,
        filters: Optional[Dict[str, Any]] = None,
        sort: Optional[SortSpec] = None,
        limit: Optional[int] = None
    ) -> List[Task]:
        """Tasks owned by ``owner_id`` matching ``filters``, ordered by ``sort``."""
        statement = self._apply_filters(select(Task), owner_id, filters)
        statement = self._apply_sort(statement, sort)
        if limit:
            statement = statement.limit(int(limit))

        def _query() -> List[Task]:
            with Session(self.engine) as session:
                return list(session.exec(statement).all())

        return await run_in_threadpool(_query)

    async def count_tasks_by_owner(self, owner_id: str, filters: Optional[Dict[str, Any]] = None) -> int:
        statement = self._apply_filters(select(func.count()).select_from(Task), owner_id, filters)

        def _query() -> int:
            with Session(self.engine) as session:
                return int(session.exec(statement).one())

        return await run_in_threadpool(_query)

    async def create_task(self, owner_id: str, fields: Dict[str, Any]) -> Task:
        """Create a task; the title is required and trimmed."""
        title = (fields.get("title") or "").strip()
        if not title:
            raise ValueError("Task title is required")

        priority = fields.get("priority") or TaskPriority.MEDIUM.value
        if priority not in PRIORITY_VALUES:
            raise ValueError(f"Priority must be one of: {', '.join(PRIORITY_VALUES)}")

        status = fields.get("status") or TaskStatus.PENDING.value
        if status not in STATUS_VALUES:
            raise ValueError(f"Status must be one of: {', '.join(STATUS_VALUES)}")

        now = datetime.now(timezone.utc)
        task = Task(
            user_id=owner_id,
            title=title,
            description=(fields.get("description") or "").strip(),
            status=status,
            priority=priority,
            due_date=parse_datetime(fields.get("due_date")),
            category=(fields.get("category") or "").strip(),
            project=(fields.get("project") or "").strip(),
            completed=parse_bool(fields.get("completed", False)),
            created_at=now,
            updated_at=now
        )

        def _insert() -> Task:
            with Session(self.engine) as session:
                session.add(task)
                session.commit()
                session.refresh(task)
                return task

        return await run_in_threadpool(_insert)

    async def update_task_priority(self, owner_id: str, task_id: int, priority: str) -> Optional[Task]:
        """Set a task's priority; ``None`` when the owner has no such task."""
        if priority not in PRIORITY_VALUES:
            raise ValueError(f"Priority must be one of: {', '.join(PRIORITY_VALUES)}")

        statement = (
            select(Task)
            .where(Task.id == task_id)
            .where(Task.user_id == owner_id)
        )

        def _update() -> Optional[Task]:
            with Session(self.engine) as session:
                task = session.exec(statement).first()
                if not task:
                    return None

                task.priority = priority
                task.updated_at = datetime.now(timezone.utc)
                session.add(task)
                session.commit()
                session.refresh(task)
                return task

        return await run_in_threadpool(_update)
