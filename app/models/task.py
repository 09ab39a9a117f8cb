"""Task model for SQLModel."""
from sqlmodel import SQLModel, Field, Relationship
from sqlalchemy import Column, String, ForeignKey
from datetime import datetime, timezone
from enum import Enum
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from app.models.user import User


class TaskStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class TaskPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


# urgent > high > medium > low
PRIORITY_RANK = {
    TaskPriority.URGENT.value: 4,
    TaskPriority.HIGH.value: 3,
    TaskPriority.MEDIUM.value: 2,
    TaskPriority.LOW.value: 1,
}


class Task(SQLModel, table=True):
    """Task entity owned by a single user."""

    id: int | None = Field(default=None, primary_key=True)
    user_id: str = Field(
        sa_column=Column(String, ForeignKey("user.id", ondelete="CASCADE"), index=True)
    )
    title: str = Field(max_length=200, min_length=1)
    description: str = Field(default="", max_length=1000)
    status: str = Field(default=TaskStatus.PENDING.value, max_length=20)
    priority: str = Field(default=TaskPriority.MEDIUM.value, max_length=20)
    due_date: Optional[datetime] = Field(default=None)
    category: str = Field(default="", max_length=100)
    project: str = Field(default="", max_length=100)
    completed: bool = Field(default=False)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    # Relationships
    user: "User" = Relationship(back_populates="tasks")
