"""User model for SQLModel."""
from sqlmodel import SQLModel, Field, Relationship
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Optional
import uuid

if TYPE_CHECKING:
    from app.models.task import Task


def _new_user_id() -> str:
    return str(uuid.uuid4())


class User(SQLModel, table=True):
    """Task owner as seen by the AI context builders (read-only here)."""

    id: str = Field(default_factory=_new_user_id, primary_key=True, index=True)
    email: str = Field(unique=True, index=True, max_length=255)
    name: Optional[str] = Field(default=None, max_length=255)
    role: str = Field(default="user", max_length=50)  # e.g. "user", "admin"
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    tasks: list["Task"] = Relationship(
        back_populates="user",
        sa_relationship_kwargs={"cascade": "all, delete-orphan"}
    )

    @property
    def display_name(self) -> str:
        return self.name or self.email
