"""Pytest fixtures for the task AI layer tests."""
import json
import pytest
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List

from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from app.models.user import User
from app.models.task import Task  # noqa: F401
from app.mcp.engine import MCPEngine, PromptEnvelope
from app.mcp.providers.mock import MockHandler
from app.services.task_repository import TaskRepository
from app.services.user_directory import UserDirectory
from app.utils.metrics import MetricsCollector


class RecordingHandler:
    """Model handler double that records every call."""

    def __init__(self, response: Any = None, error: Exception = None):
        self.response = response
        self.error = error
        self.calls: List[Dict[str, Any]] = []

    async def __call__(self, envelope: PromptEnvelope, model: str, **params) -> str:
        self.calls.append({"envelope": envelope, "model": model, "params": params})
        if self.error is not None:
            raise self.error
        if isinstance(self.response, dict):
            return json.dumps(self.response)
        return self.response


class SpyContextBuilder:
    """Context builder double that counts invocations."""

    def __init__(self, context: Dict[str, Any] = None):
        self.context = context if context is not None else {"user": {"display_name": "Ada"}}
        self.calls: List[Dict[str, Any]] = []

    async def __call__(self, params: Dict[str, Any]) -> Dict[str, Any]:
        self.calls.append(params)
        return self.context


# --- Engine Fixtures ---

@pytest.fixture
def metrics() -> MetricsCollector:
    """Isolated metrics collector."""
    return MetricsCollector()


@pytest.fixture
def engine(metrics) -> MCPEngine:
    """Engine with only the deterministic mock model registered."""
    mcp_engine = MCPEngine(metrics=metrics)
    mcp_engine.register_model("mock:default", "mock", MockHandler())
    return mcp_engine


@pytest.fixture
def recording_engine(metrics):
    """Factory for an engine whose only model is a RecordingHandler."""
    def _create(response: Any = None, error: Exception = None, name: str = "mock:default"):
        handler = RecordingHandler(response=response, error=error)
        mcp_engine = MCPEngine(metrics=metrics)
        mcp_engine.register_model(name, name.split(":")[0], handler)
        return mcp_engine, handler
    return _create


# --- Database Fixtures ---

@pytest.fixture
def db_engine():
    """In-memory SQLite database shared across sessions."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def user_id(db_engine) -> str:
    with Session(db_engine) as session:
        session.add(User(id="user-1", email="ada@example.com", name="Ada", role="admin"))
        session.add(User(id="user-2", email="bob@example.com"))
        session.commit()
    return "user-1"


@pytest.fixture
def task_repository(db_engine) -> TaskRepository:
    return TaskRepository(db_engine)


@pytest.fixture
def user_directory(db_engine) -> UserDirectory:
    return UserDirectory(db_engine)


@pytest.fixture
def now() -> datetime:
    return datetime(2026, 3, 1, 9, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def sample_tasks(now) -> List[Dict[str, Any]]:
    """Plain task mappings as handed over by the request handlers."""
    return [
        {"title": "Write report", "description": "Quarterly numbers", "priority": "high",
         "status": "pending", "due_date": now + timedelta(days=10)},
        {"title": "Book venue", "priority": "urgent", "status": "pending", "due_date": None},
        {"title": "Call supplier", "priority": "low", "status": "pending",
         "due_date": now + timedelta(days=2)},
    ]
