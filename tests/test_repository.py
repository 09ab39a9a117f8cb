"""
Tests for the SQLModel task repository, the context builders and the task
MCP tools, against an in-memory SQLite database.
"""
import pytest
from datetime import datetime, timezone

from fastapi.concurrency import run_in_threadpool

import app.services.task_repository as repository_module
from app.agents.main_agent import TaskAIAgent
from app.mcp.context.builders import TaskContextBuilders, register_context_builders
from app.mcp.engine import MCPEngine
from app.mcp.errors import MCPToolError
from app.mcp.tools.task_tools import register_task_tools
from app.services.task_projection import due_date_of
from app.services.task_repository import parse_datetime

PAST = datetime(2020, 1, 1, 12, 0, tzinfo=timezone.utc)
SOON = datetime(2999, 1, 1, 12, 0, tzinfo=timezone.utc)
LATER = datetime(2999, 6, 1, 12, 0, tzinfo=timezone.utc)


async def _seed(repository, owner_id):
    """Four tasks for the owner and one for another user."""
    await repository.create_task(owner_id, {"title": "Overdue report", "priority": "low", "due_date": PAST})
    await repository.create_task(owner_id, {"title": "Book venue", "priority": "urgent"})
    await repository.create_task(owner_id, {"title": "Call supplier", "priority": "high", "due_date": LATER,
                                            "category": "work", "project": "launch"})
    await repository.create_task(owner_id, {"title": "Done already", "priority": "medium", "due_date": SOON,
                                            "status": "completed", "completed": True})
    await repository.create_task("user-2", {"title": "Someone else's task", "priority": "urgent"})


# --- Repository ---

class TestTaskRepository:
    """Tests for TaskRepository queries and writes."""

    @pytest.mark.asyncio
    async def test_create_task_strips_and_defaults(self, task_repository, user_id):
        task = await task_repository.create_task(user_id, {"title": "  Write docs  ", "description": " draft "})

        assert task.id is not None
        assert task.title == "Write docs"
        assert task.description == "draft"
        assert task.priority == "medium"
        assert task.status == "pending"
        assert task.completed is False

    @pytest.mark.asyncio
    async def test_create_task_parses_iso_due_date(self, task_repository, user_id):
        task = await task_repository.create_task(user_id, {"title": "T", "due_date": "2999-01-01T12:00:00Z"})
        assert due_date_of(task) == SOON

    @pytest.mark.asyncio
    async def test_create_task_stores_aware_timestamps(self, task_repository, user_id):
        task = await task_repository.create_task(
            user_id, {"title": "Write", "due_date": "2026-03-05T12:00:00+02:00"}
        )

        assert due_date_of(task) == datetime(2026, 3, 5, 10, 0, tzinfo=timezone.utc)
        stored = await task_repository.find_tasks_by_owner(user_id, {"id": task.id})
        assert stored[0].title == "Write"

    def test_parse_datetime_returns_aware_utc(self):
        assert parse_datetime("2026-03-05T12:00:00+02:00") == datetime(2026, 3, 5, 10, 0, tzinfo=timezone.utc)
        assert parse_datetime(datetime(2026, 3, 5, 10, 0)).tzinfo == timezone.utc
        assert parse_datetime("") is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize("fields", [
        {"title": "   "},
        {"title": "T", "priority": "critical"},
        {"title": "T", "status": "archived"},
    ])
    async def test_create_task_rejects_invalid_fields(self, task_repository, user_id, fields):
        with pytest.raises(ValueError):
            await task_repository.create_task(user_id, fields)

    @pytest.mark.asyncio
    async def test_find_is_scoped_to_owner(self, task_repository, user_id):
        await _seed(task_repository, user_id)

        tasks = await task_repository.find_tasks_by_owner(user_id)

        assert len(tasks) == 4
        assert all(task.user_id == user_id for task in tasks)

    @pytest.mark.asyncio
    async def test_filters(self, task_repository, user_id):
        await _seed(task_repository, user_id)

        pending = await task_repository.find_tasks_by_owner(user_id, {"completed": False})
        work = await task_repository.find_tasks_by_owner(user_id, {"category": "work", "project": "launch"})
        urgent = await task_repository.find_tasks_by_owner(user_id, {"priority": "urgent"})

        assert len(pending) == 3
        assert [task.title for task in work] == ["Call supplier"]
        assert [task.title for task in urgent] == ["Book venue"]

    @pytest.mark.asyncio
    async def test_due_range_is_inclusive(self, task_repository, user_id):
        await _seed(task_repository, user_id)

        exact = await task_repository.find_tasks_by_owner(user_id, {"due_from": LATER, "due_to": LATER})
        window = await task_repository.find_tasks_by_owner(
            user_id, {"due_from": PAST, "due_to": SOON}, sort=[("due_date", "asc")]
        )
        after = await task_repository.find_tasks_by_owner(user_id, {"due_from": "2999-01-01T12:00:00Z"})

        assert [task.title for task in exact] == ["Call supplier"]
        assert [task.title for task in window] == ["Overdue report", "Done already"]
        assert sorted(task.title for task in after) == ["Call supplier", "Done already"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("value,expected", [("false", 3), ("TRUE", 1), (False, 3), (True, 1)])
    async def test_completed_filter_accepts_strings(self, task_repository, user_id, value, expected):
        await _seed(task_repository, user_id)
        assert len(await task_repository.find_tasks_by_owner(user_id, {"completed": value})) == expected

    @pytest.mark.asyncio
    async def test_completed_filter_rejects_other_values(self, task_repository, user_id):
        with pytest.raises(ValueError):
            await task_repository.find_tasks_by_owner(user_id, {"completed": "maybe"})

    @pytest.mark.asyncio
    async def test_queries_run_in_threadpool(self, task_repository, user_id, monkeypatch):
        calls = []

        async def spy(func, *args, **kwargs):
            calls.append(func.__name__)
            return await run_in_threadpool(func, *args, **kwargs)

        monkeypatch.setattr(repository_module, "run_in_threadpool", spy)

        await task_repository.create_task(user_id, {"title": "T"})
        await task_repository.count_tasks_by_owner(user_id)

        assert calls == ["_insert", "_query"]

    @pytest.mark.asyncio
    async def test_sort_by_priority_then_due_date(self, task_repository, user_id):
        await _seed(task_repository, user_id)

        tasks = await task_repository.find_tasks_by_owner(
            user_id, {"completed": False}, sort=[("priority", "desc"), ("due_date", "asc")]
        )

        assert [task.title for task in tasks] == ["Book venue", "Call supplier", "Overdue report"]

    @pytest.mark.asyncio
    async def test_sort_by_due_date_puts_undated_last(self, task_repository, user_id):
        await _seed(task_repository, user_id)

        tasks = await task_repository.find_tasks_by_owner(
            user_id, {"completed": False}, sort=[("due_date", "asc"), ("priority", "desc")]
        )

        assert [task.title for task in tasks] == ["Overdue report", "Call supplier", "Book venue"]

    @pytest.mark.asyncio
    async def test_limit(self, task_repository, user_id):
        await _seed(task_repository, user_id)
        assert len(await task_repository.find_tasks_by_owner(user_id, limit=2)) == 2

    @pytest.mark.asyncio
    async def test_unknown_sort_field_raises(self, task_repository, user_id):
        with pytest.raises(ValueError):
            await task_repository.find_tasks_by_owner(user_id, sort=[("owner", "asc")])

    @pytest.mark.asyncio
    async def test_counts(self, task_repository, user_id):
        await _seed(task_repository, user_id)

        assert await task_repository.count_tasks_by_owner(user_id) == 4
        assert await task_repository.count_tasks_by_owner(user_id, {"completed": True}) == 1
        overdue = await task_repository.count_tasks_by_owner(
            user_id, {"completed": False, "overdue_as_of": datetime(2026, 3, 1, tzinfo=timezone.utc)}
        )
        assert overdue == 1

    @pytest.mark.asyncio
    async def test_update_task_priority(self, task_repository, user_id):
        task = await task_repository.create_task(user_id, {"title": "T"})

        updated = await task_repository.update_task_priority(user_id, task.id, "urgent")

        assert updated.priority == "urgent"
        assert updated.updated_at >= task.updated_at

    @pytest.mark.asyncio
    async def test_update_task_priority_of_other_owner_returns_none(self, task_repository, user_id):
        task = await task_repository.create_task("user-2", {"title": "Not yours"})
        assert await task_repository.update_task_priority(user_id, task.id, "high") is None

    @pytest.mark.asyncio
    async def test_update_task_priority_rejects_unknown_value(self, task_repository, user_id):
        task = await task_repository.create_task(user_id, {"title": "T"})
        with pytest.raises(ValueError):
            await task_repository.update_task_priority(user_id, task.id, "asap")


# --- User Directory ---

class TestUserDirectory:

    @pytest.mark.asyncio
    async def test_find_user_by_id(self, user_directory, user_id):
        assert await user_directory.find_user_by_id(user_id) == {"display_name": "Ada", "role": "admin"}

    @pytest.mark.asyncio
    async def test_display_name_falls_back_to_email(self, user_directory, user_id):
        assert await user_directory.find_user_by_id("user-2") == {
            "display_name": "bob@example.com",
            "role": "user",
        }

    @pytest.mark.asyncio
    async def test_unknown_user(self, user_directory, user_id):
        assert await user_directory.find_user_by_id("nobody") is None


# --- Context Builders ---

class TestContextBuilders:
    """Tests for the task, summary and priority context builders."""

    @pytest.fixture
    def builders(self, task_repository, user_directory) -> TaskContextBuilders:
        return TaskContextBuilders(task_repository, user_directory)

    @pytest.mark.asyncio
    async def test_task_context(self, builders, task_repository, user_id):
        await _seed(task_repository, user_id)
        current = await task_repository.create_task(user_id, {"title": "Current one"})

        context = await builders.build_task_context({"user_id": user_id, "task_id": current.id})

        assert context["user"] == {"display_name": "Ada", "role": "admin"}
        assert context["current_task"]["title"] == "Current one"
        assert len(context["recent_tasks"]) == 5
        assert "completed" in context["recent_tasks"][0]
        assert context["task_stats"] == {"total": 5, "completed": 1, "pending": 4, "overdue": 1}

    @pytest.mark.asyncio
    async def test_task_context_without_history(self, builders, task_repository, user_id):
        await _seed(task_repository, user_id)

        context = await builders.build_task_context({"user_id": user_id, "include_history": False})

        assert context["recent_tasks"] == []
        assert context["current_task"] is None

    @pytest.mark.asyncio
    async def test_task_context_ignores_other_owners_task(self, builders, task_repository, user_id):
        foreign = await task_repository.create_task("user-2", {"title": "Not yours"})

        context = await builders.build_task_context({"user_id": user_id, "task_id": foreign.id})

        assert context["current_task"] is None

    @pytest.mark.asyncio
    async def test_task_context_limits_recent_tasks(self, builders, task_repository, user_id):
        for index in range(12):
            await task_repository.create_task(user_id, {"title": f"Task {index}"})

        context = await builders.build_task_context({"user_id": user_id})

        assert len(context["recent_tasks"]) == 10

    @pytest.mark.asyncio
    async def test_summary_context(self, builders, task_repository, user_id):
        await _seed(task_repository, user_id)

        context = await builders.build_summary_context({"user_id": user_id})

        assert context["count"] == 3
        assert [task["title"] for task in context["pending_tasks"]] == [
            "Book venue", "Call supplier", "Overdue report"
        ]
        assert "id" not in context["pending_tasks"][0]
        assert "user_id" not in context["pending_tasks"][0]

    @pytest.mark.asyncio
    async def test_priority_context(self, builders, task_repository, user_id):
        await _seed(task_repository, user_id)

        context = await builders.build_priority_context({"user_id": user_id})

        assert [task["title"] for task in context["tasks"]] == [
            "Overdue report", "Call supplier", "Book venue"
        ]
        assert context["tasks"][0]["due_date"] == "2020-01-01T12:00:00+00:00"

    @pytest.mark.asyncio
    async def test_registered_builders_run_through_engine(self, task_repository, user_directory, user_id):
        engine = MCPEngine()
        register_context_builders(engine, task_repository, user_directory)

        assert sorted(engine.contexts.list()) == ["priority", "summary", "task"]
        context = await engine.build_context("summary", {"user_id": user_id})
        assert context == {"pending_tasks": [], "count": 0}

    @pytest.mark.asyncio
    async def test_subtasks_with_stored_tasks_reach_the_model(
        self, recording_engine, metrics, task_repository, user_directory, user_id
    ):
        await _seed(task_repository, user_id)
        engine, handler = recording_engine(response={"subtasks": ["Outline", "Draft"]})
        register_context_builders(engine, task_repository, user_directory)

        result = await TaskAIAgent(engine, metrics=metrics).suggest_subtasks("Write docs", user_id=user_id)

        assert result == ["Outline", "Draft"]
        assert len(handler.calls) == 1
        prompt = handler.calls[0]["envelope"].text
        assert '"overdue": 1' in prompt
        assert '"display_name": "Ada"' in prompt
        assert metrics.get_metrics()["counters"]["mcp_fallbacks_total"] == 0


# --- Task Tools ---

class TestTaskTools:
    """Tests for the task tools executed through the engine."""

    @pytest.fixture
    def tool_engine(self, task_repository, metrics) -> MCPEngine:
        engine = MCPEngine(metrics=metrics)
        register_task_tools(engine, task_repository)
        return engine

    def test_tools_are_registered(self, tool_engine):
        names = [tool["name"] for tool in tool_engine.available_tools()]
        assert names == ["get_tasks", "create_task", "update_task_priority"]

    @pytest.mark.asyncio
    async def test_get_tasks(self, tool_engine, task_repository, user_id):
        await _seed(task_repository, user_id)

        result = await tool_engine.execute_tool(
            "get_tasks", {"user_id": user_id, "filters": {"priority": "urgent"}}
        )

        assert result["success"] is True
        assert result["data"]["count"] == 1
        assert result["data"]["tasks"][0]["title"] == "Book venue"
        assert result["message"] == "Found 1 task."

    @pytest.mark.asyncio
    async def test_get_tasks_completed_string_filter(self, tool_engine, task_repository, user_id):
        await _seed(task_repository, user_id)

        pending = await tool_engine.execute_tool("get_tasks", {"user_id": user_id, "filters": {"completed": "false"}})
        done = await tool_engine.execute_tool("get_tasks", {"user_id": user_id, "filters": {"completed": "true"}})

        assert pending["data"]["count"] == 3
        assert all(task["completed"] is False for task in pending["data"]["tasks"])
        assert [task["title"] for task in done["data"]["tasks"]] == ["Done already"]

    @pytest.mark.asyncio
    async def test_get_tasks_rejects_non_boolean_completed(self, tool_engine, user_id):
        with pytest.raises(MCPToolError) as exc_info:
            await tool_engine.execute_tool("get_tasks", {"user_id": user_id, "filters": {"completed": "maybe"}})
        assert exc_info.value.code == "VALIDATION_ERROR"
        assert exc_info.value.details == {"field": "completed", "value": "maybe"}

    @pytest.mark.asyncio
    async def test_get_tasks_rejects_unknown_filter(self, tool_engine, user_id):
        with pytest.raises(MCPToolError) as exc_info:
            await tool_engine.execute_tool("get_tasks", {"user_id": user_id, "filters": {"owner": "x"}})
        assert exc_info.value.code == "VALIDATION_ERROR"

    @pytest.mark.asyncio
    async def test_tools_require_user_id(self, tool_engine):
        with pytest.raises(MCPToolError) as exc_info:
            await tool_engine.execute_tool("get_tasks", {})
        assert exc_info.value.code == "UNAUTHORIZED"

    @pytest.mark.asyncio
    async def test_create_task(self, tool_engine, task_repository, user_id):
        result = await tool_engine.execute_tool(
            "create_task", {"user_id": user_id, "task_data": {"title": "New task", "priority": "high"}}
        )

        assert result["success"] is True
        assert result["data"]["task"]["title"] == "New task"
        assert await task_repository.count_tasks_by_owner(user_id) == 1

    @pytest.mark.asyncio
    async def test_create_task_validation_error(self, tool_engine, user_id):
        with pytest.raises(MCPToolError) as exc_info:
            await tool_engine.execute_tool("create_task", {"user_id": user_id, "task_data": {"title": ""}})
        assert exc_info.value.code == "VALIDATION_ERROR"

    @pytest.mark.asyncio
    async def test_update_task_priority(self, tool_engine, task_repository, user_id):
        task = await task_repository.create_task(user_id, {"title": "Bump me"})

        result = await tool_engine.execute_tool(
            "update_task_priority", {"user_id": user_id, "task_id": str(task.id), "priority": "urgent"}
        )

        assert result["success"] is True
        assert result["data"]["task"]["priority"] == "urgent"

    @pytest.mark.asyncio
    async def test_update_task_priority_not_found(self, tool_engine, user_id):
        result = await tool_engine.execute_tool(
            "update_task_priority", {"user_id": user_id, "task_id": 999, "priority": "low"}
        )

        assert result["success"] is False
        assert result["error"]["code"] == "NOT_FOUND"

    @pytest.mark.asyncio
    async def test_update_task_priority_invalid_priority(self, tool_engine, user_id):
        with pytest.raises(MCPToolError):
            await tool_engine.execute_tool(
                "update_task_priority", {"user_id": user_id, "task_id": 1, "priority": "asap"}
            )
