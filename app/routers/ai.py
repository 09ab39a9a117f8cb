"""
AI Suggestion Router

Thin authenticated handlers over the task AI agent. The agent never fails
because of a model outage; errors here come from the task repository.
"""

from fastapi import APIRouter, Depends, HTTPException, Request, status
import logging

from app.agents.main_agent import TaskAIAgent
from app.middleware.auth import CurrentUser, ensure_same_user, get_current_user
from app.schemas.ai import (
    ModelsResponse,
    NextActionResponse,
    PrioritySuggestion,
    SubtaskRequest,
    SubtaskResponse,
    SummaryResponse,
)
from app.services.task_repository import TaskRepository

logger = logging.getLogger(__name__)

router = APIRouter(tags=["AI"])  # No prefix since main.py adds /api prefix

SUMMARY_TASK_LIMIT = 100
NEXT_ACTION_TASK_LIMIT = 50


def get_task_ai_agent(request: Request) -> TaskAIAgent:
    """Dependency for the agent built at startup."""
    return request.app.state.task_ai_agent


def get_task_repository(request: Request) -> TaskRepository:
    """Dependency for the task repository built at startup."""
    return request.app.state.task_repository


@router.get("/ai/models", response_model=ModelsResponse)
async def list_models(
    current_user: CurrentUser = Depends(get_current_user),
    agent: TaskAIAgent = Depends(get_task_ai_agent),
):
    """Registered models, the default selection and the advisory tools."""
    return ModelsResponse(
        models=agent.engine.available_models(),
        default_model=agent.default_model,
        tools=agent.engine.available_tools(),
    )


@router.post("/{user_id}/ai/subtasks", response_model=SubtaskResponse)
async def suggest_subtasks(
    user_id: str,
    body: SubtaskRequest,
    current_user: CurrentUser = Depends(get_current_user),
    agent: TaskAIAgent = Depends(get_task_ai_agent),
):
    """Suggest subtasks for a task description."""
    ensure_same_user(user_id, current_user)

    if not body.description:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Task description is required"
        )

    try:
        subtasks = await agent.suggest_subtasks(body.description, user_id=user_id, model=body.model)
    except Exception as e:
        logger.error(f"Suggest subtasks error: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to generate subtask suggestions"
        )

    return SubtaskResponse(subtasks=subtasks)


@router.get("/{user_id}/ai/summary", response_model=SummaryResponse)
async def summarize_tasks(
    user_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    agent: TaskAIAgent = Depends(get_task_ai_agent),
    repository: TaskRepository = Depends(get_task_repository),
):
    """Summarize the user's pending tasks."""
    ensure_same_user(user_id, current_user)

    try:
        tasks = await repository.find_tasks_by_owner(
            user_id, {"completed": False}, limit=SUMMARY_TASK_LIMIT
        )
        summary = await agent.summarize_pending_tasks(tasks, user_id=user_id)
    except Exception as e:
        logger.error(f"Summarize tasks error: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to generate summary"
        )

    return SummaryResponse(summary=summary, task_count=len(tasks))


@router.get("/{user_id}/ai/next-action", response_model=NextActionResponse)
async def suggest_next_action(
    user_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    agent: TaskAIAgent = Depends(get_task_ai_agent),
    repository: TaskRepository = Depends(get_task_repository),
):
    """Suggest which pending task to work on next."""
    ensure_same_user(user_id, current_user)

    try:
        tasks = await repository.find_tasks_by_owner(
            user_id, {"completed": False}, limit=NEXT_ACTION_TASK_LIMIT
        )
        suggestion = await agent.suggest_priority(tasks, user_id=user_id)
    except Exception as e:
        logger.error(f"Suggest next action error: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to generate priority suggestion"
        )

    return NextActionResponse(suggestion=PrioritySuggestion(**suggestion))
