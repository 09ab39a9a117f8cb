"""Request/response schemas for the AI suggestion endpoints."""
from pydantic import BaseModel, Field
from typing import Dict, List, Optional


class SubtaskRequest(BaseModel):
    """Body for subtask suggestions."""
    description: Optional[str] = Field(None, max_length=1000)
    model: Optional[str] = None  # explicit model name, e.g. "mock:default"


class SubtaskResponse(BaseModel):
    success: bool = True
    subtasks: List[str]


class SummaryResponse(BaseModel):
    success: bool = True
    summary: str
    task_count: int


class PrioritySuggestion(BaseModel):
    """Either a recommendation (task_title + reason) or a message."""
    task_title: Optional[str] = None
    reason: Optional[str] = None
    message: Optional[str] = None


class NextActionResponse(BaseModel):
    success: bool = True
    suggestion: PrioritySuggestion


class ModelsResponse(BaseModel):
    models: List[str]
    default_model: str
    tools: List[Dict[str, str]]
