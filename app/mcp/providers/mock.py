"""
Mock model handler

Deterministic provider that is always registered so the AI endpoints work
without any external configuration. Output depends only on the envelope.
"""

from typing import Any, Dict
import json

from app.mcp.engine import PromptEnvelope, ResponseFormat
from app.mcp.operations import TASK_PRIORITIZER, TASK_SUGGESTER, TASK_SUMMARIZER
from app.mcp.providers.base import ModelHandler

MOCK_SUBTASKS = {
    "subtasks": [
        "Research and plan",
        "Execute main task",
        "Review and refine",
        "Complete and document",
    ]
}
MOCK_SUMMARY = {
    "summary": "You have several pending tasks. Focus on high-priority items with upcoming deadlines."
}
MOCK_PRIORITY = {
    "taskTitle": "Complete high-priority task",
    "reason": "This task has the earliest deadline and highest priority.",
}
MOCK_TEXT = "Mock AI response"

CANNED_RESPONSES: Dict[str, Dict[str, Any]] = {
    TASK_SUGGESTER: MOCK_SUBTASKS,
    TASK_SUMMARIZER: MOCK_SUMMARY,
    TASK_PRIORITIZER: MOCK_PRIORITY,
}


class MockHandler(ModelHandler):
    """Canned responses keyed by operation, with keyword matching for anything else"""

    provider_name = "mock"

    async def generate(self, envelope: PromptEnvelope, model: str, **params: Any) -> str:
        if envelope.response_format == ResponseFormat.TEXT:
            return MOCK_TEXT

        canned = CANNED_RESPONSES.get(envelope.operation)
        if canned is None:
            canned = self._match_prompt(envelope.text.lower())
        return json.dumps(canned)

    @staticmethod
    def _match_prompt(prompt: str) -> Dict[str, Any]:
        if "subtask" in prompt:
            return MOCK_SUBTASKS
        if "summarize" in prompt or "summary" in prompt:
            return MOCK_SUMMARY
        if "priority" in prompt or "next action" in prompt:
            return MOCK_PRIORITY
        return {"text": MOCK_TEXT}
