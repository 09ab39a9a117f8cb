"""Operation, context and tool names shared by the engine wiring and the agents."""

TASK_SUGGESTER = "task_suggester"
TASK_SUMMARIZER = "task_summarizer"
TASK_PRIORITIZER = "task_prioritizer"

CONTEXT_TASK = "task"
CONTEXT_SUMMARY = "summary"
CONTEXT_PRIORITY = "priority"

TOOL_GET_TASKS = "get_tasks"
TOOL_CREATE_TASK = "create_task"
TOOL_UPDATE_TASK_PRIORITY = "update_task_priority"
