"""MCP context builder registry and the task context builders."""
