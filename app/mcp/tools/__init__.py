"""MCP tool registry and the task tools exposed to models."""
