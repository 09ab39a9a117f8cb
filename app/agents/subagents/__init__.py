"""
Agent Subagents Package

Each subagent wraps one MCP operation and owns its input guards, result
validation and deterministic fallback.
"""
