"""
AI Agents Package

- Skills: deterministic helpers (fallback heuristics)
- Subagents: one per AI operation (subtasks, summary, priority)
- Main Agent: facade the request handlers call
"""
