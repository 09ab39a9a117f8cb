"""
Agent Skills Package

Reusable, side-effect free helpers used by the subagents.
"""
