"""Routers package for the task AI backend."""

from .ai import router as ai_router

__all__ = ["ai_router"]
