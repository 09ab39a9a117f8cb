"""User directory consumed by the MCP context builders."""
from fastapi.concurrency import run_in_threadpool
from sqlmodel import Session
from sqlalchemy.engine import Engine
from typing import Dict, Optional

from app.models.user import User


class UserDirectory:
    """Read-only user lookups."""

    def __init__(self, engine: Engine):
        self.engine = engine

    async def find_user_by_id(self, user_id: str) -> Optional[Dict[str, str]]:
        """Display name and role for ``user_id``, or ``None`` if unknown."""
        def _lookup() -> Optional[Dict[str, str]]:
            with Session(self.engine) as session:
                user = session.get(User, user_id)
                if not user:
                    return None

                return {
                    "display_name": user.display_name,
                    "role": user.role
                }

        return await run_in_threadpool(_lookup)
