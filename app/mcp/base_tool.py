"""
MCP Base Tool Interface

Provides base functionality for all MCP tools including:
- User ID validation
- Audit logging
- Standardized success/error payloads
"""

from typing import Any, Dict, Optional
from abc import ABC, abstractmethod
import logging

from app.mcp.errors import MCPToolError

logger = logging.getLogger(__name__)

REDACTED_PARAMS = ('password', 'token', 'secret')


class BaseMCPTool(ABC):
    """
    Base class for all MCP tools

    Tools act on the task repository and are always scoped to one owner.
    """

    name: str = ""

    def __init__(self, repository):
        self.repository = repository

    def validate_user_id(self, user_id: Any) -> None:
        """
        Validate that user_id is provided and non-empty

        Raises:
            MCPToolError: If user_id is invalid
        """
        if not user_id or not isinstance(user_id, str):
            logger.error("MCP tool called without valid user_id")
            raise MCPToolError(
                code="UNAUTHORIZED",
                message="Invalid or missing user_id",
                details={"field": "user_id"}
            )

    def log_tool_invocation(self, user_id: str, params: Dict[str, Any]) -> None:
        """Log MCP tool invocation for audit trail (sensitive keys redacted)"""
        safe_params = {k: v for k, v in params.items() if k not in REDACTED_PARAMS}

        logger.info(
            f"MCP Tool Invocation: {self.name} | User: {user_id} | Params: {safe_params}"
        )

    @abstractmethod
    async def execute(self, **kwargs) -> Dict[str, Any]:
        """
        Execute the tool logic

        Args:
            **kwargs: Tool-specific parameters (must include user_id)

        Returns:
            Tool execution result
        """


def create_error_response(error: MCPToolError) -> Dict[str, Any]:
    """Standardized error payload"""
    return {
        "success": False,
        "error": {
            "code": error.code,
            "message": error.message,
            "details": error.details
        }
    }


def create_success_response(data: Any, message: Optional[str] = None) -> Dict[str, Any]:
    """Standardized success payload"""
    response = {
        "success": True,
        "data": data
    }

    if message:
        response["message"] = message

    return response
