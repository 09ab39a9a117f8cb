"""
MCP Error Types

Registries fail fast with named errors (configuration or programming defects).
Provider failures are wrapped in ProviderError so operation adapters can
degrade to their deterministic fallbacks.
"""

from typing import Any, Dict, Optional


class MCPError(Exception):
    """Base exception for the MCP layer"""
    code = "MCP_ERROR"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None, code: Optional[str] = None):
        self.code = code or self.code
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class UnknownModel(MCPError):
    """Raised when a request names a model that was never registered"""
    code = "UNKNOWN_MODEL"

    def __init__(self, name: str, available: Optional[list] = None):
        super().__init__(
            f"Model '{name}' not registered",
            details={"model": name, "available": available or []},
        )
        self.name = name


class UnknownTool(MCPError):
    """Raised when a tool lookup fails"""
    code = "UNKNOWN_TOOL"

    def __init__(self, name: str):
        super().__init__(f"Tool '{name}' not found", details={"tool": name})
        self.name = name


class UnknownContextBuilder(MCPError):
    """Raised when a context type has no registered builder"""
    code = "UNKNOWN_CONTEXT_BUILDER"

    def __init__(self, name: str):
        super().__init__(f"Context builder '{name}' not found", details={"context_type": name})
        self.name = name


class ProviderError(MCPError):
    """Model handler failure (network, provider, timeout)"""
    code = "PROVIDER_ERROR"

    def __init__(self, model: str, message: str):
        super().__init__(message, details={"model": model})
        self.model = model


class MCPToolError(MCPError):
    """Tool-level failure with a caller-facing code (VALIDATION_ERROR, NOT_FOUND, ...)"""

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details=details, code=code)
