"""
Structured Logging Utility.

Emits JSON log lines for MCP operation lifecycle events on top of the
standard logging module.
"""

import logging
from typing import Any
from datetime import datetime, timezone
import json


class StructuredLogger:
    """Structured logger writing one JSON object per record."""

    def __init__(self, name: str):
        """
        Initialize structured logger.

        Args:
            name: Logger name
        """
        self.logger = logging.getLogger(name)

    def _log_structured(self, level: int, message: str, **kwargs: Any):
        if self.logger.isEnabledFor(level):
            log_data = {
                "timestamp": datetime.now(timezone.utc).isoformat(),
                "level": logging.getLevelName(level),
                "message": message,
                "component": self.logger.name,
            }
            log_data.update(kwargs)

            self.logger.log(level, json.dumps(log_data, default=str))

    def debug(self, message: str, **kwargs: Any):
        self._log_structured(logging.DEBUG, message, **kwargs)

    def info(self, message: str, **kwargs: Any):
        self._log_structured(logging.INFO, message, **kwargs)

    def warning(self, message: str, **kwargs: Any):
        self._log_structured(logging.WARNING, message, **kwargs)

    def error(self, message: str, **kwargs: Any):
        self._log_structured(logging.ERROR, message, **kwargs)


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging for the API process."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    )


def get_logger(name: str) -> StructuredLogger:
    """
    Get a structured logger.

    Args:
        name: Logger name

    Returns:
        StructuredLogger instance
    """
    return StructuredLogger(name)
