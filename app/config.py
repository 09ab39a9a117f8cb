"""Application settings for the task AI layer."""
from dataclasses import dataclass
from typing import Optional
import os
from dotenv import load_dotenv

load_dotenv()


def _optional_float(value: Optional[str]) -> Optional[float]:
    if value is None or value.strip() == "":
        return None
    seconds = float(value)
    return seconds if seconds > 0 else None


@dataclass
class AISettings:
    """Provider credentials and engine options read from the environment."""
    openai_api_key: Optional[str] = None
    gemini_api_key: Optional[str] = None
    cohere_api_key: Optional[str] = None
    ai_provider: str = "openai"  # preferred provider family prefix
    handler_timeout: Optional[float] = None  # seconds, wraps model handler calls only
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "AISettings":
        return cls(
            openai_api_key=os.environ.get("OPENAI_API_KEY") or None,
            gemini_api_key=os.environ.get("GEMINI_API_KEY") or None,
            cohere_api_key=os.environ.get("COHERE_API_KEY") or None,
            ai_provider=os.environ.get("AI_PROVIDER", "openai"),
            handler_timeout=_optional_float(os.environ.get("MCP_HANDLER_TIMEOUT")),
            log_level=os.environ.get("LOG_LEVEL", "INFO"),
        )


def get_settings() -> AISettings:
    return AISettings.from_env()
