"""
MCP Model Registry

Holds the provider bindings available to the engine, keyed by
``provider:variant`` names, plus the default-model selection policy used by
the operation adapters.
"""

from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Mapping
import logging

from app.mcp.errors import UnknownModel

logger = logging.getLogger(__name__)

MOCK_PROVIDER = "mock"
MOCK_MODEL = "mock:default"

# (envelope, model_name, **default_params) -> raw text
HandlerFn = Callable[..., Awaitable[str]]


@dataclass(frozen=True)
class ModelBinding:
    """A registered model: name, provider family, handler and default params"""
    name: str
    provider: str
    handler: HandlerFn
    default_params: Mapping[str, Any] = field(default_factory=dict)


class ModelRegistry:
    """
    Registry of model bindings

    Names are unique; registering an existing name overwrites the binding but
    keeps its original position in the listing order.
    """

    def __init__(self):
        self._models: Dict[str, ModelBinding] = {}

    def register(self, binding: ModelBinding) -> None:
        """Register (or overwrite) a model binding"""
        if binding.name in self._models:
            logger.warning(f"Model {binding.name} already registered, overwriting")

        self._models[binding.name] = binding
        logger.info(f"Registered model: {binding.name} (provider={binding.provider})")

    def resolve(self, name: str) -> ModelBinding:
        """Get a registered binding or raise UnknownModel"""
        if name not in self._models:
            raise UnknownModel(name, available=self.list())
        return self._models[name]

    def list(self) -> List[str]:
        """Registered model names in registration order"""
        return list(self._models.keys())

    def __contains__(self, name: str) -> bool:
        return name in self._models

    def __len__(self) -> int:
        return len(self._models)


def select_default_model(registry: ModelRegistry, preference: str) -> str:
    """
    Pick the model the adapters use when none is given.

    1. first registered name starting with ``preference`` (an empty preference
       matches the first registered name)
    2. first registered name outside the mock family
    3. the first registered mock model, or ``mock:default`` on an empty registry
    """
    names = registry.list()

    for name in names:
        if name.startswith(preference or ""):
            return name

    for name in names:
        if not name.startswith(f"{MOCK_PROVIDER}:"):
            return name

    return names[0] if names else MOCK_MODEL
