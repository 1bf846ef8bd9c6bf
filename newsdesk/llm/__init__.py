"""Model routing and completion providers."""

from .base import (
    CompletionProvider,
    CompletionRequest,
    CompletionResponse,
    Message,
    ProviderResponse,
)
from .router import (
    CHEAPEST,
    DEFAULT_MODELS,
    DEFAULT_ROUTING,
    Complexity,
    ModelConfig,
    ModelRouter,
    RouteResult,
    estimate_cost,
)

__all__ = [
    "CompletionProvider",
    "CompletionRequest",
    "CompletionResponse",
    "Message",
    "ProviderResponse",
    "CHEAPEST",
    "DEFAULT_MODELS",
    "DEFAULT_ROUTING",
    "Complexity",
    "ModelConfig",
    "ModelRouter",
    "RouteResult",
    "estimate_cost",
]
