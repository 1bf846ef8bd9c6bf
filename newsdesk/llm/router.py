"""
Model Router - cost-optimized model selection.

Routes a task to the cheapest capable model whose provider has a
credential, and accounts for the cost of every completion.
"""

import logging
from enum import Enum
from typing import Optional

import httpx
from pydantic import BaseModel

from .base import CompletionProvider, CompletionRequest, CompletionResponse
from ..config.settings import PROVIDER_ENV_VARS, Settings
from ..exceptions import ProviderUnavailableError

logger = logging.getLogger(__name__)

CHEAPEST = "cheapest"


class Complexity(str, Enum):
    TRIVIAL = "trivial"
    QUICK = "quick"
    STANDARD = "standard"
    COMPLEX = "complex"


class ModelConfig(BaseModel):
    provider: str
    model: str
    input_cost_per_1m: float
    output_cost_per_1m: float
    max_context: int


class RouteResult(BaseModel):
    provider: str
    model_name: str
    config: ModelConfig
    complexity: Complexity
    reason: str


DEFAULT_MODELS: dict[str, ModelConfig] = {
    "kimi-8k": ModelConfig(
        provider="kimi",
        model="moonshot-v1-8k",
        input_cost_per_1m=0.15,
        output_cost_per_1m=0.6,
        max_context=8000,
    ),
    "kimi-32k": ModelConfig(
        provider="kimi",
        model="moonshot-v1-32k",
        input_cost_per_1m=0.3,
        output_cost_per_1m=1.2,
        max_context=32000,
    ),
    "gemini-flash": ModelConfig(
        provider="gemini",
        model="gemini-2.0-flash",
        input_cost_per_1m=0.1,
        output_cost_per_1m=0.4,
        max_context=1_000_000,
    ),
    "llama-70b": ModelConfig(
        provider="openrouter",
        model="meta-llama/llama-3.3-70b-instruct",
        input_cost_per_1m=0.5,
        output_cost_per_1m=0.75,
        max_context=128000,
    ),
    "claude-haiku": ModelConfig(
        provider="openrouter",
        model="anthropic/claude-3.5-haiku",
        input_cost_per_1m=0.8,
        output_cost_per_1m=4.0,
        max_context=200000,
    ),
}

DEFAULT_ROUTING: dict[Complexity, list[str]] = {
    Complexity.TRIVIAL: ["kimi-8k", "gemini-flash"],
    Complexity.QUICK: ["kimi-8k", "gemini-flash", "llama-70b"],
    Complexity.STANDARD: ["kimi-32k", "llama-70b", "claude-haiku"],
    Complexity.COMPLEX: ["claude-haiku", "llama-70b", "kimi-32k"],
}


def estimate_cost(input_tokens: int, output_tokens: int, config: ModelConfig) -> float:
    return (
        input_tokens / 1_000_000 * config.input_cost_per_1m
        + output_tokens / 1_000_000 * config.output_cost_per_1m
    )


class ModelRouter:
    """
    Routes completions across providers.

    Providers are injected by name ("kimi", "openrouter", "gemini"); a
    provider counts as available only when it reports a credential.
    """

    def __init__(
        self,
        providers: dict[str, CompletionProvider],
        models: Optional[dict[str, ModelConfig]] = None,
        routing: Optional[dict[Complexity, list[str]]] = None,
    ):
        self.providers = providers
        self.models = models or dict(DEFAULT_MODELS)
        self.routing = routing or dict(DEFAULT_ROUTING)
        self.total_cost = 0.0
        self.cost_by_model: dict[str, float] = {}

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        client: Optional[httpx.AsyncClient] = None,
    ) -> "ModelRouter":
        """Build providers for every credential present in settings."""
        from .gemini_provider import GeminiProvider
        from .openai_compatible import KIMI_BASE_URL, OPENROUTER_BASE_URL, OpenAICompatibleProvider

        credentials = settings.provider_credentials()
        timeout = settings.model_timeout_seconds
        providers: dict[str, CompletionProvider] = {
            "kimi": OpenAICompatibleProvider(
                "kimi", KIMI_BASE_URL, credentials["kimi"], client=client, timeout=timeout,
            ),
            "openrouter": OpenAICompatibleProvider(
                "openrouter",
                OPENROUTER_BASE_URL,
                credentials["openrouter"],
                client=client,
                extra_headers={"X-Title": "Newsdesk"},
                timeout=timeout,
            ),
            "gemini": GeminiProvider(credentials["gemini"], timeout=timeout),
        }
        return cls(providers)

    def is_available(self, model_name: str) -> bool:
        config = self.models.get(model_name)
        if config is None:
            return False
        provider = self.providers.get(config.provider)
        return provider is not None and provider.is_configured

    def available_models(self) -> list[str]:
        return [name for name in self.models if self.is_available(name)]

    def route(
        self,
        complexity: Complexity = Complexity.STANDARD,
        preferred_model: Optional[str] = None,
    ) -> RouteResult:
        """
        Pick a model.

        Order: preferred model, routing candidates for the complexity,
        then the cheapest available model.

        Raises:
            ProviderUnavailableError: if no provider has a credential
        """
        if preferred_model:
            if self.is_available(preferred_model):
                return self._result(preferred_model, complexity, "User specified model")
            logger.warning(f"Preferred model {preferred_model} unavailable, routing by complexity")

        for model_name in self.routing.get(complexity, self.routing[Complexity.STANDARD]):
            if self.is_available(model_name):
                return self._result(model_name, complexity, f"Routed for {complexity.value} complexity")

        return self.route_cheapest(complexity, "Fallback to cheapest available")

    def route_cheapest(
        self,
        complexity: Complexity = Complexity.QUICK,
        reason: str = "Cheapest requested",
    ) -> RouteResult:
        """Cheapest available model by input cost."""
        available = self.available_models()
        if not available:
            raise ProviderUnavailableError(PROVIDER_ENV_VARS)
        cheapest = min(available, key=lambda name: self.models[name].input_cost_per_1m)
        return self._result(cheapest, complexity, reason)

    def _result(self, model_name: str, complexity: Complexity, reason: str) -> RouteResult:
        config = self.models[model_name]
        return RouteResult(
            provider=config.provider,
            model_name=model_name,
            config=config,
            complexity=complexity,
            reason=reason,
        )

    async def complete(self, request: CompletionRequest) -> CompletionResponse:
        """
        Route and run a completion.

        Raises:
            ProviderUnavailableError: if no model can be routed
            ProviderError: if the provider call fails
        """
        if request.model == CHEAPEST:
            route = self.route_cheapest()
        else:
            route = self.route(preferred_model=request.model)

        provider = self.providers[route.provider]
        response = await provider.complete(route.config.model, request)

        cost = estimate_cost(response.input_tokens, response.output_tokens, route.config)
        self.total_cost += cost
        self.cost_by_model[route.model_name] = self.cost_by_model.get(route.model_name, 0.0) + cost

        logger.debug(
            f"{route.model_name}: {response.input_tokens} in / {response.output_tokens} out, "
            f"${cost:.6f} ({route.reason})"
        )

        return CompletionResponse(
            content=response.content,
            cost=cost,
            model=route.model_name,
            input_tokens=response.input_tokens,
            output_tokens=response.output_tokens,
        )
