"""
Model completion boundary.

Providers only need to turn a list of chat messages into text plus token
counts. Routing and cost accounting live in ModelRouter.
"""

from abc import ABC, abstractmethod
from typing import Literal, Optional

from pydantic import BaseModel, Field


class Message(BaseModel):
    role: Literal["system", "user", "assistant"]
    content: str


class CompletionRequest(BaseModel):
    """
    A chat completion request.
    `model` is a registry alias (e.g. "kimi-8k"), "cheapest", or None to route.
    """

    model: Optional[str] = None
    messages: list[Message]
    max_tokens: Optional[int] = Field(default=None, gt=0)
    temperature: Optional[float] = Field(default=None, ge=0.0, le=2.0)

    @classmethod
    def from_prompt(
        cls,
        prompt: str,
        model: Optional[str] = None,
        system: Optional[str] = None,
        **kwargs,
    ) -> "CompletionRequest":
        messages = []
        if system:
            messages.append(Message(role="system", content=system))
        messages.append(Message(role="user", content=prompt))
        return cls(model=model, messages=messages, **kwargs)

    @property
    def last_user_message(self) -> str:
        for message in reversed(self.messages):
            if message.role == "user":
                return message.content
        return ""


class ProviderResponse(BaseModel):
    """Raw provider output before cost accounting."""

    content: str
    input_tokens: int = 0
    output_tokens: int = 0


class CompletionResponse(BaseModel):
    content: str
    cost: float = 0.0
    model: str
    input_tokens: int = 0
    output_tokens: int = 0


class CompletionProvider(ABC):
    """Base class for model providers."""

    name: str = "base"

    DEFAULT_MAX_TOKENS = 2000
    DEFAULT_TEMPERATURE = 0.7

    @property
    @abstractmethod
    def is_configured(self) -> bool:
        """Whether a credential is available."""

    @abstractmethod
    async def complete(self, model: str, request: CompletionRequest) -> ProviderResponse:
        """
        Run one completion against the provider's model id.

        Raises:
            ProviderError: on an error response
        """
