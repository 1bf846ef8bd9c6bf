"""Gemini provider using the google-genai async client."""

import asyncio
import logging
from typing import Optional

import httpx
from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from .base import CompletionProvider, CompletionRequest, ProviderResponse
from ..exceptions import ProviderError

logger = logging.getLogger(__name__)


class GeminiProvider(CompletionProvider):
    """
    Gemini via google-genai.
    System messages become the system instruction; assistant turns map to
    the "model" role.
    """

    name = "gemini"

    def __init__(
        self,
        api_key: str,
        client: Optional[genai.Client] = None,
        timeout: float = 60.0,
    ):
        self.api_key = api_key
        self._client = client
        self.timeout = timeout

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key) or self._client is not None

    @property
    def client(self) -> genai.Client:
        """Lazy load the Gemini client."""
        if self._client is None:
            if not self.api_key:
                raise ProviderError("GEMINI_API_KEY or GOOGLE_API_KEY not set", provider=self.name)
            # HttpOptions.timeout is in milliseconds
            self._client = genai.Client(
                api_key=self.api_key,
                http_options=types.HttpOptions(timeout=int(self.timeout * 1000)),
            )
        return self._client

    async def complete(self, model: str, request: CompletionRequest) -> ProviderResponse:
        system = "\n\n".join(m.content for m in request.messages if m.role == "system")
        contents = [
            types.Content(
                role="model" if m.role == "assistant" else "user",
                parts=[types.Part(text=m.content)],
            )
            for m in request.messages
            if m.role != "system"
        ]

        config = types.GenerateContentConfig(
            system_instruction=system or None,
            max_output_tokens=request.max_tokens or self.DEFAULT_MAX_TOKENS,
            temperature=(
                request.temperature if request.temperature is not None else self.DEFAULT_TEMPERATURE
            ),
        )

        try:
            response = await asyncio.wait_for(
                self.client.aio.models.generate_content(
                    model=model,
                    contents=contents,
                    config=config,
                ),
                timeout=self.timeout,
            )
        except genai_errors.APIError as e:
            raise ProviderError(f"Gemini API error: {e}", provider=self.name, status_code=e.code)
        except asyncio.TimeoutError:
            raise ProviderError(f"Gemini request timed out after {self.timeout}s", provider=self.name)
        except httpx.HTTPError as e:
            # google-genai sends async requests through httpx
            raise ProviderError(
                f"Gemini request failed: {str(e) or type(e).__name__}",
                provider=self.name,
            )

        usage = response.usage_metadata
        return ProviderResponse(
            content=response.text or "",
            input_tokens=(usage.prompt_token_count or 0) if usage else 0,
            output_tokens=(usage.candidates_token_count or 0) if usage else 0,
        )
