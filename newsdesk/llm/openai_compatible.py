"""Chat-completions provider for OpenAI-compatible APIs (Kimi, OpenRouter)."""

import logging
from typing import Optional

import httpx

from .base import CompletionProvider, CompletionRequest, ProviderResponse
from ..exceptions import ProviderError, ResponseParseError

logger = logging.getLogger(__name__)

KIMI_BASE_URL = "https://api.moonshot.cn/v1"
OPENROUTER_BASE_URL = "https://openrouter.ai/api/v1"


class OpenAICompatibleProvider(CompletionProvider):
    """POSTs to `{base_url}/chat/completions` with a bearer token."""

    def __init__(
        self,
        name: str,
        base_url: str,
        api_key: str,
        client: Optional[httpx.AsyncClient] = None,
        extra_headers: Optional[dict[str, str]] = None,
        timeout: float = 60.0,
    ):
        self.name = name
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self._client = client
        self.extra_headers = extra_headers or {}
        self.timeout = timeout

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    async def complete(self, model: str, request: CompletionRequest) -> ProviderResponse:
        payload = {
            "model": model,
            "messages": [m.model_dump() for m in request.messages],
            "max_tokens": request.max_tokens or self.DEFAULT_MAX_TOKENS,
            "temperature": (
                request.temperature if request.temperature is not None else self.DEFAULT_TEMPERATURE
            ),
        }
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.api_key}",
            **self.extra_headers,
        }

        if self._client is not None:
            data = await self._post(self._client, payload, headers)
        else:
            async with httpx.AsyncClient() as client:
                data = await self._post(client, payload, headers)

        try:
            content = data["choices"][0]["message"]["content"] or ""
            usage = data.get("usage") or {}
        except (KeyError, IndexError, TypeError) as e:
            raise ResponseParseError(f"Unexpected {self.name} response shape: {e}", raw=str(data)[:500])

        return ProviderResponse(
            content=content,
            input_tokens=int(usage.get("prompt_tokens") or 0),
            output_tokens=int(usage.get("completion_tokens") or 0),
        )

    async def _post(self, client: httpx.AsyncClient, payload: dict, headers: dict) -> dict:
        try:
            response = await client.post(
                f"{self.base_url}/chat/completions",
                json=payload,
                headers=headers,
                timeout=httpx.Timeout(self.timeout),
            )
        except httpx.HTTPError as e:
            raise ProviderError(f"{self.name} request failed: {e}", provider=self.name)

        if response.status_code >= 400:
            raise ProviderError(
                f"{self.name} API error: {response.status_code} - {response.text[:300]}",
                provider=self.name,
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as e:
            raise ResponseParseError(f"{self.name} returned invalid JSON: {e}", raw=response.text[:500])
