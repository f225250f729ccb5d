"""
OpenRouter completion adapter.

OpenRouter provides unified access to many LLM models through a single
OpenAI-compatible chat completions endpoint.
"""

import logging
from typing import Any

import httpx

from ..protocol import ChatMessage, ProviderAuthenticationError, ProviderError
from .base import BaseCompletionAdapter

logger = logging.getLogger(__name__)


class OpenRouterCompletion(BaseCompletionAdapter):
    """Completion service backed by OpenRouter."""

    retryable_exceptions = (httpx.ConnectError, httpx.TimeoutException)

    def __init__(
        self,
        model: str,
        api_key: str,
        timeout: int = 300,
        temperature: float = 0.7,
        max_retries: int = 3,
        api_key_env: str = "OPENROUTER_API_KEY",
        base_url: str = "https://openrouter.ai/api/v1",
    ):
        super().__init__(model, api_key, max_retries=max_retries)
        self.timeout = timeout
        self.temperature = temperature
        self.api_key_env = api_key_env
        self.base_url = base_url.rstrip("/")

    @property
    def name(self) -> str:
        return f"openrouter:{self.model}"

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "X-Title": "deepresearch",
        }

    async def _post(self, payload: dict[str, Any]) -> httpx.Response:
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            return await client.post(
                f"{self.base_url}/chat/completions",
                headers=self._headers(),
                json=payload,
            )

    async def complete(self, messages: list[ChatMessage]) -> str:
        """Generate a reply for the given messages."""
        payload = {
            "model": self.model,
            "messages": self._to_dicts(messages),
            "temperature": self.temperature,
        }

        try:
            response = await self._with_retry(self._post, payload)
        except httpx.HTTPError as e:
            raise ProviderError("OpenRouter", f"request failed: {e}") from e

        if response.status_code in (401, 403):
            raise ProviderAuthenticationError("OpenRouter", self.api_key_env)
        if response.status_code != 200:
            raise ProviderError(
                "OpenRouter", f"API error ({response.status_code}): {response.text[:500]}"
            )

        try:
            result = response.json()
            content = result["choices"][0]["message"].get("content")
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise ProviderError("OpenRouter", f"malformed response: {e}") from e

        if not isinstance(content, str) or not content.strip():
            raise ProviderError("OpenRouter", "empty response content")

        usage = result.get("usage", {})
        logger.debug(
            f"[{self.name}] {usage.get('prompt_tokens', 0)} in / "
            f"{usage.get('completion_tokens', 0)} out"
        )
        return content
