"""
Anthropic Claude completion adapter.

Uses the async Messages API with a single-turn (no tools) request per call.
"""

import logging

import anthropic

from ..protocol import ChatMessage, ProviderAuthenticationError, ProviderError
from .base import BaseCompletionAdapter

logger = logging.getLogger(__name__)


class AnthropicCompletion(BaseCompletionAdapter):
    """Completion service backed by Anthropic Claude models."""

    retryable_exceptions = (anthropic.APIConnectionError, anthropic.RateLimitError)

    def __init__(
        self,
        model: str = "claude-sonnet-4-20250514",
        api_key: str | None = None,
        timeout: int = 300,
        max_tokens: int = 8192,
        max_retries: int = 3,
        api_key_env: str = "ANTHROPIC_API_KEY",
    ):
        """
        Initialize Anthropic adapter.

        Args:
            model: Model identifier
            api_key: API key
            timeout: Request timeout in seconds
            max_tokens: Maximum output tokens per completion
            max_retries: Maximum attempts for transient failures
            api_key_env: Environment variable name reported on auth failures
        """
        super().__init__(model, api_key, max_retries=max_retries)

        if not api_key:
            raise ValueError("api_key required for AnthropicCompletion")

        # SDK-level retries are disabled; retries happen in _with_retry
        self.client = anthropic.AsyncAnthropic(api_key=api_key, max_retries=0)
        self.timeout = timeout
        self.max_tokens = max_tokens
        self.api_key_env = api_key_env

    @property
    def name(self) -> str:
        return f"anthropic:{self.model}"

    async def complete(self, messages: list[ChatMessage]) -> str:
        """Generate a reply for the given messages."""
        try:
            response = await self._with_retry(
                self.client.messages.create,
                model=self.model,
                messages=self._to_dicts(messages),
                max_tokens=self.max_tokens,
                timeout=self.timeout,
            )
        except (anthropic.AuthenticationError, anthropic.PermissionDeniedError) as e:
            raise ProviderAuthenticationError("Anthropic", self.api_key_env) from e
        except anthropic.APIError as e:
            raise ProviderError("Anthropic", str(e)) from e

        text = "".join(
            block.text for block in response.content if getattr(block, "type", None) == "text"
        )
        if not text.strip():
            raise ProviderError("Anthropic", f"empty response (stop_reason={response.stop_reason})")

        logger.debug(
            f"[{self.name}] {response.usage.input_tokens} in / "
            f"{response.usage.output_tokens} out"
        )
        return text
