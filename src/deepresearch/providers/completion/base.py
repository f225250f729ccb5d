"""
Base utilities shared across completion adapters.

Provides:
- Retry logic with exponential backoff
- Message conversion helpers
"""

import logging
from typing import Any, Awaitable, Callable, TypeVar

from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from ..protocol import ChatMessage

logger = logging.getLogger(__name__)

T = TypeVar("T")


class BaseCompletionAdapter:
    """Base class with shared completion adapter utilities."""

    # Exceptions worth retrying; subclasses add their client's transport errors
    retryable_exceptions: tuple[type[BaseException], ...] = (ConnectionError, TimeoutError)

    def __init__(self, model: str, api_key: str | None = None, max_retries: int = 3):
        """
        Initialize base adapter.

        Args:
            model: Model identifier
            api_key: API key for authentication
            max_retries: Maximum attempts for transient failures
        """
        self.model = model
        self.api_key = api_key
        self.max_retries = max(1, max_retries)

    @property
    def name(self) -> str:
        return self.model

    async def _with_retry(
        self,
        func: Callable[..., Awaitable[T]],
        *args: Any,
        **kwargs: Any,
    ) -> T:
        """
        Execute an async function with exponential backoff retry.

        Only transient transport failures are retried; everything else is
        raised on the first attempt.
        """
        async for attempt in AsyncRetrying(
            retry=retry_if_exception_type(self.retryable_exceptions),
            stop=stop_after_attempt(self.max_retries),
            wait=wait_exponential(multiplier=1, min=2, max=10),
            reraise=True,
        ):
            with attempt:
                logger.debug(
                    f"[{self.name}] Attempt {attempt.retry_state.attempt_number}/{self.max_retries}"
                )
                return await func(*args, **kwargs)

        # Unreachable with reraise=True
        raise RuntimeError("Retry logic failed unexpectedly")

    @staticmethod
    def _to_dicts(messages: list[ChatMessage]) -> list[dict[str, str]]:
        """Convert chat messages to provider dicts."""
        return [m.to_dict() for m in messages]
