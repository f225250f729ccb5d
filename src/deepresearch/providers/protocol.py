"""
Protocol definitions for the external collaborators.

The research core talks to exactly two services: a chat completion service
and a web search service. Any adapter that implements these protocols can be
plugged into the orchestrator.
"""

from dataclasses import dataclass, field
from typing import Literal, Protocol, runtime_checkable

Role = Literal["user", "assistant"]
SearchDepth = Literal["basic", "advanced"]


class ProviderError(Exception):
    """Raised when a collaborator call fails (network, auth, malformed response)."""

    def __init__(self, provider: str, message: str):
        self.provider = provider
        super().__init__(f"{provider}: {message}")


class ProviderAuthenticationError(ProviderError):
    """Raised when a provider rejects or is missing its API key."""

    def __init__(self, provider: str, api_key_env: str | None = None):
        self.api_key_env = api_key_env
        hint = f" Check that {api_key_env} is set to a valid API key." if api_key_env else ""
        super().__init__(provider, f"authentication failed.{hint}")


@dataclass(frozen=True)
class ChatMessage:
    """One message of a chat completion request."""

    role: Role
    content: str

    def to_dict(self) -> dict[str, str]:
        return {"role": self.role, "content": self.content}


@dataclass
class SearchHit:
    """Single raw search result as returned by a search provider."""

    title: str
    url: str
    content: str
    score: float = 0.0
    published_date: str | None = None
    source: str | None = None  # Which provider returned this


@dataclass
class SearchResponse:
    """Search results for one query."""

    query: str
    results: list[SearchHit] = field(default_factory=list)
    provider: str | None = None


@runtime_checkable
class CompletionService(Protocol):
    """Protocol for chat completion collaborators."""

    async def complete(self, messages: list[ChatMessage]) -> str:
        """
        Generate an assistant reply for an ordered list of messages.

        Raises:
            ProviderError: On authentication, network, or malformed-response failures
        """
        ...


@runtime_checkable
class SearchService(Protocol):
    """Protocol for web search collaborators."""

    async def search(
        self,
        query: str,
        max_results: int,
        depth: SearchDepth,
    ) -> SearchResponse:
        """
        Execute a web search.

        Raises:
            ProviderError: On authentication, network, or malformed-response failures
        """
        ...
