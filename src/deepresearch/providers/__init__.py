"""Collaborator interfaces and concrete provider adapters."""

from .protocol import (
    ChatMessage,
    CompletionService,
    ProviderAuthenticationError,
    ProviderError,
    SearchHit,
    SearchResponse,
    SearchService,
)

__all__ = [
    "ChatMessage",
    "CompletionService",
    "ProviderAuthenticationError",
    "ProviderError",
    "SearchHit",
    "SearchResponse",
    "SearchService",
]
