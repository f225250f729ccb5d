"""
Base search provider protocol and manager.

Supports multiple search providers with automatic fallback.
"""

import logging
from typing import Protocol

from ..protocol import ProviderError, SearchDepth, SearchHit, SearchResponse

logger = logging.getLogger(__name__)


class SearchProvider(Protocol):
    """Protocol for individual search backends (tavily, serper, brave)."""

    @property
    def name(self) -> str:
        """Provider name."""
        ...

    async def search(
        self,
        query: str,
        max_results: int = 10,
        depth: SearchDepth = "basic",
    ) -> list[SearchHit]:
        """Execute search and return raw hits."""
        ...


class SearchManager:
    """Search service over several providers with fallback."""

    def __init__(
        self,
        providers: list[SearchProvider],
        fallback_enabled: bool = True,
    ):
        """
        Initialize search manager.

        Args:
            providers: Search providers in priority order
            fallback_enabled: Try the next provider when one fails
        """
        if not providers:
            raise ValueError("SearchManager requires at least one provider")
        self.providers = providers
        self.fallback_enabled = fallback_enabled

    async def search(
        self,
        query: str,
        max_results: int = 10,
        depth: SearchDepth = "basic",
    ) -> SearchResponse:
        """
        Search using providers with automatic fallback.

        Returns:
            SearchResponse from the first provider that returns results
            (an empty response if every provider returned nothing)

        Raises:
            ProviderError: If all providers fail, or the first fails with fallback disabled
        """
        last_error: Exception | None = None

        for provider in self.providers:
            try:
                logger.debug(f"Trying search provider: {provider.name}")
                hits = await provider.search(query, max_results=max_results, depth=depth)
            except Exception as e:
                logger.warning(f"Search failed for {provider.name}: {e}")
                last_error = e
                if not self.fallback_enabled:
                    if isinstance(e, ProviderError):
                        raise
                    raise ProviderError(provider.name, str(e)) from e
                continue

            if hits:
                logger.info(
                    f"Search via {provider.name}: {len(hits)} results for '{query[:50]}'"
                )
                return SearchResponse(query=query, results=hits, provider=provider.name)

            logger.warning(f"No results from {provider.name}")

        if last_error:
            raise ProviderError(
                "search", f"all search providers failed. Last error: {last_error}"
            ) from last_error

        return SearchResponse(query=query, results=[])
