"""Tavily search provider."""

import logging

from tavily import AsyncTavilyClient

from ..protocol import SearchDepth, SearchHit

logger = logging.getLogger(__name__)


class TavilySearchProvider:
    """Tavily search provider (best for research)."""

    def __init__(self, api_key: str, include_answer: bool = False):
        self.client = AsyncTavilyClient(api_key=api_key)
        self.include_answer = include_answer
        self._name = "tavily"

    @property
    def name(self) -> str:
        return self._name

    async def search(
        self,
        query: str,
        max_results: int = 10,
        depth: SearchDepth = "basic",
    ) -> list[SearchHit]:
        """Execute Tavily search with the requested depth."""
        response = await self.client.search(
            query=query,
            # Tavily returns thin results below five
            max_results=max(max_results, 5),
            search_depth=depth,
            include_answer=self.include_answer,
        )

        return [
            SearchHit(
                title=r.get("title", ""),
                url=r.get("url", ""),
                content=r.get("content", ""),
                score=r.get("score", 0.0),
                published_date=r.get("published_date"),
                source=self.name,
            )
            for r in response.get("results", [])
        ]
