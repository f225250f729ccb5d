"""Serper search provider (Google results)."""

import logging

import httpx

from ..protocol import ProviderAuthenticationError, SearchDepth, SearchHit

logger = logging.getLogger(__name__)


class SerperSearchProvider:
    """Serper.dev search provider (Google results).

    Serper has no depth setting; ``depth`` is accepted and ignored.
    """

    def __init__(self, api_key: str, timeout: float = 30.0):
        self.api_key = api_key
        self.url = "https://google.serper.dev/search"
        self.timeout = timeout
        self._name = "serper"

    @property
    def name(self) -> str:
        return self._name

    async def search(
        self,
        query: str,
        max_results: int = 10,
        depth: SearchDepth = "basic",
    ) -> list[SearchHit]:
        async with httpx.AsyncClient() as client:
            response = await client.post(
                self.url,
                headers={"X-API-KEY": self.api_key},
                json={"q": query, "num": max_results},
                timeout=self.timeout,
            )

        if response.status_code in (401, 403):
            raise ProviderAuthenticationError("Serper", "SERPER_API_KEY")
        response.raise_for_status()
        data = response.json()

        return [
            SearchHit(
                title=r.get("title", ""),
                url=r.get("link", ""),
                content=r.get("snippet", ""),
                published_date=r.get("date"),
                source=self.name,
            )
            for r in data.get("organic", [])[:max_results]
        ]
