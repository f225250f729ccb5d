"""Brave search provider."""

import logging

import httpx

from ..protocol import ProviderAuthenticationError, SearchDepth, SearchHit

logger = logging.getLogger(__name__)


class BraveSearchProvider:
    """Brave search provider (privacy-focused)."""

    def __init__(self, api_key: str, timeout: float = 30.0):
        self.api_key = api_key
        self.base_url = "https://api.search.brave.com/res/v1/web/search"
        self.timeout = timeout
        self._name = "brave"

    @property
    def name(self) -> str:
        return self._name

    async def search(
        self,
        query: str,
        max_results: int = 10,
        depth: SearchDepth = "basic",
    ) -> list[SearchHit]:
        """Execute Brave search. Advanced depth asks for extra snippets."""
        params: dict[str, str | int] = {"q": query, "count": max_results}
        if depth == "advanced":
            params["extra_snippets"] = "true"

        async with httpx.AsyncClient() as client:
            response = await client.get(
                self.base_url,
                headers={"X-Subscription-Token": self.api_key},
                params=params,
                timeout=self.timeout,
            )

        if response.status_code in (401, 403):
            raise ProviderAuthenticationError("Brave", "BRAVE_API_KEY")
        response.raise_for_status()
        data = response.json()

        hits = []
        for r in data.get("web", {}).get("results", []):
            content = r.get("description", "")
            extra = r.get("extra_snippets") or []
            if extra:
                content = "\n".join([content, *extra])
            hits.append(
                SearchHit(
                    title=r.get("title", ""),
                    url=r.get("url", ""),
                    content=content,
                    published_date=r.get("age"),
                    source=self.name,
                )
            )

        return hits
