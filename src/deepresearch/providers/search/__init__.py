"""Multi-provider search."""

from .base import SearchManager, SearchProvider
from .brave import BraveSearchProvider
from .serper import SerperSearchProvider
from .tavily import TavilySearchProvider

__all__ = [
    "SearchProvider",
    "SearchManager",
    "TavilySearchProvider",
    "BraveSearchProvider",
    "SerperSearchProvider",
]
