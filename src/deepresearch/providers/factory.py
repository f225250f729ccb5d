"""
Build collaborator adapters from configuration.
"""

import logging
from typing import Any

from ..config import DeepResearchConfig
from .protocol import CompletionService
from .search import (
    BraveSearchProvider,
    SearchManager,
    SerperSearchProvider,
    TavilySearchProvider,
)

logger = logging.getLogger(__name__)

_SEARCH_PROVIDER_CLASSES: dict[str, Any] = {
    "tavily": TavilySearchProvider,
    "serper": SerperSearchProvider,
    "brave": BraveSearchProvider,
}


def create_completion(config: DeepResearchConfig) -> CompletionService:
    """
    Create the completion adapter named in the config.

    Raises:
        ValueError: If the API key is missing or the provider is unsupported
    """
    from .completion import AnthropicCompletion, OpenRouterCompletion

    settings = config.completion
    api_key = config.get_completion_api_key()

    if settings.provider == "anthropic":
        return AnthropicCompletion(
            model=settings.model,
            api_key=api_key,
            timeout=settings.timeout_seconds,
            max_tokens=settings.max_tokens,
            max_retries=settings.max_retries,
            api_key_env=settings.resolved_api_key_env(),
        )
    if settings.provider == "openrouter":
        return OpenRouterCompletion(
            model=settings.model,
            api_key=api_key,
            timeout=settings.timeout_seconds,
            max_retries=settings.max_retries,
            api_key_env=settings.resolved_api_key_env(),
        )

    raise ValueError(f"Unsupported completion provider: {settings.provider}")


def create_search(config: DeepResearchConfig) -> SearchManager:
    """
    Create a search manager over every enabled provider that has an API key.

    Raises:
        ValueError: If no provider can be configured
    """
    api_keys = config.get_search_api_keys()
    providers = []

    for provider in config.search.enabled_providers():
        api_key = api_keys.get(provider.name)
        if not api_key:
            logger.warning(
                f"Skipping search provider {provider.name}: "
                f"{provider.resolved_api_key_env()} is not set"
            )
            continue
        providers.append(_SEARCH_PROVIDER_CLASSES[provider.name](api_key=api_key))

    if not providers:
        raise ValueError("No search providers configured with valid API keys")

    return SearchManager(providers, fallback_enabled=config.search.fallback_enabled)
