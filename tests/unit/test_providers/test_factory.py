"""Tests for building adapters from configuration."""

import pytest

from deepresearch.config import DeepResearchConfig, SearchConfig, SearchProviderConfig
from deepresearch.providers.completion import AnthropicCompletion, OpenRouterCompletion
from deepresearch.providers.factory import create_completion, create_search


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    for name in (
        "ANTHROPIC_API_KEY",
        "OPENROUTER_API_KEY",
        "TAVILY_API_KEY",
        "SERPER_API_KEY",
        "BRAVE_API_KEY",
    ):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_anthropic_completion_from_default_config(clean_env: pytest.MonkeyPatch) -> None:
    clean_env.setenv("ANTHROPIC_API_KEY", "sk-ant-test")

    adapter = create_completion(DeepResearchConfig())

    assert isinstance(adapter, AnthropicCompletion)
    assert adapter.max_tokens == 8192


def test_openrouter_completion_with_custom_env(clean_env: pytest.MonkeyPatch) -> None:
    clean_env.setenv("MY_ROUTER_KEY", "sk-or-test")
    config = DeepResearchConfig(
        completion={"provider": "openrouter", "model": "openai/gpt-4o", "api_key_env": "MY_ROUTER_KEY"}
    )

    adapter = create_completion(config)

    assert isinstance(adapter, OpenRouterCompletion)
    assert adapter.api_key == "sk-or-test"
    assert adapter.api_key_env == "MY_ROUTER_KEY"


def test_missing_completion_key_raises(clean_env: pytest.MonkeyPatch) -> None:
    with pytest.raises(ValueError, match="ANTHROPIC_API_KEY"):
        create_completion(DeepResearchConfig())


def test_search_skips_providers_without_keys(clean_env: pytest.MonkeyPatch) -> None:
    clean_env.setenv("SERPER_API_KEY", "serper-key")
    config = DeepResearchConfig(
        search=SearchConfig(providers=[
            SearchProviderConfig(name="tavily", priority=1),
            SearchProviderConfig(name="serper", priority=2),
            SearchProviderConfig(name="brave", priority=3, enabled=False),
        ])
    )

    manager = create_search(config)

    assert [p.name for p in manager.providers] == ["serper"]


def test_search_orders_by_priority(clean_env: pytest.MonkeyPatch) -> None:
    clean_env.setenv("TAVILY_API_KEY", "tvly-key")
    clean_env.setenv("BRAVE_API_KEY", "brave-key")
    config = DeepResearchConfig(
        search=SearchConfig(
            providers=[
                SearchProviderConfig(name="tavily", priority=2),
                SearchProviderConfig(name="brave", priority=1),
            ],
            fallback_enabled=False,
        )
    )

    manager = create_search(config)

    assert [p.name for p in manager.providers] == ["brave", "tavily"]
    assert manager.fallback_enabled is False


def test_search_without_any_key_raises(clean_env: pytest.MonkeyPatch) -> None:
    with pytest.raises(ValueError, match="No search providers"):
        create_search(DeepResearchConfig())
