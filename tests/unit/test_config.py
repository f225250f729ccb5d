"""Tests for configuration loading and validation."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from deepresearch.config import (
    DeepResearchConfig,
    SearchConfig,
    SearchProviderConfig,
    create_default_config,
    load_config,
    load_config_or_default,
)
from deepresearch.orchestrator import ResearchDepth


def test_defaults() -> None:
    config = DeepResearchConfig()

    assert config.completion.provider == "anthropic"
    assert config.completion.resolved_api_key_env() == "ANTHROPIC_API_KEY"
    assert [p.name for p in config.search.enabled_providers()] == ["tavily"]
    assert config.research.depth == ResearchDepth.STANDARD
    assert config.research.max_sources == 10
    assert config.logging.level == "INFO"


def test_default_template_round_trips(tmp_path: Path) -> None:
    path = tmp_path / "deepresearch.toml"
    create_default_config(path)

    config = load_config(path)

    assert config.completion.model == "claude-sonnet-4-20250514"
    assert [p.name for p in config.search.enabled_providers()] == ["tavily"]
    assert config.research.progress_interval_ms == 300


def test_load_custom_values(tmp_path: Path) -> None:
    path = tmp_path / "custom.toml"
    path.write_text(
        '[completion]\nprovider = "openrouter"\nmodel = "openai/gpt-4o"\n\n'
        '[research]\ndepth = "exhaustive"\nmax_sources = 25\n\n'
        '[logging]\nlevel = "debug"\n',
        encoding="utf-8",
    )

    config = load_config(path)

    assert config.completion.resolved_api_key_env() == "OPENROUTER_API_KEY"
    assert config.research.depth == ResearchDepth.EXHAUSTIVE
    assert config.research.max_sources == 25
    assert config.logging.level == "DEBUG"


def test_missing_file_raises(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "absent.toml")


def test_missing_file_falls_back_to_defaults(tmp_path: Path) -> None:
    config = load_config_or_default(tmp_path / "absent.toml")

    assert config == DeepResearchConfig()


def test_invalid_toml_raises_value_error(tmp_path: Path) -> None:
    path = tmp_path / "broken.toml"
    path.write_text("[completion\nprovider = ", encoding="utf-8")

    with pytest.raises(ValueError, match="Invalid TOML"):
        load_config(path)


def test_invalid_values_raise_value_error(tmp_path: Path) -> None:
    path = tmp_path / "bad.toml"
    path.write_text('[research]\nmax_sources = -1\n', encoding="utf-8")

    with pytest.raises(ValueError, match="Invalid configuration"):
        load_config(path)


def test_at_least_one_search_provider_enabled() -> None:
    with pytest.raises(ValidationError):
        SearchConfig(providers=[SearchProviderConfig(name="tavily", enabled=False)])


def test_to_options_overrides() -> None:
    defaults = DeepResearchConfig().research

    assert defaults.to_options().max_sources == 10
    options = defaults.to_options(depth=ResearchDepth.COMPREHENSIVE, max_sources=0)
    assert options.depth == ResearchDepth.COMPREHENSIVE
    assert options.max_sources == 0


def test_missing_completion_key_names_variable(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)

    with pytest.raises(ValueError, match="ANTHROPIC_API_KEY"):
        DeepResearchConfig().get_completion_api_key()
