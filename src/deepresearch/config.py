"""
Configuration loading and validation for deepresearch.

Loads deepresearch.toml files and validates settings using Pydantic.
API keys are never stored in the file, only the names of the environment
variables that hold them.
"""

import os
import tomllib
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from .orchestrator.models import ResearchDepth, ResearchOptions

DEFAULT_CONFIG_NAME = "deepresearch.toml"

_API_KEY_ENV = {
    "anthropic": "ANTHROPIC_API_KEY",
    "openrouter": "OPENROUTER_API_KEY",
    "tavily": "TAVILY_API_KEY",
    "serper": "SERPER_API_KEY",
    "brave": "BRAVE_API_KEY",
}


class CompletionConfig(BaseModel):
    """Language model used for planning, analysis and compilation."""

    provider: Literal["anthropic", "openrouter"] = "anthropic"
    model: str = "claude-sonnet-4-20250514"
    api_key_env: str | None = None  # Defaults to the provider's usual variable
    timeout_seconds: int = Field(default=300, gt=0)
    max_retries: int = Field(default=3, ge=1)
    max_tokens: int = Field(default=8192, gt=0)

    def resolved_api_key_env(self) -> str:
        return self.api_key_env or _API_KEY_ENV[self.provider]


class SearchProviderConfig(BaseModel):
    """Configuration for a search provider."""

    name: Literal["tavily", "serper", "brave"]
    api_key_env: str | None = None
    priority: int = 1  # Lower number = tried first
    enabled: bool = True

    def resolved_api_key_env(self) -> str:
        return self.api_key_env or _API_KEY_ENV[self.name]


class SearchConfig(BaseModel):
    """Multi-provider search configuration."""

    providers: list[SearchProviderConfig] = Field(
        default_factory=lambda: [SearchProviderConfig(name="tavily")]
    )
    fallback_enabled: bool = True

    @field_validator("providers")
    @classmethod
    def validate_at_least_one_provider(
        cls, v: list[SearchProviderConfig]
    ) -> list[SearchProviderConfig]:
        """Ensure at least one provider is enabled."""
        if not v or all(not p.enabled for p in v):
            raise ValueError("At least one search provider must be enabled")
        return v

    def enabled_providers(self) -> list[SearchProviderConfig]:
        return sorted((p for p in self.providers if p.enabled), key=lambda p: p.priority)


class ResearchDefaults(BaseModel):
    """Default run options."""

    depth: ResearchDepth = ResearchDepth.STANDARD
    max_sources: int = Field(default=10, ge=0)
    progress_interval_ms: int = Field(default=300, ge=0)

    def to_options(
        self,
        depth: ResearchDepth | None = None,
        max_sources: int | None = None,
    ) -> ResearchOptions:
        return ResearchOptions(
            depth=depth or self.depth,
            max_sources=self.max_sources if max_sources is None else max_sources,
        )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    file: Path | None = None

    @field_validator("level", mode="before")
    @classmethod
    def normalize_level(cls, v: object) -> object:
        return v.upper() if isinstance(v, str) else v


class DeepResearchConfig(BaseModel):
    """Complete deepresearch configuration."""

    completion: CompletionConfig = Field(default_factory=CompletionConfig)
    search: SearchConfig = Field(default_factory=SearchConfig)
    research: ResearchDefaults = Field(default_factory=ResearchDefaults)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    def get_completion_api_key(self) -> str:
        """
        Get the completion provider's API key from the environment.

        Raises:
            ValueError: If the key is missing
        """
        env = self.completion.resolved_api_key_env()
        api_key = os.environ.get(env)
        if not api_key:
            raise ValueError(
                f"API key not found in environment: {env} "
                f"(required for {self.completion.provider}:{self.completion.model})"
            )
        return api_key

    def get_search_api_keys(self) -> dict[str, str | None]:
        """
        Get search provider API keys from the environment.

        Returns:
            Dict mapping enabled provider name to API key (None when unset)
        """
        return {
            provider.name: os.environ.get(provider.resolved_api_key_env())
            for provider in self.search.enabled_providers()
        }


def load_config(config_path: Path) -> DeepResearchConfig:
    """
    Load configuration from a TOML file.

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If config is invalid
    """
    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path, "rb") as f:
        try:
            config_data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ValueError(f"Invalid TOML in {config_path}: {e}") from e

    try:
        return DeepResearchConfig(**config_data)
    except Exception as e:
        raise ValueError(f"Invalid configuration: {e}") from e


def load_config_or_default(config_path: Path) -> DeepResearchConfig:
    """Load configuration, or return defaults when the file doesn't exist."""
    if not config_path.exists():
        return DeepResearchConfig()
    return load_config(config_path)


def create_default_config(output_path: Path) -> None:
    """Write a deepresearch.toml template."""
    template = '''[completion]
provider = "anthropic"  # anthropic | openrouter
model = "claude-sonnet-4-20250514"
# api_key_env = "ANTHROPIC_API_KEY"
timeout_seconds = 300
max_retries = 3

[search]
fallback_enabled = true  # Try the next provider when one fails

[[search.providers]]
name = "tavily"
api_key_env = "TAVILY_API_KEY"
priority = 1

[[search.providers]]
name = "serper"
api_key_env = "SERPER_API_KEY"
priority = 2
enabled = false

[research]
depth = "standard"  # standard | comprehensive | exhaustive
max_sources = 10
progress_interval_ms = 300

[logging]
level = "INFO"
'''
    output_path.write_text(template, encoding="utf-8")
