"""Completion service adapters."""

from .anthropic import AnthropicCompletion
from .base import BaseCompletionAdapter
from .openrouter import OpenRouterCompletion

__all__ = ["AnthropicCompletion", "BaseCompletionAdapter", "OpenRouterCompletion"]
