"""
Tests for completion adapters.

Network calls are replaced at the client boundary; the adapters' own
request building, response parsing and error mapping run for real.
"""

from types import SimpleNamespace

import anthropic
import httpx
import pytest

from deepresearch.providers.completion import AnthropicCompletion, OpenRouterCompletion
from deepresearch.providers.protocol import (
    ChatMessage,
    CompletionService,
    ProviderAuthenticationError,
    ProviderError,
)

MESSAGES = [ChatMessage(role="user", content="Summarize the findings.")]


def openrouter_response(status: int, body: dict | None = None, text: str = "") -> httpx.Response:
    request = httpx.Request("POST", "https://openrouter.ai/api/v1/chat/completions")
    if body is not None:
        return httpx.Response(status, json=body, request=request)
    return httpx.Response(status, text=text, request=request)


class TestOpenRouterCompletion:
    """Test OpenRouter payloads and error mapping."""

    def make_adapter(self) -> OpenRouterCompletion:
        return OpenRouterCompletion(model="openai/gpt-4o", api_key="sk-test", max_retries=1)

    def test_satisfies_completion_protocol(self) -> None:
        assert isinstance(self.make_adapter(), CompletionService)

    @pytest.mark.asyncio
    async def test_returns_message_content(self, monkeypatch: pytest.MonkeyPatch) -> None:
        adapter = self.make_adapter()
        payloads = []

        async def fake_post(payload):
            payloads.append(payload)
            return openrouter_response(200, {
                "choices": [{"message": {"role": "assistant", "content": "The answer."}}],
                "usage": {"prompt_tokens": 10, "completion_tokens": 3},
            })

        monkeypatch.setattr(adapter, "_post", fake_post)

        assert await adapter.complete(MESSAGES) == "The answer."
        assert payloads[0]["model"] == "openai/gpt-4o"
        assert payloads[0]["messages"] == [{"role": "user", "content": "Summarize the findings."}]

    @pytest.mark.asyncio
    async def test_unauthorized_raises_auth_error(self, monkeypatch: pytest.MonkeyPatch) -> None:
        adapter = self.make_adapter()

        async def fake_post(payload):
            return openrouter_response(401, text="invalid key")

        monkeypatch.setattr(adapter, "_post", fake_post)

        with pytest.raises(ProviderAuthenticationError, match="OPENROUTER_API_KEY"):
            await adapter.complete(MESSAGES)

    @pytest.mark.asyncio
    async def test_server_error_raises_provider_error(self, monkeypatch: pytest.MonkeyPatch) -> None:
        adapter = self.make_adapter()

        async def fake_post(payload):
            return openrouter_response(502, text="bad gateway")

        monkeypatch.setattr(adapter, "_post", fake_post)

        with pytest.raises(ProviderError, match="502"):
            await adapter.complete(MESSAGES)

    @pytest.mark.asyncio
    async def test_empty_content_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        adapter = self.make_adapter()

        async def fake_post(payload):
            return openrouter_response(200, {"choices": [{"message": {"content": "  "}}]})

        monkeypatch.setattr(adapter, "_post", fake_post)

        with pytest.raises(ProviderError, match="empty"):
            await adapter.complete(MESSAGES)

    @pytest.mark.asyncio
    async def test_malformed_body_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        adapter = self.make_adapter()

        async def fake_post(payload):
            return openrouter_response(200, {"unexpected": True})

        monkeypatch.setattr(adapter, "_post", fake_post)

        with pytest.raises(ProviderError, match="malformed"):
            await adapter.complete(MESSAGES)


def anthropic_message(*blocks: SimpleNamespace) -> SimpleNamespace:
    return SimpleNamespace(
        content=list(blocks),
        stop_reason="end_turn",
        usage=SimpleNamespace(input_tokens=12, output_tokens=4),
    )


class TestAnthropicCompletion:
    """Test Anthropic response joining and error mapping."""

    def make_adapter(self) -> AnthropicCompletion:
        return AnthropicCompletion(api_key="sk-ant-test", max_retries=1)

    def test_requires_api_key(self) -> None:
        with pytest.raises(ValueError):
            AnthropicCompletion(api_key=None)

    @pytest.mark.asyncio
    async def test_joins_text_blocks(self, monkeypatch: pytest.MonkeyPatch) -> None:
        adapter = self.make_adapter()
        requests = []

        async def fake_create(**kwargs):
            requests.append(kwargs)
            return anthropic_message(
                SimpleNamespace(type="text", text="Part one. "),
                SimpleNamespace(type="thinking", thinking="hidden"),
                SimpleNamespace(type="text", text="Part two."),
            )

        monkeypatch.setattr(adapter.client.messages, "create", fake_create)

        assert await adapter.complete(MESSAGES) == "Part one. Part two."
        assert requests[0]["max_tokens"] == 8192
        assert requests[0]["messages"][0]["role"] == "user"

    @pytest.mark.asyncio
    async def test_no_text_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        adapter = self.make_adapter()

        async def fake_create(**kwargs):
            return anthropic_message()

        monkeypatch.setattr(adapter.client.messages, "create", fake_create)

        with pytest.raises(ProviderError, match="empty response"):
            await adapter.complete(MESSAGES)

    @pytest.mark.asyncio
    async def test_authentication_error_is_mapped(self, monkeypatch: pytest.MonkeyPatch) -> None:
        adapter = self.make_adapter()

        async def fake_create(**kwargs):
            response = httpx.Response(
                401, request=httpx.Request("POST", "https://api.anthropic.com/v1/messages")
            )
            raise anthropic.AuthenticationError("invalid x-api-key", response=response, body=None)

        monkeypatch.setattr(adapter.client.messages, "create", fake_create)

        with pytest.raises(ProviderAuthenticationError, match="ANTHROPIC_API_KEY"):
            await adapter.complete(MESSAGES)
