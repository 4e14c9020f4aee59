"""Unit tests for the Anthropic adapter."""

import httpx
import pytest

from debug_assistant.errors import EmptyResponseError
from debug_assistant.providers.anthropic import AnthropicAdapter
from debug_assistant.providers.base import ProviderConfig
from debug_assistant.schemas.messages import Message
from debug_assistant.schemas.tool_schema import ToolSchema

MOCK_URL = "https://mock.anthropic/v1/messages"

SCHEMA = ToolSchema.parse(
    {"name": "respond", "description": "Next action", "inputs": [{"name": "action", "type": "string", "required": True}]}
)


def make_adapter(transport, **overrides) -> AnthropicAdapter:
    config = ProviderConfig(provider_id="anthropic", api_key="sk-test", api_url=MOCK_URL, **overrides)
    return AnthropicAdapter(config, client=transport.client(), hooks=[])


class TestAnthropicRequest:
    """Request building."""

    def test_headers_and_body(self, recording_transport) -> None:
        """Default version/beta headers, system array and token budget are sent."""
        transport = recording_transport(httpx.Response(200, json={"content": [{"type": "text", "text": "hi"}]}))
        adapter = make_adapter(transport, system_prompt="Be brief")

        adapter.call([Message.user("hello")])

        request = transport.requests[0]
        assert str(request.url) == MOCK_URL
        assert request.headers["x-api-key"] == "sk-test"
        assert request.headers["anthropic-version"] == "2023-06-01"
        assert request.headers["anthropic-beta"] == "prompt-caching-2024-07-31"
        body = transport.last_body
        assert body["model"] == "claude-3-7-sonnet-20250219"
        assert body["max_tokens"] == 8192
        assert body["system"] == [{"type": "text", "text": "Be brief"}]
        assert body["messages"] == [{"role": "user", "content": "hello"}]
        assert "tools" not in body

    def test_custom_version_and_beta(self, recording_transport) -> None:
        transport = recording_transport(httpx.Response(200, json={"content": [{"type": "text", "text": "hi"}]}))
        adapter = make_adapter(transport, provider_specific={"version": "2024-01-01", "beta": "x"})

        adapter.call([Message.user("hello")])

        assert transport.requests[0].headers["anthropic-version"] == "2024-01-01"
        assert transport.requests[0].headers["anthropic-beta"] == "x"

    def test_schema_forces_single_tool(self, recording_transport) -> None:
        """A schema becomes the only tool and tool_choice pins it by name."""
        transport = recording_transport(
            httpx.Response(200, json={"content": [{"type": "tool_use", "input": {"action": "message"}}]})
        )
        adapter = make_adapter(transport)

        adapter.call([Message.user("hello")], schema=SCHEMA, allowed_tokens=100)

        body = transport.last_body
        assert body["tools"][0]["name"] == "respond"
        assert body["tools"][0]["input_schema"]["required"] == ["action"]
        assert body["tool_choice"] == {"type": "tool", "name": "respond"}
        assert body["max_tokens"] == 100


class TestAnthropicResponse:
    """Response parsing."""

    def test_tool_use_input_wins(self, recording_transport) -> None:
        """A tool_use block yields its input even when text comes first."""
        transport = recording_transport(
            httpx.Response(
                200,
                json={
                    "content": [
                        {"type": "text", "text": "thinking"},
                        {"type": "tool_use", "name": "respond", "input": {"action": "message", "message": "hi"}},
                    ]
                },
            )
        )

        result = make_adapter(transport).call([Message.user("q")], schema=SCHEMA)

        assert result == {"action": "message", "message": "hi"}

    def test_first_text_block(self, recording_transport) -> None:
        transport = recording_transport(
            httpx.Response(200, json={"content": [{"type": "text", "text": "first"}, {"type": "text", "text": "second"}]})
        )

        assert make_adapter(transport).call([Message.user("q")]) == "first"

    @pytest.mark.parametrize("payload", [{"content": []}, {}, {"content": [{"type": "image"}]}])
    def test_empty_content(self, recording_transport, payload) -> None:
        transport = recording_transport(httpx.Response(200, json=payload))

        with pytest.raises(EmptyResponseError):
            make_adapter(transport).call([Message.user("q")])
