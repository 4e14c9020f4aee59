"""Anthropic messages API adapter."""

from typing import Any, Dict, List, Optional

from debug_assistant.errors import EmptyResponseError

from ..schemas.tool_schema import ToolSchema
from .base import CallResult, ProviderAdapter, ProviderId, ProviderRequest
from .schema_translator import to_anthropic_tool


class AnthropicAdapter(ProviderAdapter):
    """Adapter for Claude models.

    The system prompt goes into the top-level ``system`` array and a schema is
    sent as a single tool pinned through ``tool_choice``. Content comes back as
    typed blocks: a ``tool_use`` block wins over the first ``text`` block.
    """

    PROVIDER = ProviderId.ANTHROPIC
    DEFAULT_API_URL = "https://api.anthropic.com/v1/messages"
    DEFAULT_MODEL = "claude-3-7-sonnet-20250219"
    DEFAULT_TOKEN_LIMIT = 8192

    DEFAULT_VERSION = "2023-06-01"
    DEFAULT_BETA = "prompt-caching-2024-07-31"

    def build_request(
        self,
        messages: List[Dict[str, str]],
        schema: Optional[ToolSchema],
        allowed_tokens: int,
    ) -> ProviderRequest:
        options = self._config.provider_specific
        headers = {
            "x-api-key": self._config.api_key,
            "anthropic-version": options.get("version") or self.DEFAULT_VERSION,
            "anthropic-beta": options.get("beta") or self.DEFAULT_BETA,
        }
        body: Dict[str, Any] = {
            "model": self._model,
            "messages": messages,
            "max_tokens": allowed_tokens,
        }
        if self._config.system_prompt:
            body["system"] = [{"type": "text", "text": self._config.system_prompt}]
        if schema is not None:
            body["tools"] = [to_anthropic_tool(schema)]
            body["tool_choice"] = {"type": "tool", "name": schema.name}
        return ProviderRequest(url=self._api_url, body=body, headers=headers)

    def parse_response(self, data: Dict[str, Any], schema: Optional[ToolSchema]) -> CallResult:
        blocks = data.get("content")
        if not isinstance(blocks, list) or not blocks:
            raise EmptyResponseError("Empty response content from Anthropic API", provider=self.provider_name)

        tool_use = next((b for b in blocks if isinstance(b, dict) and b.get("type") == "tool_use"), None)
        if tool_use is not None:
            return self.decode_arguments(tool_use.get("input"), self.provider_name)

        text = next((b for b in blocks if isinstance(b, dict) and b.get("type") == "text"), None)
        if text is not None and text.get("text") is not None:
            return text["text"]

        raise EmptyResponseError("No valid content found in Anthropic response", provider=self.provider_name)
