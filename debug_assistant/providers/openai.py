"""OpenAI chat completions adapter."""

from typing import Any, Dict, List, Optional

from debug_assistant.errors import EmptyResponseError

from ..schemas.tool_schema import ToolSchema
from .base import CallResult, ProviderAdapter, ProviderId, ProviderRequest
from .schema_translator import to_openai_tool


class OpenAIAdapter(ProviderAdapter):
    """Adapter for GPT models.

    The system prompt becomes a leading ``developer`` message. When the first
    choice carries tool calls, the first call's JSON-encoded ``arguments`` are
    decoded; otherwise the message content is returned as text.

    Provider-specific options:
        org_id: Sent as the ``OpenAI-Organization`` header
        reasoning_effort: Defaults to ``high``; an empty value omits the field
    """

    PROVIDER = ProviderId.OPENAI
    DEFAULT_API_URL = "https://api.openai.com/v1/chat/completions"
    DEFAULT_MODEL = "gpt-4-turbo"
    DEFAULT_TOKEN_LIMIT = 4096
    READ_TIMEOUT = 300.0

    SYSTEM_ROLE = "developer"
    DEFAULT_REASONING_EFFORT = "high"

    def build_request(
        self,
        messages: List[Dict[str, str]],
        schema: Optional[ToolSchema],
        allowed_tokens: int,
    ) -> ProviderRequest:
        options = self._config.provider_specific
        headers = {"Authorization": f"Bearer {self._config.api_key}"}
        if options.get("org_id"):
            headers["OpenAI-Organization"] = options["org_id"]

        if self._config.system_prompt:
            messages = [{"role": self.SYSTEM_ROLE, "content": self._config.system_prompt}, *messages]

        body: Dict[str, Any] = {
            "model": self._model,
            "messages": messages,
            "max_completion_tokens": allowed_tokens,
        }
        reasoning_effort = options.get("reasoning_effort", self.DEFAULT_REASONING_EFFORT)
        if reasoning_effort:
            body["reasoning_effort"] = reasoning_effort
        if schema is not None:
            body["tools"] = [to_openai_tool(schema)]
            body["tool_choice"] = {"type": "function", "function": {"name": schema.name}}
        return ProviderRequest(url=self._api_url, body=body, headers=headers)

    def parse_response(self, data: Dict[str, Any], schema: Optional[ToolSchema]) -> CallResult:
        choices = data.get("choices")
        if not isinstance(choices, list) or not choices:
            raise EmptyResponseError("Empty choices in OpenAI response", provider=self.provider_name)

        message = choices[0].get("message") or {}
        tool_calls = message.get("tool_calls")
        if tool_calls:
            function = tool_calls[0].get("function") or {}
            return self.decode_arguments(function.get("arguments"), self.provider_name)

        content = message.get("content")
        if content is None:
            raise EmptyResponseError("No content in OpenAI response message", provider=self.provider_name)
        return content
