"""DeepSeek chat completions adapter."""

from typing import Any, Dict, List, Optional

from debug_assistant.core.logging_config import get_logger
from debug_assistant.errors import ApiError, EmptyResponseError, RateLimitError

from ..schemas.tool_schema import ToolSchema
from .base import CallResult, ProviderAdapter, ProviderId, ProviderRequest
from .schema_translator import to_openai_tool

logger = get_logger(__name__)

RATE_LIMIT_STATUSES = frozenset({429, 503})


class DeepSeekAdapter(ProviderAdapter):
    """Adapter for DeepSeek models (OpenAI-style function calling).

    HTTP 429 and 503 are classified as ``RateLimitError``. Tool-call arguments
    are only read when a schema was sent; they are decoded into an object
    whether DeepSeek returns them encoded or already decoded.
    """

    PROVIDER = ProviderId.DEEPSEEK
    DEFAULT_API_URL = "https://api.deepseek.com/beta/chat/completions"
    DEFAULT_MODEL = "deepseek-reasoner"
    DEFAULT_TOKEN_LIMIT = 8000

    def build_request(
        self,
        messages: List[Dict[str, str]],
        schema: Optional[ToolSchema],
        allowed_tokens: int,
    ) -> ProviderRequest:
        headers = {
            "Accept": "application/json",
            "Authorization": f"Bearer {self._config.api_key}",
        }
        if self._config.system_prompt:
            messages = [{"role": "system", "content": self._config.system_prompt}, *messages]

        body: Dict[str, Any] = {
            "model": self._model,
            "messages": messages,
            "max_tokens": allowed_tokens,
        }
        if schema is not None:
            body["tools"] = [to_openai_tool(schema)]
            body["tool_choice"] = {"type": "function", "function": {"name": schema.name}}
        return ProviderRequest(url=self._api_url, body=body, headers=headers)

    def error_for_status(self, status_code: int, message: str, details: str) -> ApiError:
        if status_code in RATE_LIMIT_STATUSES:
            return RateLimitError(
                f"Rate limit exceeded. Please try again later. ({message})",
                status_code=status_code,
                details=details,
                provider=self.provider_name,
            )
        return super().error_for_status(status_code, message, details)

    def parse_response(self, data: Dict[str, Any], schema: Optional[ToolSchema]) -> CallResult:
        choices = data.get("choices")
        if not isinstance(choices, list) or not choices:
            raise EmptyResponseError("Empty choices in DeepSeek response", provider=self.provider_name)

        if data.get("usage"):
            logger.info(f"{data['usage']} tokens used")

        message = choices[0].get("message") or {}
        if schema is not None:
            tool_calls = message.get("tool_calls") or []
            arguments = (tool_calls[0].get("function") or {}).get("arguments") if tool_calls else None
            if arguments:
                return self.decode_arguments(arguments, self.provider_name)

        content = message.get("content")
        if content is None:
            raise EmptyResponseError("No content in DeepSeek response message", provider=self.provider_name)
        return content
