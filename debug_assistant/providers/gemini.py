"""Google Gemini ``generateContent`` adapter."""

import json
from typing import Any, Dict, List, Optional

from debug_assistant.errors import EmptyResponseError

from ..schemas.tool_schema import ToolSchema
from .base import CallResult, ProviderAdapter, ProviderId, ProviderRequest
from .schema_translator import to_gemini_schema


class GeminiAdapter(ProviderAdapter):
    """Adapter for Gemini models.

    The model name and API key are part of the URL. Assistant turns are sent
    with the ``model`` role, the system prompt goes into ``systemInstruction``
    and a schema is embedded as ``generationConfig.responseSchema``. Gemini
    always answers with text; with a schema that text is JSON and is decoded
    when it parses.
    """

    PROVIDER = ProviderId.GEMINI
    DEFAULT_API_URL = "https://generativelanguage.googleapis.com/v1beta/models/"
    DEFAULT_MODEL = "gemini-1.5-pro"
    DEFAULT_TOKEN_LIMIT = 4096

    def endpoint(self) -> str:
        """Full ``generateContent`` URL including the API key."""
        base = self._api_url if self._api_url.endswith("/") else f"{self._api_url}/"
        return f"{base}{self._model}:generateContent?key={self._config.api_key}"

    def build_request(
        self,
        messages: List[Dict[str, str]],
        schema: Optional[ToolSchema],
        allowed_tokens: int,
    ) -> ProviderRequest:
        contents = [
            {
                "role": "model" if msg["role"] == "assistant" else msg["role"],
                "parts": [{"text": msg["content"]}],
            }
            for msg in messages
        ]
        body: Dict[str, Any] = {
            "contents": contents,
            "generationConfig": {"maxOutputTokens": allowed_tokens},
        }
        if self._config.system_prompt:
            body["systemInstruction"] = {"parts": [{"text": self._config.system_prompt}]}
        if schema is not None:
            body["generationConfig"]["responseMimeType"] = "application/json"
            body["generationConfig"]["responseSchema"] = to_gemini_schema(schema)
        return ProviderRequest(url=self.endpoint(), body=body)

    def parse_response(self, data: Dict[str, Any], schema: Optional[ToolSchema]) -> CallResult:
        candidates = data.get("candidates")
        if not isinstance(candidates, list) or not candidates:
            raise EmptyResponseError("No candidates in Gemini response", provider=self.provider_name)

        parts = (candidates[0].get("content") or {}).get("parts") or []
        text = parts[0].get("text") if parts and isinstance(parts[0], dict) else None
        if text is None:
            raise EmptyResponseError("No content in Gemini response", provider=self.provider_name)

        if schema is not None:
            try:
                decoded = json.loads(text)
            except json.JSONDecodeError:
                return text
            if isinstance(decoded, dict):
                return decoded
        return text
