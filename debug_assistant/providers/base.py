"""Base abstraction for model provider adapters.

This module defines the contract every provider adapter adheres to and the
behavior they share: one HTTP POST per call through ``httpx``, uniform error
classification, and audit hooks around each exchange. Subclasses only build
the provider-specific request and read the provider-specific envelope.
"""

import json
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, Dict, List, Mapping, Optional, Protocol, Sequence, Union

import httpx
from pydantic import BaseModel, ConfigDict, Field, field_validator

from debug_assistant.core.logging_config import get_logger
from debug_assistant.errors import (
    ApiError,
    MalformedResponseError,
    TransportError,
    UnknownProviderError,
)
from debug_assistant.schemas.messages import Message
from debug_assistant.schemas.tool_schema import ToolSchema

logger = get_logger(__name__)

# Free-form text, or the decoded arguments of a forced tool call.
CallResult = Union[str, Dict[str, Any]]

ConversationItem = Union[Message, Mapping[str, Any]]


class ProviderId(str, Enum):
    """Enumeration of supported model providers."""

    ANTHROPIC = "anthropic"
    OPENAI = "openai"
    GEMINI = "gemini"
    DEEPSEEK = "deepseek"

    def __str__(self) -> str:
        """Return the string value of the provider."""
        return self.value

    @classmethod
    def parse(cls, value: Any) -> "ProviderId":
        """Resolve an identifier, raising ``UnknownProviderError`` for anything unsupported."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise UnknownProviderError(value) from None


class ProviderConfig(BaseModel):
    """Configuration for constructing a provider adapter.

    Attributes:
        provider_id: Which provider the adapter talks to
        api_key: API key for the provider
        model: Model identifier; the provider default is used when unset
        max_tokens: Default completion token budget; provider default when unset
        api_url: Endpoint URL; provider default when unset
        system_prompt: System prompt placed in the provider's preferred slot
        tool_schema: Tool used to force structured output on every call
        provider_specific: Extra provider options (e.g. Anthropic version/beta, OpenAI org id)
    """

    model_config = ConfigDict(frozen=False, validate_assignment=True)

    provider_id: ProviderId = Field(..., description="Provider identifier")
    api_key: str = Field(default="", description="API key for the provider")
    model: Optional[str] = Field(default=None, description="Model identifier")
    max_tokens: Optional[int] = Field(default=None, ge=1, description="Default completion token budget")
    api_url: Optional[str] = Field(default=None, description="Endpoint URL override")
    system_prompt: Optional[str] = Field(default=None, description="System prompt")
    tool_schema: Optional[ToolSchema] = Field(default=None, description="Tool schema forcing structured output")
    provider_specific: Dict[str, str] = Field(default_factory=dict, description="Provider-specific options")

    @field_validator("provider_id", mode="before")
    @classmethod
    def _parse_provider(cls, value: Any) -> ProviderId:
        return ProviderId.parse(value)


class ModelInfo(BaseModel):
    """Provider, model and token limit an adapter is configured with."""

    provider: str
    model: str
    max_tokens: int


class AuditHook(Protocol):
    """Observer notified before each request and after each response."""

    def before_request(self, provider: str, url: str, body: Dict[str, Any]) -> None: ...

    def after_response(self, provider: str, status_code: int, text: str) -> None: ...


class LoggingAuditHook:
    """Default audit hook writing request and response bodies to the log at DEBUG."""

    def before_request(self, provider: str, url: str, body: Dict[str, Any]) -> None:
        logger.debug(f"{provider.upper()} REQUEST: {json.dumps(body, ensure_ascii=False)}")

    def after_response(self, provider: str, status_code: int, text: str) -> None:
        logger.debug(f"{provider.upper()} RESPONSE - Status: {status_code}\n{text}")


@dataclass
class ProviderRequest:
    """A fully built HTTP request for one provider call."""

    url: str
    body: Dict[str, Any]
    headers: Dict[str, str] = field(default_factory=dict)


class ProviderAdapter(ABC):
    """Abstract base class for all provider adapters.

    Subclasses must define the class-level defaults and implement:
    - build_request(): Serialize the conversation into the provider's request
    - parse_response(): Extract the normalized result from a successful envelope
    """

    PROVIDER: ClassVar[ProviderId]
    DEFAULT_API_URL: ClassVar[str]
    DEFAULT_MODEL: ClassVar[str]
    DEFAULT_TOKEN_LIMIT: ClassVar[int] = 4096
    READ_TIMEOUT: ClassVar[float] = 400.0
    CONNECT_TIMEOUT: ClassVar[float] = 30.0

    def __init__(
        self,
        config: ProviderConfig,
        *,
        client: Optional[httpx.Client] = None,
        hooks: Optional[Sequence[AuditHook]] = None,
    ) -> None:
        """Initialize the adapter with configuration.

        Args:
            config: ProviderConfig for this provider
            client: Optional preconfigured httpx client (used by tests)
            hooks: Audit hooks; defaults to a single LoggingAuditHook
        """
        self._config = config
        self._model = config.model or self.DEFAULT_MODEL
        self._max_tokens = config.max_tokens or self.DEFAULT_TOKEN_LIMIT
        self._api_url = config.api_url or self.DEFAULT_API_URL
        self._client = client or httpx.Client(
            timeout=httpx.Timeout(self.READ_TIMEOUT, connect=self.CONNECT_TIMEOUT),
        )
        self._hooks: List[AuditHook] = list(hooks) if hooks is not None else [LoggingAuditHook()]

    @property
    def config(self) -> ProviderConfig:
        """Get the adapter configuration."""
        return self._config

    @property
    def provider_name(self) -> str:
        return self.PROVIDER.value

    @property
    def model(self) -> str:
        return self._model

    @property
    def max_tokens(self) -> int:
        return self._max_tokens

    @property
    def api_url(self) -> str:
        return self._api_url

    def model_info(self) -> ModelInfo:
        """Get model information."""
        return ModelInfo(provider=self.provider_name, model=self._model, max_tokens=self._max_tokens)

    def add_hook(self, hook: AuditHook) -> None:
        """Register an additional audit hook."""
        self._hooks.append(hook)

    def call(
        self,
        conversation: Sequence[ConversationItem],
        schema: Optional[ToolSchema] = None,
        allowed_tokens: Optional[int] = None,
    ) -> CallResult:
        """Send the conversation to the provider and return the normalized result.

        Args:
            conversation: Ordered messages, oldest first
            schema: Tool schema forcing structured output; defaults to the configured one
            allowed_tokens: Completion token budget; defaults to ``max_tokens``

        Returns:
            Free-form text, or the decoded tool-call arguments when a schema was honored

        Raises:
            TransportError: The HTTP exchange failed or timed out
            ApiError: The provider answered with a non-success status
            EmptyResponseError: The response carried no usable content
            MalformedResponseError: The response could not be decoded
        """
        schema = schema or self._config.tool_schema
        tokens = allowed_tokens or self._max_tokens
        messages = [self._to_wire(item) for item in conversation]

        request = self.build_request(messages, schema, tokens)
        response = self._send(request)
        if not response.is_success:
            self._raise_api_error(response)
        data = self._decode_body(response)
        return self.parse_response(data, schema)

    @abstractmethod
    def build_request(
        self,
        messages: List[Dict[str, str]],
        schema: Optional[ToolSchema],
        allowed_tokens: int,
    ) -> ProviderRequest:
        """Build the provider-specific HTTP request."""

    @abstractmethod
    def parse_response(self, data: Dict[str, Any], schema: Optional[ToolSchema]) -> CallResult:
        """Extract the result from a successful response envelope."""

    def error_for_status(self, status_code: int, message: str, details: str) -> ApiError:
        """Build the exception for a non-success status; overridden to classify rate limits."""
        return ApiError(message, status_code=status_code, details=details, provider=self.provider_name)

    @staticmethod
    def decode_arguments(arguments: Any, provider: str) -> Dict[str, Any]:
        """Decode tool-call arguments that may arrive JSON-encoded or already decoded."""
        if isinstance(arguments, dict):
            return arguments
        try:
            decoded = json.loads(arguments)
        except (TypeError, json.JSONDecodeError) as e:
            raise MalformedResponseError(
                f"Tool call arguments from {provider} are not valid JSON: {e}", provider=provider
            ) from e
        if not isinstance(decoded, dict):
            raise MalformedResponseError(f"Tool call arguments from {provider} are not a JSON object", provider=provider)
        return decoded

    def _to_wire(self, item: ConversationItem) -> Dict[str, str]:
        if isinstance(item, Message):
            return item.to_wire()
        return {"role": str(item["role"]), "content": str(item["content"])}

    def _send(self, request: ProviderRequest) -> httpx.Response:
        for hook in self._hooks:
            hook.before_request(self.provider_name, request.url, request.body)
        headers = {"Content-Type": "application/json", **request.headers}
        try:
            response = self._client.post(request.url, headers=headers, json=request.body)
        except httpx.TimeoutException as e:
            raise TransportError(f"Request to {self.provider_name} timed out: {e}", provider=self.provider_name) from e
        except httpx.TransportError as e:
            raise TransportError(f"Request to {self.provider_name} failed: {e}", provider=self.provider_name) from e
        for hook in self._hooks:
            hook.after_response(self.provider_name, response.status_code, response.text)
        return response

    def _raise_api_error(self, response: httpx.Response) -> None:
        message: Optional[str] = None
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict) and isinstance(body.get("error"), dict):
            message = body["error"].get("message")
        raise self.error_for_status(
            response.status_code,
            f"API error: {message or response.text}",
            response.text,
        )

    def _decode_body(self, response: httpx.Response) -> Dict[str, Any]:
        try:
            data = response.json()
        except ValueError as e:
            raise MalformedResponseError(
                f"Invalid JSON response from {self.provider_name} API", provider=self.provider_name
            ) from e
        if not isinstance(data, dict):
            raise MalformedResponseError(
                f"Unexpected response shape from {self.provider_name} API", provider=self.provider_name
            )
        return data

    def close(self) -> None:
        """Close the underlying HTTP client."""
        self._client.close()

    def __repr__(self) -> str:
        """String representation."""
        return f"{self.__class__.__name__}(provider={self.provider_name}, model={self._model})"
