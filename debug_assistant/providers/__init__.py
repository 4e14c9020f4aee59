"""Model provider adapters.

One adapter per provider normalizes its chat and tool-calling wire format into
``ProviderAdapter.call(conversation, schema, allowed_tokens) -> CallResult``.
Use ``default_registry`` to look adapters and defaults up by identifier.
"""

from .anthropic import AnthropicAdapter
from .base import (
    AuditHook,
    CallResult,
    LoggingAuditHook,
    ModelInfo,
    ProviderAdapter,
    ProviderConfig,
    ProviderId,
    ProviderRequest,
)
from .deepseek import DeepSeekAdapter
from .gemini import GeminiAdapter
from .openai import OpenAIAdapter
from .registry import ProviderRegistry, build_default_registry, default_registry
from .schema_translator import (
    SchemaTranslator,
    to_anthropic_tool,
    to_gemini_schema,
    to_openai_tool,
    to_provider_schema,
)

__all__ = [
    "AnthropicAdapter",
    "AuditHook",
    "CallResult",
    "DeepSeekAdapter",
    "GeminiAdapter",
    "LoggingAuditHook",
    "ModelInfo",
    "OpenAIAdapter",
    "ProviderAdapter",
    "ProviderConfig",
    "ProviderId",
    "ProviderRegistry",
    "ProviderRequest",
    "SchemaTranslator",
    "build_default_registry",
    "default_registry",
    "to_anthropic_tool",
    "to_gemini_schema",
    "to_openai_tool",
    "to_provider_schema",
]
