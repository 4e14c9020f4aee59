"""Provider registry.

The registry maps a provider identifier to the adapter class implementing it
and exposes each provider's defaults. Every lookup goes through
``ProviderId.parse`` so an unrecognized identifier always raises
``UnknownProviderError``; nothing silently falls back to a default provider.
"""

from typing import Dict, List, Optional, Sequence, Type, Union

import httpx

from debug_assistant.core.logging_config import get_logger
from debug_assistant.errors import UnknownProviderError

from .anthropic import AnthropicAdapter
from .base import AuditHook, ProviderAdapter, ProviderConfig, ProviderId
from .deepseek import DeepSeekAdapter
from .gemini import GeminiAdapter
from .openai import OpenAIAdapter

logger = get_logger(__name__)

ProviderKey = Union[str, ProviderId]


class ProviderRegistry:
    """
    In-memory mapping of provider identifiers to adapter classes.

    Notes:
        - ``register`` refuses to overwrite an existing mapping.
        - Lookups for an unregistered identifier raise ``UnknownProviderError``.
    """

    def __init__(self) -> None:
        """Initialize an empty provider registry."""
        self._adapters: Dict[ProviderId, Type[ProviderAdapter]] = {}

    def register(self, adapter_cls: Type[ProviderAdapter]) -> None:
        """
        Register an adapter class under its ``PROVIDER`` identifier.

        Args:
            adapter_cls: A concrete ``ProviderAdapter`` subclass.

        Raises:
            ValueError: If an adapter is already registered for that provider.
        """
        provider_id = adapter_cls.PROVIDER
        if provider_id in self._adapters:
            raise ValueError(f"Provider '{provider_id}' is already registered")
        self._adapters[provider_id] = adapter_cls
        logger.debug(f"Registered provider adapter: {provider_id} -> {adapter_cls.__name__}")

    def adapter_class(self, provider: ProviderKey) -> Type[ProviderAdapter]:
        """
        Retrieve the adapter class for a provider.

        Raises:
            UnknownProviderError: If the identifier is not supported or not registered.
        """
        provider_id = ProviderId.parse(provider)
        try:
            return self._adapters[provider_id]
        except KeyError:
            raise UnknownProviderError(provider) from None

    def has(self, provider: ProviderKey) -> bool:
        """Check whether an adapter is registered for ``provider``."""
        try:
            self.adapter_class(provider)
        except UnknownProviderError:
            return False
        return True

    def create(
        self,
        config: ProviderConfig,
        *,
        client: Optional[httpx.Client] = None,
        hooks: Optional[Sequence[AuditHook]] = None,
    ) -> ProviderAdapter:
        """
        Construct the adapter for ``config.provider_id``.

        Missing model, token limit and URL are filled from the adapter defaults;
        values set on ``config`` win.
        """
        adapter_cls = self.adapter_class(config.provider_id)
        adapter = adapter_cls(config, client=client, hooks=hooks)
        logger.info(f"Created {adapter.provider_name} adapter (model={adapter.model}, max_tokens={adapter.max_tokens})")
        return adapter

    def available_providers(self) -> List[str]:
        """Identifiers of all registered providers, in registration order."""
        return [provider_id.value for provider_id in self._adapters]

    def default_model(self, provider: ProviderKey) -> str:
        return self.adapter_class(provider).DEFAULT_MODEL

    def default_token_limit(self, provider: ProviderKey) -> int:
        return self.adapter_class(provider).DEFAULT_TOKEN_LIMIT

    def provider_url(self, provider: ProviderKey) -> str:
        return self.adapter_class(provider).DEFAULT_API_URL


def build_default_registry() -> ProviderRegistry:
    """Create a registry with the four built-in providers."""
    registry = ProviderRegistry()
    for adapter_cls in (AnthropicAdapter, OpenAIAdapter, GeminiAdapter, DeepSeekAdapter):
        registry.register(adapter_cls)
    return registry


default_registry = build_default_registry()
