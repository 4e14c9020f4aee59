"""
Configuration Settings.

This module defines the debug assistant configuration using Pydantic's BaseSettings.
It automatically loads all configuration from environment variables and a .env file
without explicit dotenv loading.
"""

from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from debug_assistant.errors import UnknownProviderError
from debug_assistant.providers.base import ProviderConfig, ProviderId
from debug_assistant.schemas.tool_schema import ToolSchema

# =====================================================================
# Provider Configuration Model
# =====================================================================


class ProviderSettings(BaseModel):
    """Settings of a single provider as configured through the environment.

    ``model`` and ``token_limit`` stay ``None`` when not configured so the
    adapter falls back to its own defaults.
    """

    api_key: Optional[str] = Field(default=None, description="API key for authentication")
    api_url: Optional[str] = Field(default=None, description="Custom endpoint URL")
    model: Optional[str] = Field(default=None, description="Custom model identifier")
    token_limit: Optional[int] = Field(default=None, ge=1, description="Custom max tokens per call")
    extra: Dict[str, str] = Field(default_factory=dict, description="Provider-specific options")

    @property
    def has_usable_key(self) -> bool:
        """Whether the API key is set and is not a template placeholder."""
        return bool(self.api_key) and not self.api_key.startswith("your_")


# =====================================================================
# Main Settings Class
# =====================================================================


class Settings(BaseSettings):
    """
    Debug assistant settings model.

    All properties are automatically bound from environment variables and .env file.
    Pydantic's BaseSettings handles dotenv loading automatically via model_config.
    """

    # =====================================================================
    # Pydantic Configuration
    # =====================================================================
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=True,
        populate_by_name=True,
    )

    # =====================================================================
    # Debugger Directories and Files
    # =====================================================================
    debugger_dir: Path = Field(
        default_factory=lambda: Path("~/debugger").expanduser(),
        description="Root directory holding logs, prompts and schema files",
        alias="DEBUGGER_DIR",
    )
    system_prompt_file: Optional[Path] = Field(
        default=None,
        description="Default system prompt (defaults to <DEBUGGER_DIR>/system_prompt.md)",
        alias="DEBUGGER_SYSTEM_PROMPT",
    )
    response_schema_file: Optional[Path] = Field(
        default=None,
        description="Response schema JSON (defaults to <DEBUGGER_DIR>/general_schema.json)",
        alias="DEBUGGER_RESPONSE_SCHEMA",
    )

    # =====================================================================
    # Runtime Behaviour
    # =====================================================================
    provider: str = Field(
        default=ProviderId.ANTHROPIC.value,
        description="Active AI provider (anthropic, openai, gemini, deepseek)",
        alias="DEBUGGER_AI_PROVIDER",
    )
    log_level: str = Field(
        default="DEBUG",
        description="Session log file level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
        alias="DEBUGGER_LOG_LEVEL",
    )
    log_format: str = Field(
        default="detailed",
        description="Session log format (simple, detailed, json)",
        alias="DEBUGGER_LOG_FORMAT",
    )
    command_timeout: Optional[float] = Field(
        default=None,
        gt=0,
        description="Timeout in seconds for commands run on behalf of the model (unset = no timeout)",
        alias="DEBUGGER_COMMAND_TIMEOUT",
    )

    # =====================================================================
    # Anthropic
    # =====================================================================
    anthropic_api_key: Optional[str] = Field(default=None, alias="ANTHROPIC_API_KEY")
    anthropic_model: Optional[str] = Field(default=None, alias="ANTHROPIC_MODEL")
    anthropic_token_limit: Optional[int] = Field(default=None, alias="ANTHROPIC_TOKEN_LIMIT")
    anthropic_api_url: Optional[str] = Field(default=None, alias="ANTHROPIC_API_URL")
    anthropic_version: str = Field(default="2023-06-01", alias="ANTHROPIC_VERSION")
    anthropic_beta: str = Field(default="prompt-caching-2024-07-31", alias="ANTHROPIC_BETA")

    # =====================================================================
    # OpenAI
    # =====================================================================
    openai_api_key: Optional[str] = Field(default=None, alias="OPENAI_API_KEY")
    openai_model: Optional[str] = Field(default=None, alias="OPENAI_MODEL")
    openai_token_limit: Optional[int] = Field(default=None, alias="OPENAI_TOKEN_LIMIT")
    openai_api_url: Optional[str] = Field(default=None, alias="OPENAI_API_URL")
    openai_org_id: Optional[str] = Field(default=None, alias="OPENAI_ORG_ID")

    # =====================================================================
    # Gemini
    # =====================================================================
    gemini_api_key: Optional[str] = Field(default=None, alias="GEMINI_API_KEY")
    gemini_model: Optional[str] = Field(default=None, alias="GEMINI_MODEL")
    gemini_token_limit: Optional[int] = Field(default=None, alias="GEMINI_TOKEN_LIMIT")
    gemini_api_url: Optional[str] = Field(default=None, alias="GEMINI_API_URL")

    # =====================================================================
    # DeepSeek
    # =====================================================================
    deepseek_api_key: Optional[str] = Field(default=None, alias="DEEPSEEK_API_KEY")
    deepseek_model: Optional[str] = Field(default=None, alias="DEEPSEEK_MODEL")
    deepseek_token_limit: Optional[int] = Field(default=None, alias="DEEPSEEK_TOKEN_LIMIT")
    deepseek_api_url: Optional[str] = Field(default=None, alias="DEEPSEEK_API_URL")

    @field_validator("debugger_dir", "system_prompt_file", "response_schema_file", mode="after")
    @classmethod
    def _expand_home(cls, value: Optional[Path]) -> Optional[Path]:
        return value.expanduser() if value is not None else None

    # =====================================================================
    # Computed Properties
    # =====================================================================

    @property
    def logs_dir(self) -> Path:
        """Directory for session logs and conversation files."""
        return self.debugger_dir / "logs"

    @property
    def prompts_dir(self) -> Path:
        """Directory holding ``system/`` prompts and ``templates/``."""
        return self.debugger_dir / "prompts"

    @property
    def system_prompt_path(self) -> Path:
        """Effective default system prompt path."""
        return self.system_prompt_file or self.debugger_dir / "system_prompt.md"

    @property
    def response_schema_path(self) -> Path:
        """Effective response schema path."""
        return self.response_schema_file or self.debugger_dir / "general_schema.json"

    def provider_settings(self, provider: str) -> ProviderSettings:
        """Get the grouped settings of one provider.

        Raises:
            UnknownProviderError: If ``provider`` is not a supported identifier
        """
        provider_id = ProviderId.parse(provider)
        prefix = provider_id.value
        extra: Dict[str, str] = {}
        if provider_id is ProviderId.ANTHROPIC:
            extra = {"version": self.anthropic_version, "beta": self.anthropic_beta}
        elif provider_id is ProviderId.OPENAI and self.openai_org_id:
            extra = {"org_id": self.openai_org_id}
        return ProviderSettings(
            api_key=getattr(self, f"{prefix}_api_key"),
            api_url=getattr(self, f"{prefix}_api_url"),
            model=getattr(self, f"{prefix}_model"),
            token_limit=getattr(self, f"{prefix}_token_limit"),
            extra=extra,
        )

    def build_provider_config(
        self,
        provider: Optional[str] = None,
        *,
        system_prompt: Optional[str] = None,
        schema: Optional[ToolSchema] = None,
    ) -> ProviderConfig:
        """Build the adapter configuration for ``provider`` (defaults to the active one).

        Args:
            provider: Provider identifier, defaults to ``self.provider``
            system_prompt: System prompt to send with every call
            schema: Tool schema used to force structured output

        Returns:
            ProviderConfig with custom model/token limit when configured
        """
        provider_id = ProviderId.parse(provider or self.provider)
        group = self.provider_settings(provider_id.value)
        return ProviderConfig(
            provider_id=provider_id,
            api_key=group.api_key or "",
            api_url=group.api_url,
            model=group.model,
            max_tokens=group.token_limit,
            system_prompt=system_prompt,
            tool_schema=schema,
            provider_specific=group.extra,
        )

    def validate_setup(self, provider: Optional[str] = None) -> List[str]:
        """Check that directories, prompt files and the API key are usable.

        Returns:
            A list of human-readable problems; empty when the setup is valid
        """
        errors: List[str] = []
        if not self.debugger_dir.is_dir():
            errors.append(f"Root directory does not exist: {self.debugger_dir}")
        if not self.system_prompt_path.exists():
            errors.append(f"System prompt file not found: {self.system_prompt_path}")
        if not self.response_schema_path.exists():
            errors.append(f"Response schema file not found: {self.response_schema_path}")

        name = provider or self.provider
        try:
            group = self.provider_settings(name)
        except UnknownProviderError as e:
            errors.append(str(e))
        else:
            if not group.has_usable_key:
                errors.append(f"{name} API key looks invalid")
        return errors

    def describe(self, provider: Optional[str] = None) -> List[str]:
        """Render the effective configuration as display lines."""
        name = provider or self.provider
        group = self.provider_settings(name)
        info: Dict[str, Any] = {
            "AI Provider": name,
            "Model": group.model or "default",
            "Token Limit": group.token_limit or "default",
            "System Prompt": self.system_prompt_path,
            "Response Schema": self.response_schema_path,
            "Log Directory": self.logs_dir,
        }
        return [f"{key}: {value}" for key, value in info.items()]
