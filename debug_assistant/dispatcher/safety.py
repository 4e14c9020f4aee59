"""AI-mediated safety check for shell commands.

Before a command proposed by the model is executed, a separate adapter call
asks the model to classify it. The call forces the ``command_evaluation`` tool
so the answer is a single ``is_ok`` field; only ``"1"`` counts as safe.
Provider failures propagate and end the session like any other provider error.
"""

import json
from pathlib import Path
from typing import Any, Optional

import httpx

from debug_assistant.core.logging_config import get_logger
from debug_assistant.providers.base import CallResult, ProviderAdapter, ProviderConfig
from debug_assistant.providers.registry import ProviderRegistry, default_registry
from debug_assistant.schemas.messages import Message
from debug_assistant.schemas.tool_schema import ToolSchema

logger = get_logger(__name__)

SAFETY_ALLOWED_TOKENS = 1000

SAFETY_PROMPT_TEMPLATE = """Evaluate the safety of the following shell command in the context of a project located at: {working_dir}.
Ensure the command:
- Does not perform any destructive actions (e.g., delete system files).
- Operates strictly within the specified project directory.
- Is relevant to the problem or context at hand.

Please respond with 1 or 0, and suggest a safer alternative if deemed unsafe, 1 for safe and 0 for unsafe.
"""

COMMAND_EVALUATION_SCHEMA = ToolSchema.parse(
    {
        "name": "command_evaluation",
        "description": "Evaluate the safety of shell commands",
        "inputs": [
            {
                "name": "is_ok",
                "type": "string",
                "description": "1 for safe, 0 for unsafe",
                "enum": ["1", "0"],
                "required": True,
            }
        ],
    }
)


def safety_system_prompt(working_dir: Path) -> str:
    return SAFETY_PROMPT_TEMPLATE.format(working_dir=working_dir)


class SafetyGate:
    """Classifies shell commands as safe or unsafe with one structured model call."""

    def __init__(self, adapter: ProviderAdapter) -> None:
        """
        Args:
            adapter: Adapter configured with the safety system prompt
        """
        self._adapter = adapter

    @classmethod
    def for_provider(
        cls,
        config: ProviderConfig,
        working_dir: Path,
        *,
        registry: ProviderRegistry = default_registry,
        client: Optional[httpx.Client] = None,
    ) -> "SafetyGate":
        """Build a gate on the same provider as ``config`` with the safety prompt and schema."""
        gate_config = config.model_copy(
            update={
                "system_prompt": safety_system_prompt(working_dir),
                "tool_schema": COMMAND_EVALUATION_SCHEMA,
            }
        )
        return cls(registry.create(gate_config, client=client))

    @property
    def adapter(self) -> ProviderAdapter:
        return self._adapter

    def is_safe(self, command: str) -> bool:
        """Ask the model whether ``command`` is safe to run.

        Raises:
            ProviderError: If the classification call itself fails
        """
        logger.debug(f"Checking if command is safe: '{command}'")
        result = self._adapter.call(
            [Message.user(f"Command: {command}")],
            schema=COMMAND_EVALUATION_SCHEMA,
            allowed_tokens=SAFETY_ALLOWED_TOKENS,
        )
        verdict = self._verdict(result)
        safe = verdict == "1"
        logger.info(f"Command '{command}' evaluated as {'safe' if safe else 'potentially unsafe'} (is_ok={verdict!r})")
        return safe

    @staticmethod
    def _verdict(result: CallResult) -> Optional[str]:
        data: Any = result
        if isinstance(result, str):
            try:
                data = json.loads(result)
            except json.JSONDecodeError:
                return None
        if not isinstance(data, dict) or data.get("is_ok") is None:
            return None
        return str(data["is_ok"]).strip()
