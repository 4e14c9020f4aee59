"""File-backed prompts, templates and the response schema.

Layout under the prompts directory::

    prompts/
      system/<use_case>_system_prompt.md
      templates/<name>_template.md

The system prompt for a use case falls back to ``general_system_prompt.md`` and
then to the configured default prompt file. Templates contain ``[placeholder]``
markers which are filled one by one from the operator's answers.
"""

import re
from pathlib import Path
from typing import Callable, List, Optional, Union

from debug_assistant.core.logging_config import get_logger
from debug_assistant.errors import ConfigurationError, SchemaValidationError
from debug_assistant.schemas.tool_schema import ToolSchema

logger = get_logger(__name__)

GENERAL_USE_CASE = "general"
SYSTEM_PROMPT_SUFFIX = "_system_prompt.md"
TEMPLATE_SUFFIX = "_template.md"

_PLACEHOLDER = re.compile(r"\[(.*?)\]")


def template_placeholders(template: str) -> List[str]:
    """Unique placeholder names in ``template``, longest first.

    Longer names are substituted first so a placeholder that contains a shorter
    one is not clobbered by the shorter substitution.
    """
    unique = list(dict.fromkeys(_PLACEHOLDER.findall(template)))
    return sorted(unique, key=len, reverse=True)


def fill_template(template: str, answer: Callable[[str], str]) -> str:
    """Replace every ``[placeholder]`` with ``answer(placeholder)``; each name is asked once."""
    filled = template
    for placeholder in template_placeholders(template):
        filled = filled.replace(f"[{placeholder}]", answer(placeholder))
    return filled


class PromptLibrary:
    """Access to the prompt files of one debugger directory."""

    def __init__(self, prompts_dir: Union[str, Path], default_system_prompt: Union[str, Path]) -> None:
        """
        Args:
            prompts_dir: Directory holding ``system/`` and ``templates/``
            default_system_prompt: Prompt file used when no use-case prompt exists
        """
        self._prompts_dir = Path(prompts_dir)
        self._default_system_prompt = Path(default_system_prompt)

    @property
    def system_dir(self) -> Path:
        return self._prompts_dir / "system"

    @property
    def templates_dir(self) -> Path:
        return self._prompts_dir / "templates"

    def system_prompt_path(self, use_case: Optional[str]) -> Path:
        """First existing prompt file among the use case, ``general`` and the default."""
        candidates = [self.system_dir / f"{name}{SYSTEM_PROMPT_SUFFIX}" for name in (use_case, GENERAL_USE_CASE) if name]
        for candidate in candidates:
            if candidate.is_file():
                return candidate
        return self._default_system_prompt

    def system_prompt_for(self, use_case: Optional[str]) -> str:
        """Load the system prompt for ``use_case``.

        Raises:
            ConfigurationError: If neither a specialized nor the default prompt can be read
        """
        path = self.system_prompt_path(use_case)
        if path == self._default_system_prompt:
            logger.warning(f"Specialized system prompt not found for {use_case}, using default")
        else:
            logger.debug(f"Using system prompt {path.name} for {use_case}")
        try:
            return path.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigurationError(f"Cannot read system prompt {path}: {e}") from e

    def list_templates(self) -> List[str]:
        """Names of all ``*_template.md`` files, sorted."""
        if not self.templates_dir.is_dir():
            return []
        return sorted(path.name[: -len(TEMPLATE_SUFFIX)] for path in self.templates_dir.glob(f"*{TEMPLATE_SUFFIX}"))

    def load_template(self, name: str) -> Optional[str]:
        """Template text for ``name``, or ``None`` when there is no such template."""
        path = self.templates_dir / f"{name}{TEMPLATE_SUFFIX}"
        if not path.is_file():
            logger.debug(f"Template {name} not found at {path}")
            return None
        logger.debug(f"Loaded template: {name}")
        return path.read_text(encoding="utf-8")


def load_response_schema(path: Union[str, Path]) -> ToolSchema:
    """Load the tool schema the model must answer with.

    Raises:
        ConfigurationError: If the file is missing, unreadable or not a valid schema
    """
    try:
        return ToolSchema.from_file(Path(path))
    except OSError as e:
        raise ConfigurationError(f"Cannot read response schema {path}: {e}") from e
    except SchemaValidationError as e:
        raise ConfigurationError(str(e)) from e
