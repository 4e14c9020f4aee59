"""Actions the model can issue on each turn."""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import Field, field_validator

from .base import BaseSchema


class ActionKind(str, Enum):
    """Action tokens the dispatcher knows how to carry out."""

    REQUEST_FILE = "request_file"
    UPDATE_FILE = "update_file"
    RUN_COMMAND = "run_command"
    REQUEST_INPUT = "request_input"
    ISSUE_RESOLVED = "issue_resolved"
    MESSAGE = "message"

    def __str__(self) -> str:
        return self.value


class Action(BaseSchema):
    """A decoded model action.

    ``action`` keeps the raw (lower-cased) token so unknown actions can be
    reported back to the model verbatim.
    """

    action: Optional[str] = Field(default=None, description="Action token")
    details: Dict[str, Any] = Field(default_factory=dict, description="Action arguments")
    message: Optional[str] = Field(default=None, description="Text to surface to the operator")

    @field_validator("action", mode="before")
    @classmethod
    def _normalize_action(cls, value: Any) -> Optional[str]:
        if value is None:
            return None
        return str(value).strip().lower()

    @field_validator("details", mode="before")
    @classmethod
    def _default_details(cls, value: Any) -> Dict[str, Any]:
        return value if isinstance(value, dict) else {}

    @field_validator("message", mode="before")
    @classmethod
    def _stringify_message(cls, value: Any) -> Optional[str]:
        return None if value is None else str(value)

    @property
    def kind(self) -> Optional[ActionKind]:
        """The known action kind, or ``None`` for an unknown token."""
        try:
            return ActionKind(self.action)
        except ValueError:
            return None

    @classmethod
    def plain_message(cls, text: str) -> "Action":
        return cls(action=ActionKind.MESSAGE.value, message=text)

    def detail_str(self, key: str) -> Optional[str]:
        value = self.details.get(key)
        return None if value is None else str(value)

    def detail_list(self, key: str) -> List[str]:
        """A detail that should be a list of strings; a lone string becomes a one-item list."""
        value = self.details.get(key)
        if value is None or value == "":
            return []
        if isinstance(value, (list, tuple)):
            return [str(v) for v in value]
        return [str(value)]
