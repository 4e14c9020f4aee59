"""Pydantic schemas shared across the debug assistant."""

from .actions import Action, ActionKind
from .base import BaseSchema
from .messages import Message, MessageRole, SessionMetadata, SessionRecord
from .tool_schema import InputSpec, InputType, ToolSchema

__all__ = [
    "Action",
    "ActionKind",
    "BaseSchema",
    "InputSpec",
    "InputType",
    "Message",
    "MessageRole",
    "SessionMetadata",
    "SessionRecord",
    "ToolSchema",
]
