"""Conversation messages and the persisted session record."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import Field

from .base import BaseSchema


class MessageRole(str, Enum):
    """Roles a stored conversation message can take."""

    USER = "user"
    ASSISTANT = "assistant"


class Message(BaseSchema):
    """One conversation turn as sent to and received from the provider."""

    role: MessageRole
    content: str

    @classmethod
    def user(cls, content: str) -> "Message":
        return cls(role=MessageRole.USER, content=content)

    @classmethod
    def assistant(cls, content: str) -> "Message":
        return cls(role=MessageRole.ASSISTANT, content=content)

    def to_wire(self) -> Dict[str, str]:
        """Plain ``{role, content}`` mapping used in provider payloads."""
        return {"role": self.role.value, "content": self.content}


class SessionMetadata(BaseSchema):
    """Metadata stored alongside the messages of a session."""

    use_case_type: str = Field(default="", description="Use case the session was started for")
    session_id: str = Field(..., description="Short random session identifier")
    provider: str = Field(..., description="Provider the session talks to")
    timestamp: str = Field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat(timespec="seconds"),
        description="ISO-8601 time of the last save",
    )


class SessionRecord(BaseSchema):
    """The full persisted state of a session."""

    metadata: SessionMetadata
    messages: List[Message] = Field(default_factory=list)

    @property
    def use_case(self) -> Optional[str]:
        return self.metadata.use_case_type or None

    def to_json_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode="json")
