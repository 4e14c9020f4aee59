"""Error types for the debug assistant.

Purpose:
- Give every failure category its own exception type so callers branch on the
  class rather than on message text.
- Carry HTTP-oriented context (status code, raw body) for provider failures and
  the failure kind for filesystem operations.

Usage:
- Catch ``ProviderError`` around model calls; these are terminal for a session.
- ``FileOperationError`` and ``UnknownActionError`` are caught by the dispatcher
  and turned into replies for the model.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional


class DebugAssistantError(Exception):
    """Base error for all debug assistant exceptions."""


class ConfigurationError(DebugAssistantError):
    """Raised when settings, prompt files or schema files cannot be used."""


class SchemaValidationError(DebugAssistantError):
    """Raised when a tool schema has an invalid shape."""


class UnknownProviderError(DebugAssistantError):
    """Raised for any provider identifier the registry does not know."""

    def __init__(self, provider: Any) -> None:
        super().__init__(f"Unknown provider: {provider}")
        self.provider = provider


class ProviderError(DebugAssistantError):
    """Base error for failures while talking to a model provider.

    Args:
        message: Human-readable error description.
        provider: Identifier of the provider that failed.
    """

    def __init__(self, message: str, *, provider: Optional[str] = None) -> None:
        super().__init__(message)
        self.provider = provider


class TransportError(ProviderError):
    """Raised when the HTTP exchange itself fails (connection error, timeout)."""


class ApiError(ProviderError):
    """Raised when the provider answers with a non-success HTTP status.

    Args:
        message: Error message extracted from the provider's error envelope.
        status_code: HTTP status code of the response.
        details: Raw response body.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        details: Optional[Any] = None,
        provider: Optional[str] = None,
    ) -> None:
        super().__init__(message, provider=provider)
        self.status_code = status_code
        self.details = details


class RateLimitError(ApiError):
    """Raised when the provider signals rate limiting or overload (HTTP 429/503)."""


class EmptyResponseError(ProviderError):
    """Raised when a successful response carries no usable content."""


class MalformedResponseError(ProviderError):
    """Raised when a response body or tool-call payload cannot be decoded."""


class FileOperationKind(str, Enum):
    """Failure categories for file reads and writes."""

    NOT_FOUND = "not_found"
    IS_DIRECTORY = "is_directory"
    PERMISSION_DENIED = "permission_denied"
    OTHER = "other"

    def __str__(self) -> str:
        return self.value


class FileOperationError(DebugAssistantError):
    """Raised by file handlers; the dispatcher renders it into a reply.

    Args:
        kind: Failure category.
        path: Path that was being read or written.
        detail: Underlying error message.
    """

    def __init__(self, kind: FileOperationKind, path: str, detail: str = "") -> None:
        super().__init__(f"{kind.value} for '{path}': {detail}" if detail else f"{kind.value} for '{path}'")
        self.kind = kind
        self.path = path
        self.detail = detail

    @classmethod
    def from_os_error(cls, path: str, error: OSError) -> "FileOperationError":
        """Classify an ``OSError`` raised by a filesystem call."""
        if isinstance(error, FileNotFoundError):
            kind = FileOperationKind.NOT_FOUND
        elif isinstance(error, IsADirectoryError):
            kind = FileOperationKind.IS_DIRECTORY
        elif isinstance(error, PermissionError):
            kind = FileOperationKind.PERMISSION_DENIED
        else:
            kind = FileOperationKind.OTHER
        return cls(kind, path, error.strerror or str(error))


class UnknownActionError(DebugAssistantError):
    """Raised when the model issues an action token the dispatcher does not handle."""

    def __init__(self, action: Optional[str]) -> None:
        super().__init__(f"Unknown action '{action}'")
        self.action = action
