"""Session identity and conversation persistence."""

from .context import DEFAULT_USE_CASE, SessionContext, new_session_id
from .store import ConversationStore

__all__ = ["DEFAULT_USE_CASE", "ConversationStore", "SessionContext", "new_session_id"]
