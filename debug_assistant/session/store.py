"""Persistence of conversation snapshots.

The whole session (metadata plus every message) is rewritten on each turn. A
snapshot is first written to a temporary file in the target directory and then
moved over the previous one with ``os.replace``, so an interrupted write leaves
the last complete snapshot in place.
"""

import json
import os
import re
import tempfile
from pathlib import Path
from typing import Any, Optional, Sequence, Union

from pydantic import ValidationError

from debug_assistant.core.logging_config import get_logger
from debug_assistant.schemas.messages import Message, SessionMetadata, SessionRecord

from .context import new_session_id

logger = get_logger(__name__)

_SESSION_ID_IN_NAME = re.compile(r"conversation_([0-9a-f]+)\.json$")


class ConversationStore:
    """Read and write session snapshots as pretty-printed JSON files."""

    def __init__(self, path: Union[str, Path]) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def save(self, record: SessionRecord) -> None:
        """Atomically replace the snapshot with ``record``.

        Raises:
            OSError: If the directory cannot be created or the file cannot be written
        """
        self._path.parent.mkdir(parents=True, exist_ok=True)
        payload = json.dumps(record.to_json_dict(), indent=2, ensure_ascii=False)

        fd, tmp_name = tempfile.mkstemp(dir=self._path.parent, prefix=f".{self._path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
            os.replace(tmp_name, self._path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
        logger.debug(f"Conversation saved to {self._path} ({len(record.messages)} messages)")

    def save_messages(
        self,
        messages: Sequence[Message],
        *,
        session_id: str,
        provider: str,
        use_case: str = "",
    ) -> SessionRecord:
        """Stamp ``messages`` with fresh metadata, save them and return the record."""
        record = SessionRecord(
            metadata=SessionMetadata(use_case_type=use_case, session_id=session_id, provider=provider),
            messages=list(messages),
        )
        self.save(record)
        return record

    def load(self) -> Optional[SessionRecord]:
        """Read the snapshot back.

        Returns:
            The session record, or ``None`` when the file is absent, empty or unreadable,
            in which case a fresh session should be started.
        """
        if not self._path.is_file():
            logger.info(f"No conversation file at {self._path}; starting a fresh session")
            return None
        try:
            raw = self._path.read_text(encoding="utf-8")
        except OSError as e:
            logger.warning(f"Cannot read conversation file {self._path}: {e}")
            return None
        if not raw.strip():
            logger.info(f"Conversation file {self._path} is empty; starting a fresh session")
            return None
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning(f"Conversation file {self._path} is not valid JSON: {e}")
            return None
        return self._to_record(data)

    def _to_record(self, data: Any) -> Optional[SessionRecord]:
        # Older files hold a bare list of messages without metadata.
        if isinstance(data, list):
            data = {"metadata": {"session_id": self._session_id_from_name(), "provider": ""}, "messages": data}
        try:
            record = SessionRecord.model_validate(data)
        except ValidationError as e:
            logger.warning(f"Conversation file {self._path} has an unexpected shape: {e}")
            return None
        logger.info(f"Loaded {len(record.messages)} messages from {self._path}")
        return record

    def _session_id_from_name(self) -> str:
        match = _SESSION_ID_IN_NAME.search(self._path.name)
        return match.group(1) if match else new_session_id()
