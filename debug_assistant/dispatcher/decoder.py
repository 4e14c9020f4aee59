"""Turning a provider ``CallResult`` into an ``Action``.

Decoders are tried in order and the first one that yields an action wins:

1. a mapping is used as-is;
2. a string that is, as a whole, a JSON object;
3. a string containing a fenced ```json block holding a JSON object;
4. any other string becomes a plain ``message`` action carrying the raw text.

Anything that is neither a string nor a mapping is a ``MalformedResponseError``.
"""

import json
import re
from typing import Any, Callable, List, Mapping, Optional, Sequence

from pydantic import ValidationError

from debug_assistant.core.logging_config import get_logger
from debug_assistant.errors import MalformedResponseError
from debug_assistant.schemas.actions import Action

logger = get_logger(__name__)

Decoder = Callable[[Any], Optional[Action]]

_FENCED_JSON = re.compile(r"```json\s*([\s\S]*?)\s*```")


def _action_from(data: Any) -> Optional[Action]:
    if not isinstance(data, Mapping):
        return None
    try:
        return Action.model_validate(dict(data))
    except ValidationError as e:
        logger.debug(f"Mapping does not describe an action: {e}")
        return None


def _loads_object(text: str) -> Optional[Action]:
    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        return None
    return _action_from(data)


def decode_mapping(raw: Any) -> Optional[Action]:
    return _action_from(raw) if isinstance(raw, Mapping) else None


def decode_json_text(raw: Any) -> Optional[Action]:
    return _loads_object(raw.strip()) if isinstance(raw, str) else None


def decode_fenced_json(raw: Any) -> Optional[Action]:
    if not isinstance(raw, str):
        return None
    match = _FENCED_JSON.search(raw)
    return _loads_object(match.group(1)) if match else None


def decode_plain_message(raw: Any) -> Optional[Action]:
    return Action.plain_message(raw) if isinstance(raw, str) else None


DEFAULT_DECODERS: List[Decoder] = [
    decode_mapping,
    decode_json_text,
    decode_fenced_json,
    decode_plain_message,
]


class ActionDecoder:
    """Ordered chain of decoders applied to every model result."""

    def __init__(self, decoders: Optional[Sequence[Decoder]] = None) -> None:
        self._decoders = list(decoders) if decoders is not None else list(DEFAULT_DECODERS)

    def decode(self, raw: Any) -> Action:
        """Decode ``raw`` into an action.

        Raises:
            MalformedResponseError: If no decoder accepts ``raw``
        """
        if not isinstance(raw, (str, Mapping)):
            raise MalformedResponseError(f"Invalid response format: {type(raw).__name__}")
        for decoder in self._decoders:
            action = decoder(raw)
            if action is not None:
                logger.debug(f"Decoded action '{action.action}' with {decoder.__name__}")
                return action
        raise MalformedResponseError(f"Failed to parse AI response: {raw!r}")
