"""Action dispatch: decoding model turns and carrying them out."""

from .decoder import ActionDecoder
from .dispatcher import ActionDispatcher, ActionOutcome, DispatcherState
from .handlers import (
    CommandRunHandler,
    FileReadHandler,
    FileWriteHandler,
    ToolHandlerRegistry,
    build_default_handlers,
)
from .operator import ConsoleOperator, NoticeKind, Operator
from .safety import COMMAND_EVALUATION_SCHEMA, SafetyGate, safety_system_prompt

__all__ = [
    "COMMAND_EVALUATION_SCHEMA",
    "ActionDecoder",
    "ActionDispatcher",
    "ActionOutcome",
    "CommandRunHandler",
    "ConsoleOperator",
    "DispatcherState",
    "FileReadHandler",
    "FileWriteHandler",
    "NoticeKind",
    "Operator",
    "SafetyGate",
    "ToolHandlerRegistry",
    "build_default_handlers",
    "safety_system_prompt",
]
