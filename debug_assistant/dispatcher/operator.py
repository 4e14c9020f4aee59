"""The human at the console.

The dispatcher only talks to the operator through ``notify`` and ``ask`` so the
whole conversation loop can be driven by a scripted operator in tests.
"""

import sys
from enum import Enum
from typing import Callable, Optional, Protocol, TextIO


class NoticeKind(str, Enum):
    """Categories of operator notices; rendered as a ``[KIND]`` prefix."""

    INFO = "info"
    AI = "ai"
    USER = "user"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"
    DEBUG = "debug"

    def __str__(self) -> str:
        return self.value


class Operator(Protocol):
    """Interaction seam between the dispatcher and the human."""

    def notify(self, text: str, kind: NoticeKind = NoticeKind.INFO) -> None: ...

    def ask(self, prompt: str) -> str: ...


class ConsoleOperator:
    """Operator reading from stdin and writing plain text to stdout."""

    def __init__(
        self,
        *,
        input_fn: Callable[[str], str] = input,
        stream: Optional[TextIO] = None,
        show_debug: bool = False,
    ) -> None:
        self._input = input_fn
        self._stream = stream
        self._show_debug = show_debug

    def notify(self, text: str, kind: NoticeKind = NoticeKind.INFO) -> None:
        if kind is NoticeKind.DEBUG and not self._show_debug:
            return
        print(f"[{kind.value.upper()}] {text}", file=self._stream or sys.stdout)

    def ask(self, prompt: str) -> str:
        """Show ``prompt`` and return the stripped answer.

        Raises:
            EOFError: If stdin is closed
        """
        if prompt:
            print(prompt, file=self._stream or sys.stdout)
        return self._input("> ").strip()
