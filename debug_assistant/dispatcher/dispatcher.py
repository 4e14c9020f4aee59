"""The action-dispatch loop.

Each model turn is decoded into an ``Action`` and carried out against the
filesystem, the shell or the operator. The outcome is a reply that becomes the
next user message. After every turn the JSON-encoded model result and the reply
are appended to the conversation and the whole conversation is persisted.

States:

- ``AWAITING_MODEL_TURN``: the conversation ends with a user message and the
  next step calls the provider;
- ``ENDED``: the operator confirmed ``issue_resolved``; terminal.

Provider, transport and decoding errors are not handled here; they propagate
out of ``step``/``run`` and end the session.
A failed snapshot write is reported to the operator and the session goes on.
"""

import json
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List, Optional, Sequence

from debug_assistant.core.logging_config import get_logger
from debug_assistant.errors import FileOperationError, FileOperationKind, UnknownActionError
from debug_assistant.providers.base import CallResult, ProviderAdapter
from debug_assistant.schemas.actions import Action, ActionKind
from debug_assistant.schemas.messages import Message
from debug_assistant.session.context import SessionContext
from debug_assistant.session.store import ConversationStore

from .decoder import ActionDecoder
from .definitions import CommandRunInput, CommandRunOutput, FileReadInput, FileWriteInput
from .handlers import (
    CommandRunHandler,
    FileReadHandler,
    FileWriteHandler,
    ToolHandlerRegistry,
    build_default_handlers,
)
from .operator import NoticeKind, Operator
from .safety import SafetyGate

logger = get_logger(__name__)

FILES_HEADER = "Here is the content of the requested files:\n\n"
NO_FILE_PATHS = "[Error: No file paths specified]"
DEFAULT_QUESTION = "Please provide more information:"
REPLY_TRUNCATE_AT = 100
REQUIRED_HANDLERS = ("read_file", "write_file", "run_command")

_READ_ERROR_MARKERS: Dict[FileOperationKind, str] = {
    FileOperationKind.NOT_FOUND: "[Error: File not found]",
    FileOperationKind.IS_DIRECTORY: "[Error: Cannot read directory as a file]",
    FileOperationKind.PERMISSION_DENIED: "[Error: Permission denied]",
}

_WRITE_ERROR_REPLIES: Dict[FileOperationKind, str] = {
    FileOperationKind.IS_DIRECTORY: "Error: Cannot write to a directory. Please specify a file path.",
    FileOperationKind.PERMISSION_DENIED: "Error: Permission denied to write to the file.",
    FileOperationKind.NOT_FOUND: "Error: Directory does not exist.",
}


class DispatcherState(str, Enum):
    """States of the dispatch loop."""

    AWAITING_MODEL_TURN = "awaiting_model_turn"
    ENDED = "ended"


@dataclass(frozen=True)
class ActionOutcome:
    """Reply for the model and the state the loop moves to."""

    reply: str
    state: DispatcherState = DispatcherState.AWAITING_MODEL_TURN


def _is_yes(answer: str) -> bool:
    return answer.strip().lower() in ("y", "yes")


def _is_no(answer: str) -> bool:
    return answer.strip().lower() in ("n", "no")


class ActionDispatcher:
    """Drives the conversation between the model and the operator.

    Args:
        adapter: Provider adapter configured with the session's system prompt and schema
        store: Where the conversation is persisted after every turn
        context: Identity and working directory of the session
        operator: The human-facing side
        messages: Existing conversation, oldest first; must end with a user message
        safety_gate: Command classifier; without one every command needs operator approval
        handlers: Side-effect handlers; defaults to the built-in read/write/run handlers
        decoder: Decoder chain for model results
        command_timeout: Seconds a command may run; ``None`` waits forever
    """

    def __init__(
        self,
        adapter: ProviderAdapter,
        store: ConversationStore,
        context: SessionContext,
        operator: Operator,
        messages: Sequence[Message],
        *,
        safety_gate: Optional[SafetyGate] = None,
        handlers: Optional[ToolHandlerRegistry] = None,
        decoder: Optional[ActionDecoder] = None,
        command_timeout: Optional[float] = None,
    ) -> None:
        if not messages:
            raise ValueError("A conversation needs at least the initial user message")
        self._adapter = adapter
        self._store = store
        self._context = context
        self._operator = operator
        self._messages: List[Message] = list(messages)
        self._safety_gate = safety_gate
        self._handlers = handlers or build_default_handlers()
        missing = [name for name in REQUIRED_HANDLERS if self._handlers.get(name) is None]
        if missing:
            raise ValueError(f"Handler registry is missing: {', '.join(missing)}")
        self._decoder = decoder or ActionDecoder()
        self._command_timeout = command_timeout
        self._state = DispatcherState.AWAITING_MODEL_TURN
        self._actions: Dict[ActionKind, Callable[[Action], ActionOutcome]] = {
            ActionKind.REQUEST_FILE: self._request_file,
            ActionKind.UPDATE_FILE: self._update_file,
            ActionKind.RUN_COMMAND: self._run_command,
            ActionKind.REQUEST_INPUT: self._request_input,
            ActionKind.ISSUE_RESOLVED: self._issue_resolved,
            ActionKind.MESSAGE: self._message,
        }

    @property
    def state(self) -> DispatcherState:
        return self._state

    @property
    def messages(self) -> List[Message]:
        """A copy of the conversation so far."""
        return list(self._messages)

    @property
    def context(self) -> SessionContext:
        return self._context

    def save(self) -> bool:
        """Persist the conversation; a failed write is reported and the session goes on.

        Returns:
            Whether the snapshot was written
        """
        try:
            self._store.save_messages(
                self._messages,
                session_id=self._context.session_id,
                provider=self._context.provider,
                use_case=self._context.use_case,
            )
        except OSError as e:
            logger.warning(f"Failed to save conversation to {self._store.path}: {e}")
            self._operator.notify(f"Failed to save conversation: {e}", NoticeKind.WARNING)
            return False
        return True

    def run(self) -> None:
        """Loop until the operator confirms the issue is resolved."""
        logger.info(f"Starting session {self._context.session_id} with {self._context.provider} ({self._context.use_case})")
        while self._state is not DispatcherState.ENDED:
            self.step()
        logger.info("Issue resolved. Session ended.")

    def step(self) -> DispatcherState:
        """Run one model turn: call, decode, handle, append, persist."""
        if self._state is DispatcherState.ENDED:
            return self._state

        provider = self._context.provider.capitalize()
        self._operator.notify(f"Sending request to {provider}...", NoticeKind.AI)
        result = self._adapter.call(self._messages)
        self._operator.notify(f"Received response from {provider}", NoticeKind.AI)
        logger.info("AI response received")

        action = self._decoder.decode(result)
        outcome = self.handle(action)
        self._append_turn(result, outcome.reply)
        self.save()
        self._state = outcome.state
        return self._state

    def handle(self, action: Action) -> ActionOutcome:
        """Carry out ``action`` and return the reply for the model."""
        try:
            return self._dispatch(action)
        except UnknownActionError as e:
            self._operator.notify(f"Unknown action from AI: '{e.action or ''}'", NoticeKind.WARNING)
            return ActionOutcome(f"Error: Unknown action '{e.action or ''}'. Please specify a valid action.")

    def _dispatch(self, action: Action) -> ActionOutcome:
        kind = action.kind
        if kind is None:
            raise UnknownActionError(action.action)
        return self._actions[kind](action)

    def _append_turn(self, result: CallResult, reply: str) -> None:
        self._messages.append(Message.assistant(json.dumps(result, ensure_ascii=False)))
        self._messages.append(Message.user(reply))
        truncated = reply if len(reply) <= REPLY_TRUNCATE_AT else f"{reply[:REPLY_TRUNCATE_AT - 3]}..."
        logger.info(f"User reply: {truncated}")

    # ------------------------------------------------------------------
    # Action handlers
    # ------------------------------------------------------------------

    def _request_file(self, action: Action) -> ActionOutcome:
        paths = action.detail_list("file_paths")
        if not paths:
            self._operator.notify("AI requested files but didn't specify any file paths", NoticeKind.WARNING)
            return ActionOutcome(NO_FILE_PATHS)

        self._operator.notify(f"AI is reading {len(paths)} file(s): {', '.join(paths)}", NoticeKind.AI)
        reader: FileReadHandler = self._handlers.get("read_file")
        parts = [FILES_HEADER]
        for path in paths:
            try:
                body = reader(FileReadInput(file_path=self._context.resolve(path)))
                self._operator.notify(f"Read file: {path} ({len(body.splitlines())} lines)", NoticeKind.DEBUG)
            except FileOperationError as e:
                body = _READ_ERROR_MARKERS.get(e.kind) or f"[Error: {e.detail or e}]"
                self._operator.notify(f"Cannot read {path}: {body}", NoticeKind.WARNING)
            parts.append(f'<file name="{path}">\n{body}\n</file>\n')
        return ActionOutcome("".join(parts))

    def _update_file(self, action: Action) -> ActionOutcome:
        path = action.detail_str("file_path")
        content = action.detail_str("content")
        if path is None or content is None:
            self._operator.notify("AI tried to update a file but didn't provide required details", NoticeKind.WARNING)
            return ActionOutcome("Error: No file path or content specified.")

        self._operator.notify(f"AI is updating file: {path}", NoticeKind.AI)
        writer: FileWriteHandler = self._handlers.get("write_file")
        try:
            writer(FileWriteInput(file_path=self._context.resolve(path), content=content))
        except FileOperationError as e:
            reply = _WRITE_ERROR_REPLIES.get(e.kind) or f"Error: {e.detail or e}"
            self._operator.notify(f"Cannot update {path}: {reply}", NoticeKind.WARNING)
            return ActionOutcome(reply)

        self._operator.notify(f"Successfully updated {path} ({len(content.splitlines())} lines)", NoticeKind.SUCCESS)
        return ActionOutcome(f"Updated {path}.")

    def _run_command(self, action: Action) -> ActionOutcome:
        command = action.detail_str("command")
        if not command:
            self._operator.notify("AI asked to run a command but didn't specify one", NoticeKind.WARNING)
            return ActionOutcome("Error: No command specified.")

        self._operator.notify(f"AI wants to run command: '{command}'", NoticeKind.AI)
        approved = self._safety_gate is not None and self._safety_gate.is_safe(command)
        if approved:
            self._operator.notify("Command evaluated as safe", NoticeKind.SUCCESS)
        else:
            self._operator.notify("Command evaluated as potentially unsafe", NoticeKind.WARNING)
            approved = _is_yes(self._operator.ask(f"Run '{command}'? [y/n]"))

        if not approved:
            self._operator.notify("Command execution skipped", NoticeKind.INFO)
            return ActionOutcome("Command skipped.")

        self._operator.notify(f"Executing command: {command}", NoticeKind.INFO)
        runner: CommandRunHandler = self._handlers.get("run_command")
        result = runner(CommandRunInput(command=command, cwd=self._context.working_dir, timeout=self._command_timeout))
        return ActionOutcome(self._command_reply(result))

    def _command_reply(self, result: CommandRunOutput) -> str:
        if result.not_found:
            self._operator.notify(f"Command not found: {result.command}", NoticeKind.WARNING)
            return f"Error: Command '{result.command}' not found."
        if result.error:
            self._operator.notify(f"Cannot run command: {result.error}", NoticeKind.WARNING)
            return f"Error: Cannot run command '{result.command}': {result.error}"
        if result.timed_out:
            self._operator.notify(f"Command timed out: {result.command}", NoticeKind.WARNING)
            return f"Command timed out after {self._command_timeout} seconds. Output: {result.output}"
        if result.success:
            self._operator.notify("Command executed successfully", NoticeKind.SUCCESS)
            return f"Command executed successfully. Output: {result.output}"
        self._operator.notify(f"Command failed with exit status {result.exit_code}", NoticeKind.WARNING)
        return f"Command failed with exit status {result.exit_code}. Output: {result.output}"

    def _request_input(self, action: Action) -> ActionOutcome:
        self._operator.notify("AI is requesting additional information", NoticeKind.AI)
        if action.message:
            self._operator.notify(action.message, NoticeKind.AI)
        reply = self._operator.ask(action.detail_str("question") or DEFAULT_QUESTION)
        return ActionOutcome(reply)

    def _issue_resolved(self, action: Action) -> ActionOutcome:
        self._operator.notify("AI suggests the issue is resolved", NoticeKind.SUCCESS)
        if action.message:
            self._operator.notify(action.message, NoticeKind.SUCCESS)
        self._operator.notify(f"Solution: {action.detail_str('solution') or ''}", NoticeKind.SUCCESS)

        reply = self._operator.ask("Is the issue resolved? [y/n]")
        if _is_no(reply):
            explanation = self._operator.ask("Please explain why the issue is not resolved:")
            return ActionOutcome(f"{reply}\nExplanation: {explanation}")
        if _is_yes(reply):
            self._operator.notify("Issue resolved. Debug session completed.", NoticeKind.SUCCESS)
            return ActionOutcome(reply, DispatcherState.ENDED)
        return ActionOutcome(reply)

    def _message(self, action: Action) -> ActionOutcome:
        self._operator.notify("AI message:", NoticeKind.AI)
        self._operator.notify(action.detail_str("message") or action.message or "", NoticeKind.AI)
        return ActionOutcome(self._operator.ask("Your response:"))
