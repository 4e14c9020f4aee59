"""Side-effect handlers for file and command actions.

File handlers raise ``FileOperationError`` with a failure kind; the dispatcher
renders the kind into the reply sent back to the model. The command handler
never raises for a failing command: exit status, output, spawn failure, an
unusable command line and timeout are all reported in ``CommandRunOutput``.
"""

import subprocess
import time
from abc import ABC, abstractmethod
from typing import Any, Dict, Generic, Optional, TypeVar

from debug_assistant.core.logging_config import get_logger
from debug_assistant.errors import FileOperationError, FileOperationKind

from .definitions import (
    CommandRunInput,
    CommandRunOutput,
    FileReadInput,
    FileWriteInput,
    FileWriteOutput,
)

logger = get_logger(__name__)

# Exit status POSIX shells use for "command not found"
COMMAND_NOT_FOUND_STATUS = 127

# Type variables for generic handler
InputType = TypeVar("InputType")
OutputType = TypeVar("OutputType")


class ToolHandler(ABC, Generic[InputType, OutputType]):
    """Abstract base class for side-effect handlers."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Get the handler name."""

    @abstractmethod
    def execute(self, input_data: InputType) -> OutputType:
        """Execute the operation.

        Args:
            input_data: Input data for the handler

        Returns:
            Output data from the execution
        """

    def __call__(self, input_data: InputType) -> OutputType:
        return self.execute(input_data)


class FileReadHandler(ToolHandler[FileReadInput, str]):
    """Handler for file read operations."""

    @property
    def name(self) -> str:
        return "read_file"

    def execute(self, input_data: FileReadInput) -> str:
        """Read the whole file as text.

        Raises:
            FileOperationError: NOT_FOUND, IS_DIRECTORY, PERMISSION_DENIED or OTHER
        """
        file_path = input_data.file_path
        try:
            content = file_path.read_text(encoding=input_data.encoding)
        except OSError as e:
            error = FileOperationError.from_os_error(str(file_path), e)
            logger.warning(f"Cannot read {file_path}: {error.kind}")
            raise error from e
        except UnicodeDecodeError as e:
            logger.warning(f"Encoding error reading {file_path}: {e}")
            raise FileOperationError(FileOperationKind.OTHER, str(file_path), str(e)) from e
        except ValueError as e:
            logger.warning(f"Invalid path {file_path!r}: {e}")
            raise FileOperationError(FileOperationKind.OTHER, str(file_path), str(e)) from e

        logger.debug(f"Read file: {file_path} ({len(content.splitlines())} lines)")
        return content


class FileWriteHandler(ToolHandler[FileWriteInput, FileWriteOutput]):
    """Handler for file write operations."""

    @property
    def name(self) -> str:
        return "write_file"

    def execute(self, input_data: FileWriteInput) -> FileWriteOutput:
        """Replace the file content.

        Raises:
            FileOperationError: IS_DIRECTORY, PERMISSION_DENIED, NOT_FOUND (missing directory) or OTHER
        """
        file_path = input_data.file_path
        try:
            bytes_written = file_path.write_text(input_data.content, encoding=input_data.encoding)
        except OSError as e:
            error = FileOperationError.from_os_error(str(file_path), e)
            logger.warning(f"Cannot write {file_path}: {error.kind}")
            raise error from e
        except ValueError as e:
            logger.warning(f"Invalid path {file_path!r}: {e}")
            raise FileOperationError(FileOperationKind.OTHER, str(file_path), str(e)) from e

        logger.info(f"Successfully wrote file: {file_path} ({len(input_data.content.splitlines())} lines)")
        return FileWriteOutput(file_path=str(file_path), bytes_written=bytes_written)


class CommandRunHandler(ToolHandler[CommandRunInput, CommandRunOutput]):
    """Handler for shell command execution.

    Runs synchronously through the shell with stderr folded into stdout.
    """

    @property
    def name(self) -> str:
        return "run_command"

    def execute(self, input_data: CommandRunInput) -> CommandRunOutput:
        cmd = input_data.command
        start_time = time.time()
        logger.info(f"Executing command: {cmd} (cwd={input_data.cwd})")

        try:
            completed = subprocess.run(
                cmd,
                shell=True,
                cwd=input_data.cwd,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                errors="replace",
                timeout=input_data.timeout,
            )
        except subprocess.TimeoutExpired as e:
            duration = time.time() - start_time
            logger.error(f"Command execution timeout after {input_data.timeout} seconds: {cmd}")
            return CommandRunOutput(
                command=cmd,
                output=_as_text(e.output),
                timed_out=True,
                duration_seconds=duration,
            )
        except OSError as e:
            duration = time.time() - start_time
            logger.error(f"Cannot start command {cmd}: {e}")
            return CommandRunOutput(command=cmd, output=str(e), not_found=True, duration_seconds=duration)
        except ValueError as e:
            duration = time.time() - start_time
            logger.error(f"Cannot start command {cmd!r}: {e}")
            return CommandRunOutput(command=cmd, error=str(e), duration_seconds=duration)

        duration = time.time() - start_time
        output = completed.stdout or ""
        logger.info(
            f"Command completed with exit code {completed.returncode} "
            f"(duration: {duration:.2f}s, output: {len(output)} chars)"
        )
        return CommandRunOutput(
            command=cmd,
            exit_code=completed.returncode,
            output=output,
            not_found=completed.returncode == COMMAND_NOT_FOUND_STATUS,
            duration_seconds=duration,
        )


def _as_text(output: Any) -> str:
    if output is None:
        return ""
    if isinstance(output, bytes):
        return output.decode("utf-8", errors="replace")
    return str(output)


class ToolHandlerRegistry:
    """Registry for managing side-effect handlers."""

    def __init__(self) -> None:
        self._handlers: Dict[str, ToolHandler[Any, Any]] = {}

    def register(self, handler: ToolHandler[Any, Any]) -> None:
        """Register a handler under its name, replacing any previous one."""
        self._handlers[handler.name] = handler
        logger.debug(f"Registered tool handler: {handler.name}")

    def get(self, name: str) -> Optional[ToolHandler[Any, Any]]:
        return self._handlers.get(name)

    def get_all(self) -> Dict[str, ToolHandler[Any, Any]]:
        return self._handlers.copy()


def build_default_handlers() -> ToolHandlerRegistry:
    """Create a registry with the file read, file write and command handlers."""
    registry = ToolHandlerRegistry()
    registry.register(FileReadHandler())
    registry.register(FileWriteHandler())
    registry.register(CommandRunHandler())
    return registry
