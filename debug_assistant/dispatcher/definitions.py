"""Input and output models of the side-effect handlers.

The dispatcher builds these from the ``details`` of a model action after
resolving paths against the session's working directory.
"""

from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field


class FileReadInput(BaseModel):
    """Input schema for file read operation."""

    file_path: Path = Field(..., description="Resolved path of the file to read")
    encoding: str = Field(default="utf-8", description="File encoding (default: utf-8)")


class FileWriteInput(BaseModel):
    """Input schema for file write operation.

    Parent directories are never created; writing into a missing directory fails.
    """

    file_path: Path = Field(..., description="Resolved path of the file to write")
    content: str = Field(..., description="Full new content of the file")
    encoding: str = Field(default="utf-8", description="File encoding (default: utf-8)")


class FileWriteOutput(BaseModel):
    """Output schema for file write operation."""

    file_path: str = Field(..., description="Path of the file written")
    bytes_written: int = Field(..., description="Number of characters written")


class CommandRunInput(BaseModel):
    """Input schema for command execution."""

    command: str = Field(..., description="Shell command to execute")
    cwd: Path = Field(..., description="Working directory for command execution")
    timeout: Optional[float] = Field(default=None, gt=0, description="Timeout in seconds (None = wait forever)")


class CommandRunOutput(BaseModel):
    """Output schema for command execution.

    ``output`` holds stdout and stderr interleaved as the command produced them.
    """

    command: str = Field(..., description="Command that was executed")
    exit_code: Optional[int] = Field(None, description="Exit status; None when the command never finished")
    output: str = Field(default="", description="Combined standard output and standard error")
    not_found: bool = Field(default=False, description="The command could not be started or was not found")
    timed_out: bool = Field(default=False, description="The command was killed after the timeout")
    error: Optional[str] = Field(None, description="Why the command could not be started, other than not being found")
    duration_seconds: Optional[float] = Field(None, description="Execution duration in seconds")

    @property
    def success(self) -> bool:
        return self.exit_code == 0
