"""Per-session context.

A ``SessionContext`` is created once per run (fresh or resumed) and passed
explicitly to the dispatcher, the store and the CLI. It names the session, the
directory the model works in and where the session's log and conversation files
live.
"""

import secrets
import shlex
from dataclasses import dataclass, field
from pathlib import Path

DEFAULT_USE_CASE = "general"


def new_session_id() -> str:
    """Six hex characters, matching the ids used in log and conversation file names."""
    return secrets.token_hex(3)


@dataclass(frozen=True)
class SessionContext:
    """Execution context of one debug session.

    Attributes
    ----------
    session_id:
        Short random identifier used in file names.
    use_case:
        Use case the session was started for (``general`` when unknown).
    provider:
        Identifier of the provider the session talks to.
    working_dir:
        Directory that relative file paths and commands resolve against.
    logs_dir:
        Directory holding the session log and conversation files.
    """

    session_id: str = field(default_factory=new_session_id)
    use_case: str = DEFAULT_USE_CASE
    provider: str = "anthropic"
    working_dir: Path = field(default_factory=Path.cwd)
    logs_dir: Path = field(default_factory=lambda: Path("~/debugger/logs").expanduser())

    @property
    def log_file(self) -> Path:
        return self.logs_dir / f"debug_session_{self.session_id}.log"

    @property
    def conversation_file(self) -> Path:
        """Snapshot file of this session; a resumed session gets a new one."""
        return self.logs_dir / f"conversation_{self.session_id}.json"

    def resolve(self, path: str) -> Path:
        """Resolve ``path`` against the working directory; absolute paths are kept."""
        candidate = Path(path).expanduser()
        return candidate if candidate.is_absolute() else self.working_dir / candidate

    def resume_command(self, program: str = "debug-assistant") -> str:
        """Command line that resumes this session."""
        return f"{program} {shlex.quote(str(self.conversation_file))}"
