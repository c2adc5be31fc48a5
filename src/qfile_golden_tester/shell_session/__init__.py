"""Query shell session exports."""

from .beeline_process_shell import BeelineProcessShell, QueryShellError
from .session_driver import ShellSession
from .shell_contracts import QueryShell, ShellStatus, script_failed

__all__ = [
    "QueryShell",
    "ShellStatus",
    "script_failed",
    "ShellSession",
    "BeelineProcessShell",
    "QueryShellError",
]
