"""Query shell collaborator contract."""

from __future__ import annotations

from collections.abc import Sequence
from enum import IntEnum
from typing import Protocol, TextIO


class ShellStatus(IntEnum):
    """Status codes reported by a query shell invocation."""

    OK = 0
    ERROR = 1
    NOOP = 2
    UNKNOWN = 3


class QueryShell(Protocol):
    """Interactive query client driven by ordered command batches."""

    def set_output_stream(self, stream: TextIO) -> None: ...

    def set_error_stream(self, stream: TextIO) -> None: ...

    def run_commands(self, commands: Sequence[str]) -> int: ...


def script_failed(status: int) -> bool:
    """Only the explicit error status counts as a failed script.

    NOOP, UNKNOWN and codes outside ShellStatus all count as success.
    """
    return status == ShellStatus.ERROR
