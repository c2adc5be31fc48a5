"""Query shell backed by one beeline process per command batch."""

from __future__ import annotations

import logging
import re
import shlex
import subprocess
import sys
import tempfile
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import TextIO

from .shell_contracts import ShellStatus

ProcessRunner = Callable[[tuple[str, ...]], subprocess.CompletedProcess]

_LOGGER = logging.getLogger("qfile_golden_tester.shell.beeline")

_SET_OPTION = re.compile(r"^!set\s+(\S+)", re.IGNORECASE)
_CONNECT = re.compile(r"^!connect\s", re.IGNORECASE)
_USE_DATABASE = re.compile(r"^use\s", re.IGNORECASE)
_SET_VARIABLE = re.compile(r"^set\s+([^=\s]+)\s*=", re.IGNORECASE)
_RECORD = re.compile(r"^!record(?:\s+(?P<path>.+))?$", re.IGNORECASE)
_QUIT = re.compile(r"^!quit\s*$", re.IGNORECASE)


class QueryShellError(Exception):
    """Raised when the shell executable cannot be started."""


class BeelineProcessShell:
    """Run command batches through the ``beeline`` executable.

    Every invocation starts a fresh ``beeline -f <batch>`` process. Commands
    that shape the session (``!set``, ``!connect``, ``USE`` and ``set k=v``)
    are remembered and replayed ahead of later batches so the logical session
    carries over between processes. ``!record`` and ``!quit`` are handled
    here: while recording, each process records into a scratch file that is
    appended to the transcript once the process exits.
    """

    def __init__(
        self,
        executable: str = "beeline",
        *,
        run_process: ProcessRunner | None = None,
    ) -> None:
        self._executable = executable
        self._run_process = run_process or _run_process
        self._output_stream: TextIO = sys.stdout
        self._error_stream: TextIO = sys.stderr
        self._options: dict[str, str] = {}
        self._connect: str | None = None
        self._database: str | None = None
        self._variables: dict[str, str] = {}
        self._record_path: Path | None = None

    def set_output_stream(self, stream: TextIO) -> None:
        self._output_stream = stream

    def set_error_stream(self, stream: TextIO) -> None:
        self._error_stream = stream

    def run_commands(self, commands: Sequence[str]) -> int:
        statuses: list[int] = []
        pending: list[str] = []
        for raw_command in commands:
            command = raw_command.strip()
            record_match = _RECORD.match(command)
            if record_match or _QUIT.match(command):
                if pending:
                    statuses.append(self._run_batch(pending))
                    pending = []
                if record_match:
                    self._toggle_recording(record_match.group("path"))
                else:
                    self._disconnect()
                continue
            pending.append(command)
        if pending:
            statuses.append(self._run_batch(pending))

        if not statuses:
            return ShellStatus.NOOP
        if any(status == ShellStatus.ERROR for status in statuses):
            return ShellStatus.ERROR
        return ShellStatus.OK

    def _run_batch(self, commands: list[str]) -> int:
        preamble = self._session_preamble()
        with tempfile.TemporaryDirectory(prefix="qfile-batch-") as scratch:
            scratch_dir = Path(scratch)
            batch_path = scratch_dir / "batch.sql"
            record_path = scratch_dir / "record.out"
            lines = list(preamble)
            if self._record_path is not None:
                lines.append(f"!record {record_path}")
            lines.extend(commands)
            if self._record_path is not None:
                lines.append("!record")
            batch_path.write_text("\n".join(lines) + "\n", encoding="utf-8")

            command_line = (self._executable, "-f", str(batch_path))
            _LOGGER.debug("running %s", shlex.join(command_line))
            try:
                completed = self._run_process(command_line)
            except FileNotFoundError as exc:
                raise QueryShellError(
                    f"Query shell executable not found: {self._executable}"
                ) from exc

            self._output_stream.write(completed.stdout or "")
            self._error_stream.write(completed.stderr or "")
            if self._record_path is not None and record_path.exists():
                # Bytes are copied as recorded; decoding happens when filtering.
                with self._record_path.open("ab") as transcript:
                    transcript.write(record_path.read_bytes())

        for command in commands:
            self._remember_session_state(command)
        return ShellStatus.OK if completed.returncode == 0 else ShellStatus.ERROR

    def _session_preamble(self) -> list[str]:
        preamble = [f"!set {name} {value}" for name, value in self._options.items()]
        if self._connect is not None:
            preamble.append(self._connect)
        if self._database is not None:
            preamble.append(self._database)
        preamble.extend(f"set {name}={value}" for name, value in self._variables.items())
        return preamble

    def _remember_session_state(self, command: str) -> None:
        set_option = _SET_OPTION.match(command)
        if set_option:
            self._options[set_option.group(1)] = command[set_option.end() :].strip()
            return
        if _CONNECT.match(command):
            self._connect = command
            return
        if _USE_DATABASE.match(command):
            self._database = command
            return
        set_variable = _SET_VARIABLE.match(command)
        if set_variable:
            value = command[set_variable.end() :].strip().rstrip(";").strip()
            self._variables[set_variable.group(1)] = f"{value};"

    def _toggle_recording(self, path: str | None) -> None:
        if path:
            self._record_path = Path(path.strip())
            self._record_path.parent.mkdir(parents=True, exist_ok=True)
            self._record_path.write_bytes(b"")
            _LOGGER.debug("recording transcript to %s", self._record_path)
        else:
            self._record_path = None

    def _disconnect(self) -> None:
        self._connect = None
        self._database = None
        self._variables.clear()
        self._record_path = None


def _run_process(command: tuple[str, ...]) -> subprocess.CompletedProcess:
    return subprocess.run(
        list(command), capture_output=True, encoding="utf-8", errors="replace", check=False
    )
