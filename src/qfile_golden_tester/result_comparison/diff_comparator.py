"""Expected-versus-actual comparison through the external diff utility."""

from __future__ import annotations

import logging
import shlex
import subprocess
import sys
import threading
from pathlib import Path
from typing import BinaryIO, TextIO

from .diff_command import build_diff_command, uses_lenient_whitespace

_LOGGER = logging.getLogger("qfile_golden_tester.comparison")


class ComparisonError(Exception):
    """Raised when the diff utility cannot be started."""


def compare_files(
    expected_path: Path | str,
    actual_path: Path | str,
    *,
    lenient_whitespace: bool | None = None,
    stdout: TextIO | None = None,
    stderr: TextIO | None = None,
) -> bool:
    """Return True when ``diff`` reports no difference between the two files.

    Args:
      expected_path: Baseline transcript.
      actual_path: Filtered transcript of the current run.
      lenient_whitespace: Force the whitespace-insensitive flag set on or off.
        Defaults to the host platform's convention.
      stdout: Sink for diff's standard output (default: ``sys.stdout``).
      stderr: Sink for diff's standard error (default: ``sys.stderr``).

    Raises:
      ComparisonError: If the diff executable cannot be started.
    """
    expected = Path(expected_path)
    actual = Path(actual_path)
    if not expected.exists():
        _LOGGER.error("Expected results file does not exist: %s", expected)
        return False

    lenient = uses_lenient_whitespace() if lenient_whitespace is None else lenient_whitespace
    command = build_diff_command(expected, actual, lenient_whitespace=lenient)
    _LOGGER.info("Running: %s", shlex.join(command))
    try:
        process = subprocess.Popen(  # pylint: disable=consider-using-with
            list(command), stdout=subprocess.PIPE, stderr=subprocess.PIPE
        )
    except OSError as exc:
        raise ComparisonError(f"Failed to start {command[0]}: {exc}") from exc

    assert process.stdout is not None and process.stderr is not None
    forwarders = (
        _start_forwarder(process.stdout, stdout or sys.stdout, "diff-stdout"),
        _start_forwarder(process.stderr, stderr or sys.stderr, "diff-stderr"),
    )
    return_code = process.wait()
    for forwarder in forwarders:
        forwarder.join()
    process.wait()
    return return_code == 0


def _start_forwarder(source: BinaryIO, sink: TextIO, name: str) -> threading.Thread:
    thread = threading.Thread(target=_forward_stream, args=(source, sink), name=name, daemon=True)
    thread.start()
    return thread


def _forward_stream(source: BinaryIO, sink: TextIO) -> None:
    # The pipe is drained to EOF even after the sink fails, so diff never blocks on it.
    sink_failed = False
    with source:
        for line in iter(source.readline, b""):
            if sink_failed:
                continue
            try:
                sink.write(line.decode("utf-8", errors="replace"))
            except (OSError, ValueError):
                _LOGGER.exception("Failed to forward diff output; discarding the rest")
                sink_failed = True
    if not sink_failed:
        sink.flush()
