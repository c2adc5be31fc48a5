"""diff command line construction."""

from __future__ import annotations

import sys
from pathlib import Path

DIFF_EXECUTABLE = "diff"

# -b: ignore changes in the amount of white space
# --strip-trailing-cr: CRLF line endings compare equal to LF
# -B: ignore changes whose lines are all blank
LENIENT_WHITESPACE_FLAGS: tuple[str, ...] = ("-b", "--strip-trailing-cr", "-B")


def uses_lenient_whitespace(platform: str | None = None) -> bool:
    """Windows hosts write CRLF line endings and trailing blanks into transcripts."""
    return (platform or sys.platform).startswith("win")


def build_diff_command(
    expected_path: Path, actual_path: Path, *, lenient_whitespace: bool
) -> tuple[str, ...]:
    flags: tuple[str, ...] = ("-a",)
    if lenient_whitespace:
        flags += LENIENT_WHITESPACE_FLAGS
    return (
        DIFF_EXECUTABLE,
        *flags,
        str(expected_path.absolute()),
        str(actual_path.absolute()),
    )
