"""Run-scoped values embedded into transcript filter rules."""

from __future__ import annotations

import getpass
import time
from dataclasses import dataclass
from pathlib import Path

TIME_PREFIX_LENGTH = 4


@dataclass(frozen=True)
class FilterContext:  # pylint: disable=too-many-instance-attributes
    """Everything the filter rules need to know about the current run.

    ``time_prefix`` holds the leading digits of the current epoch-milliseconds
    value. Epoch seconds and epoch milliseconds produced during the run share
    it, which keeps the unix time masks from hitting unrelated long numbers.
    """

    scratch_dir: str
    warehouse_dir: str
    expected_dir: str
    output_dir: str
    qfile_dir: str
    root_dir: str
    time_prefix: str
    user_name: str

    @classmethod
    def capture(
        cls,
        *,
        scratch_dir: str,
        warehouse_dir: str,
        expected_dir: Path | str,
        output_dir: Path | str,
        qfile_dir: Path | str,
        root_dir: Path | str,
    ) -> FilterContext:
        """Build a context from the directories plus the current clock and OS user."""
        return cls(
            scratch_dir=str(scratch_dir),
            warehouse_dir=str(warehouse_dir),
            expected_dir=str(expected_dir),
            output_dir=str(output_dir),
            qfile_dir=str(qfile_dir),
            root_dir=str(root_dir),
            time_prefix=current_time_prefix(),
            user_name=_current_user_name(),
        )


def current_time_prefix(now_millis: int | None = None) -> str:
    """Return the leading digits of an epoch-milliseconds value (default: now)."""
    millis = time.time_ns() // 1_000_000 if now_millis is None else now_millis
    return str(millis)[:TIME_PREFIX_LENGTH]


def _current_user_name() -> str:
    try:
        return getpass.getuser()
    except (KeyError, OSError):
        return ""
