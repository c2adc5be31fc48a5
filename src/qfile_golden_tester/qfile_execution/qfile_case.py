"""q-file test case identity and derived artifact paths."""

from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path

RAW_SUFFIX = ".raw"
ERROR_SUFFIX = ".error"
OUTPUT_SUFFIX = ".out"
TRACE_SUFFIX = ".beeline"


@dataclass(frozen=True)
class QFileCase:
    """One query script and the files derived from its name.

    Every path is computed from ``qfile_name``, so renaming through
    :meth:`with_name` re-derives all of them together.
    """

    qfile_name: str
    qfile_dir: Path
    output_dir: Path
    expected_dir: Path

    def __post_init__(self) -> None:
        if not self.qfile_name or "/" in self.qfile_name or "\\" in self.qfile_name:
            raise ValueError(f"Invalid q-file name: {self.qfile_name!r}")

    @property
    def test_name(self) -> str:
        """File name up to its first dot; also used as the test database name."""
        return self.qfile_name.split(".", 1)[0]

    @property
    def qfile_path(self) -> Path:
        return self.qfile_dir / self.qfile_name

    @property
    def raw_output_path(self) -> Path:
        return self.output_dir / f"{self.qfile_name}{RAW_SUFFIX}"

    @property
    def error_output_path(self) -> Path:
        return self.output_dir / f"{self.qfile_name}{RAW_SUFFIX}{ERROR_SUFFIX}"

    @property
    def output_path(self) -> Path:
        return self.output_dir / f"{self.qfile_name}{OUTPUT_SUFFIX}"

    @property
    def expected_path(self) -> Path:
        return self.expected_dir / f"{self.qfile_name}{OUTPUT_SUFFIX}"

    @property
    def trace_path(self) -> Path:
        return self.output_dir / f"{self.qfile_name}{TRACE_SUFFIX}"

    def with_name(self, qfile_name: str) -> QFileCase:
        return replace(self, qfile_name=qfile_name)
