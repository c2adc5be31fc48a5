"""Run execution entities."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path


@dataclass(frozen=True)
class RunRequest:
    """Input contract for executing one run."""

    config_path: str
    qfile_names: tuple[str, ...] = ()
    overwrite: bool = False


@dataclass(frozen=True)
class RunResult:
    """Outcome of one q-file test.

    ``script_succeeded`` and ``results_matched`` are independent: a script can
    run to completion and still differ from its baseline.
    """

    qfile_name: str
    script_succeeded: bool
    results_matched: bool
    compared: bool = False
    baseline_written: bool = False
    artifact_path: Path | None = None
    error_message: str | None = None

    @property
    def passed(self) -> bool:
        return self.script_succeeded and (self.results_matched or self.baseline_written)


@dataclass(frozen=True)
class RunOutcome:
    """Output contract for one completed run."""

    run_start: datetime
    config_path: Path
    results: tuple[RunResult, ...]

    @property
    def passed(self) -> bool:
        return all(result.passed for result in self.results)

    @property
    def failed_count(self) -> int:
        return sum(1 for result in self.results if not result.passed)
