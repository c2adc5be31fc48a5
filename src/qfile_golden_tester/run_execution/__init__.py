"""Run execution domain exports."""

from .golden_run_use_case import (
    RunExecutionError,
    discover_qfiles,
    execute_golden_run,
    summarize_results,
)
from .run_contracts import RunOutcome, RunRequest, RunResult

__all__ = [
    "RunRequest",
    "RunResult",
    "RunOutcome",
    "RunExecutionError",
    "discover_qfiles",
    "execute_golden_run",
    "summarize_results",
]
