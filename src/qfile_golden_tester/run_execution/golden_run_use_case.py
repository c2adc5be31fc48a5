"""Golden run use-case service."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from datetime import UTC, datetime
from pathlib import Path

from qfile_golden_tester.configuration import (
    Configuration,
    ConfigurationError,
    load_configuration,
)
from qfile_golden_tester.qfile_execution import QFileClient
from qfile_golden_tester.result_comparison import ComparisonError

from .run_contracts import RunOutcome, RunRequest, RunResult

QFILE_PATTERN = "*.q"

ClientFactory = Callable[[Configuration, str], QFileClient]

_LOGGER = logging.getLogger("qfile_golden_tester.run")


class RunExecutionError(Exception):
    """Raised when a run use case cannot be completed."""


def execute_golden_run(
    request: RunRequest,
    *,
    client_factory: ClientFactory | None = None,
) -> RunOutcome:
    """Run every requested q-file and compare it with, or record it as, its baseline."""
    resolved_client_factory = client_factory or QFileClient
    configuration = _load_configuration(request.config_path)
    qfile_names = request.qfile_names or discover_qfiles(configuration.directories.qfile)
    if not qfile_names:
        raise RunExecutionError(f"No q-files found in {configuration.directories.qfile}")

    run_start = datetime.now(UTC)
    results = tuple(
        _run_single_qfile(
            configuration,
            qfile_name,
            overwrite=request.overwrite,
            client_factory=resolved_client_factory,
        )
        for qfile_name in qfile_names
    )
    return RunOutcome(
        run_start=run_start,
        config_path=Path(request.config_path).resolve(),
        results=results,
    )


def discover_qfiles(qfile_dir: Path) -> tuple[str, ...]:
    """Return the names of the q-files in ``qfile_dir``, sorted."""
    if not qfile_dir.is_dir():
        raise RunExecutionError(f"q-file directory not found: {qfile_dir}")
    return tuple(sorted(path.name for path in qfile_dir.glob(QFILE_PATTERN) if path.is_file()))


def _load_configuration(config_path: str) -> Configuration:
    try:
        return load_configuration(config_path)
    except (ConfigurationError, OSError) as exc:
        raise RunExecutionError(str(exc)) from exc


def _run_single_qfile(
    configuration: Configuration,
    qfile_name: str,
    *,
    overwrite: bool,
    client_factory: ClientFactory,
) -> RunResult:
    _LOGGER.info("Running q-file %s", qfile_name)
    try:
        client = client_factory(configuration, qfile_name)
        client.run()
    except Exception as exc:  # pylint: disable=broad-exception-caught
        _LOGGER.exception("q-file %s could not be run", qfile_name)
        return RunResult(
            qfile_name=qfile_name,
            script_succeeded=False,
            results_matched=False,
            error_message=str(exc),
        )

    script_succeeded = not client.has_errors
    case = client.case
    if not script_succeeded:
        _LOGGER.warning(
            "q-file %s failed; raw transcript kept at %s", qfile_name, case.error_output_path
        )

    if client.has_expected_results() and not overwrite:
        try:
            matched = client.compare_results()
        except ComparisonError as exc:
            raise RunExecutionError(str(exc)) from exc
        if not matched:
            _LOGGER.warning("q-file %s differs from %s", qfile_name, case.expected_path)
        return RunResult(
            qfile_name=qfile_name,
            script_succeeded=script_succeeded,
            results_matched=matched,
            compared=True,
            artifact_path=case.output_path,
        )

    baseline_written = script_succeeded and client.overwrite_results()
    return RunResult(
        qfile_name=qfile_name,
        script_succeeded=script_succeeded,
        results_matched=False,
        baseline_written=baseline_written,
        artifact_path=case.expected_path if baseline_written else case.output_path,
    )


def summarize_results(results: Sequence[RunResult]) -> dict[str, int]:
    """Count passed, failed, mismatched and newly baselined tests."""
    return {
        "total": len(results),
        "passed": sum(1 for result in results if result.passed),
        "failed": sum(1 for result in results if not result.script_succeeded),
        "mismatched": sum(
            1
            for result in results
            if result.compared and not result.results_matched
        ),
        "baselined": sum(1 for result in results if result.baseline_written),
    }
