"""Tests for the golden run use-case service."""

from __future__ import annotations

from pathlib import Path

import pytest
from qfile_golden_tester.qfile_execution.qfile_case import QFileCase
from qfile_golden_tester.result_comparison import ComparisonError
from qfile_golden_tester.run_execution.golden_run_use_case import (
    RunExecutionError,
    discover_qfiles,
    execute_golden_run,
    summarize_results,
)
from qfile_golden_tester.run_execution.run_contracts import RunRequest, RunResult


class StubClient:
    """Stands in for QFileClient; behaviour is looked up by q-file name."""

    def __init__(self, configuration, qfile_name: str, behaviour: dict) -> None:
        directories = configuration.directories
        self.case = QFileCase(
            qfile_name=qfile_name,
            qfile_dir=directories.qfile,
            output_dir=directories.output,
            expected_dir=directories.expected,
        )
        self.behaviour = behaviour
        self.has_errors = behaviour.get("has_errors", False)
        self.compared = False
        self.overwritten = False

    def run(self) -> None:
        if "run_error" in self.behaviour:
            raise self.behaviour["run_error"]

    def has_expected_results(self) -> bool:
        return self.behaviour.get("has_baseline", False)

    def compare_results(self) -> bool:
        self.compared = True
        if "compare_error" in self.behaviour:
            raise self.behaviour["compare_error"]
        return self.behaviour.get("matches", True)

    def overwrite_results(self) -> bool:
        self.overwritten = True
        return self.behaviour.get("overwrite_ok", True)


def _factory(behaviours: dict[str, dict], created: list[StubClient] | None = None):
    def create(configuration, qfile_name: str) -> StubClient:
        client = StubClient(configuration, qfile_name, behaviours.get(qfile_name, {}))
        if created is not None:
            created.append(client)
        return client

    return create


def _add_qfiles(config_file: Path, *names: str) -> None:
    for name in names:
        (config_file.parent / "hive" / "queries" / name).write_text("SELECT 1;\n", "utf-8")


def test_runs_every_discovered_qfile_in_sorted_order(config_file: Path) -> None:
    _add_qfiles(config_file, "union2.q", "join1.q", "notes.txt")

    outcome = execute_golden_run(
        RunRequest(config_path=str(config_file)), client_factory=_factory({})
    )

    assert [result.qfile_name for result in outcome.results] == ["join1.q", "union2.q"]
    assert outcome.config_path == config_file.resolve()
    assert outcome.run_start.tzinfo is not None


def test_requested_qfiles_are_run_without_discovery(config_file: Path) -> None:
    _add_qfiles(config_file, "join1.q", "union2.q")

    outcome = execute_golden_run(
        RunRequest(config_path=str(config_file), qfile_names=("union2.q",)),
        client_factory=_factory({}),
    )

    assert [result.qfile_name for result in outcome.results] == ["union2.q"]


def test_existing_baseline_is_compared(config_file: Path) -> None:
    _add_qfiles(config_file, "join1.q", "union2.q")
    created: list[StubClient] = []

    outcome = execute_golden_run(
        RunRequest(config_path=str(config_file)),
        client_factory=_factory(
            {
                "join1.q": {"has_baseline": True, "matches": True},
                "union2.q": {"has_baseline": True, "matches": False},
            },
            created,
        ),
    )

    matched, differing = outcome.results
    assert matched.passed and matched.compared
    assert matched.artifact_path == created[0].case.output_path
    assert not differing.passed and differing.compared and not differing.results_matched
    assert not any(client.overwritten for client in created)
    assert not outcome.passed
    assert outcome.failed_count == 1


def test_missing_baseline_is_written_from_a_successful_run(config_file: Path) -> None:
    _add_qfiles(config_file, "join1.q")
    created: list[StubClient] = []

    outcome = execute_golden_run(
        RunRequest(config_path=str(config_file)), client_factory=_factory({}, created)
    )

    (result,) = outcome.results
    assert result.baseline_written
    assert result.passed
    assert result.artifact_path == created[0].case.expected_path
    assert not created[0].compared


def test_overwrite_replaces_existing_baselines_without_comparing(config_file: Path) -> None:
    _add_qfiles(config_file, "join1.q")
    created: list[StubClient] = []

    outcome = execute_golden_run(
        RunRequest(config_path=str(config_file), overwrite=True),
        client_factory=_factory({"join1.q": {"has_baseline": True}}, created),
    )

    assert outcome.results[0].baseline_written
    assert created[0].overwritten
    assert not created[0].compared


def test_failed_script_never_becomes_a_baseline(config_file: Path) -> None:
    _add_qfiles(config_file, "join1.q")
    created: list[StubClient] = []

    outcome = execute_golden_run(
        RunRequest(config_path=str(config_file)),
        client_factory=_factory({"join1.q": {"has_errors": True}}, created),
    )

    (result,) = outcome.results
    assert not result.script_succeeded
    assert not result.baseline_written
    assert not result.passed
    assert not created[0].overwritten
    assert result.artifact_path == created[0].case.output_path


def test_failed_script_with_matching_baseline_still_fails(config_file: Path) -> None:
    _add_qfiles(config_file, "join1.q")

    outcome = execute_golden_run(
        RunRequest(config_path=str(config_file)),
        client_factory=_factory({"join1.q": {"has_errors": True, "has_baseline": True}}),
    )

    (result,) = outcome.results
    assert result.results_matched
    assert not result.passed


def test_run_exception_is_recorded_and_the_run_continues(config_file: Path) -> None:
    _add_qfiles(config_file, "a.q", "b.q")

    outcome = execute_golden_run(
        RunRequest(config_path=str(config_file)),
        client_factory=_factory({"a.q": {"run_error": RuntimeError("connection refused")}}),
    )

    broken, healthy = outcome.results
    assert broken.error_message == "connection refused"
    assert not broken.passed
    assert healthy.passed


def test_comparison_error_aborts_the_run(config_file: Path) -> None:
    _add_qfiles(config_file, "join1.q")

    with pytest.raises(RunExecutionError, match="diff"):
        execute_golden_run(
            RunRequest(config_path=str(config_file)),
            client_factory=_factory(
                {
                    "join1.q": {
                        "has_baseline": True,
                        "compare_error": ComparisonError("Failed to start diff"),
                    }
                }
            ),
        )


def test_invalid_configuration_is_wrapped(tmp_path: Path) -> None:
    with pytest.raises(RunExecutionError, match="Configuration file not found"):
        execute_golden_run(RunRequest(config_path=str(tmp_path / "absent.yaml")))


def test_empty_qfile_directory_is_an_error(config_file: Path) -> None:
    with pytest.raises(RunExecutionError, match="No q-files found"):
        execute_golden_run(RunRequest(config_path=str(config_file)), client_factory=_factory({}))


def test_discover_requires_an_existing_directory(tmp_path: Path) -> None:
    with pytest.raises(RunExecutionError, match="q-file directory not found"):
        discover_qfiles(tmp_path / "missing")


def test_summary_counts_each_outcome_kind() -> None:
    results = [
        RunResult("a.q", script_succeeded=True, results_matched=True, compared=True),
        RunResult("b.q", script_succeeded=True, results_matched=False, compared=True),
        RunResult("c.q", script_succeeded=True, results_matched=False, baseline_written=True),
        RunResult("d.q", script_succeeded=False, results_matched=False),
    ]

    assert summarize_results(results) == {
        "total": 4,
        "passed": 2,
        "failed": 1,
        "mismatched": 1,
        "baselined": 1,
    }
