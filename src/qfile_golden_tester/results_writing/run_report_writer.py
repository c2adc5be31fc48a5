"""Results workbook writer service."""

from __future__ import annotations

from pathlib import Path

from openpyxl import Workbook
from openpyxl.utils import get_column_letter

from qfile_golden_tester.run_execution import RunOutcome, RunResult, summarize_results

from .report_models import ComparisonStatus, ScriptStatus

RESULTS_SHEET_NAME = "Results"
RUN_INFO_SHEET_NAME = "RunInfo"
RESULT_COLUMNS: tuple[str, ...] = ("Q-File", "Script", "Comparison", "Artifact", "Error")
_COLUMN_WIDTHS: tuple[int, ...] = (30, 10, 20, 60, 60)


def write_results_workbook(output_path: Path | str, outcome: RunOutcome) -> Path:
    """Write one row per q-file plus a RunInfo sheet; return the resolved path."""
    workbook = Workbook()
    sheet = workbook.active
    sheet.title = RESULTS_SHEET_NAME
    for column, (header, width) in enumerate(zip(RESULT_COLUMNS, _COLUMN_WIDTHS), start=1):
        sheet.cell(row=1, column=column, value=header)
        sheet.cell(row=1, column=column).style = "Headline 1"
        sheet.column_dimensions[get_column_letter(column)].width = width

    for row, result in enumerate(outcome.results, start=2):
        values = (
            result.qfile_name,
            _script_status(result).value,
            _comparison_status(result).value,
            str(result.artifact_path) if result.artifact_path else None,
            result.error_message,
        )
        for column, value in enumerate(values, start=1):
            sheet.cell(row=row, column=column, value=value)

    _write_run_info_sheet(workbook, outcome)

    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)
    workbook.save(output)
    return output.resolve()


def _script_status(result: RunResult) -> ScriptStatus:
    return ScriptStatus.OK if result.script_succeeded else ScriptStatus.FAILED


def _comparison_status(result: RunResult) -> ComparisonStatus:
    if result.baseline_written:
        return ComparisonStatus.BASELINE_WRITTEN
    if not result.compared:
        return ComparisonStatus.NOT_COMPARED
    if result.results_matched:
        return ComparisonStatus.MATCH
    return ComparisonStatus.DIFF


def _write_run_info_sheet(workbook, outcome: RunOutcome) -> None:
    sheet = workbook.create_sheet(RUN_INFO_SHEET_NAME)
    counts = summarize_results(outcome.results)
    entries = (
        ("run_start", outcome.run_start.isoformat()),
        ("config_path", str(outcome.config_path)),
        ("total", counts["total"]),
        ("passed", counts["passed"]),
        ("failed", counts["failed"]),
        ("mismatched", counts["mismatched"]),
        ("baselined", counts["baselined"]),
    )
    for row, (key, value) in enumerate(entries, start=1):
        sheet.cell(row=row, column=1, value=key)
        sheet.cell(row=row, column=2, value=value)
