"""Command line interface entry point."""

from __future__ import annotations

import logging
import sys

import click

from qfile_golden_tester.configuration import (
    DEFAULT_CONFIG_FILENAME,
    ConfigurationError,
    load_configuration,
    write_placeholder_configuration,
)
from qfile_golden_tester.qfile_execution import QFileCase
from qfile_golden_tester.results_writing import write_results_workbook
from qfile_golden_tester.run_execution import (
    RunExecutionError,
    RunRequest,
    discover_qfiles,
    execute_golden_run,
    summarize_results,
)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class CliError(Exception):
    """Custom CLI error."""


class QFileFailuresError(CliError):
    """Raised when at least one q-file failed or differed from its baseline."""


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="qfile-golden-tester")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    show_default=True,
    help="Logging verbosity written to stderr.",
)
def cli(log_level: str) -> None:
    """Golden-file test driver for query shell scripts."""
    logging.basicConfig(level=log_level.upper(), format=LOG_FORMAT, stream=sys.stderr)


@cli.command(name="generate-config")
@click.option(
    "--output",
    "output_path",
    required=False,
    default=DEFAULT_CONFIG_FILENAME,
    show_default=True,
    type=click.Path(path_type=str),
    help="Path to the YAML test configuration template to write",
)
def generate_config(output_path: str) -> None:
    """Generate a placeholder YAML test configuration with guidance comments."""
    try:
        resolved_output = write_placeholder_configuration(output_path)
    except (FileExistsError, OSError) as exc:
        raise CliError(str(exc)) from exc
    click.echo(str(resolved_output))


@cli.command(name="list")
@click.option(
    "--config",
    "config_path",
    required=True,
    type=click.Path(path_type=str),
    help="Path to YAML/JSON test configuration file",
)
def list_qfiles(config_path: str) -> None:
    """List the q-files and whether each one has a baseline."""
    try:
        configuration = load_configuration(config_path)
        qfile_names = discover_qfiles(configuration.directories.qfile)
    except (ConfigurationError, RunExecutionError) as exc:
        raise CliError(str(exc)) from exc
    for qfile_name in qfile_names:
        case = QFileCase(
            qfile_name=qfile_name,
            qfile_dir=configuration.directories.qfile,
            output_dir=configuration.directories.output,
            expected_dir=configuration.directories.expected,
        )
        marker = "baseline" if case.expected_path.exists() else "new"
        click.echo(f"{qfile_name}\t{marker}")


@cli.command(name="run")
@click.option(
    "--config",
    "config_path",
    required=True,
    type=click.Path(path_type=str),
    help="Path to YAML/JSON test configuration file",
)
@click.option(
    "--qfile",
    "qfile_names",
    multiple=True,
    help="q-file name to run (repeatable). Defaults to every *.q file in the q-file directory.",
)
@click.option(
    "--overwrite",
    is_flag=True,
    default=False,
    help="Accept the filtered output as the new baseline instead of comparing.",
)
@click.option(
    "--report",
    "report_path",
    required=False,
    type=click.Path(path_type=str),
    help="Optional path for a results workbook (.xlsx)",
)
def run_tests(
    config_path: str, qfile_names: tuple[str, ...], overwrite: bool, report_path: str | None
) -> None:
    """Run q-files and compare their transcripts with the stored baselines."""
    try:
        outcome = execute_golden_run(
            RunRequest(config_path=config_path, qfile_names=qfile_names, overwrite=overwrite)
        )
    except RunExecutionError as exc:
        raise CliError(str(exc)) from exc

    for result in outcome.results:
        status = "PASS" if result.passed else "FAIL"
        artifact = str(result.artifact_path) if result.artifact_path else ""
        detail = result.error_message or artifact
        click.echo(f"{status}\t{result.qfile_name}\t{detail}")

    if report_path:
        try:
            click.echo(str(write_results_workbook(report_path, outcome)))
        except OSError as exc:
            raise CliError(str(exc)) from exc

    counts = summarize_results(outcome.results)
    click.echo(
        f"{counts['passed']}/{counts['total']} passed, {counts['failed']} failed, "
        f"{counts['mismatched']} mismatched, {counts['baselined']} baselined"
    )
    if not outcome.passed:
        raise QFileFailuresError(f"{outcome.failed_count} q-file test(s) did not pass.")


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for console_scripts wiring."""
    argv = argv if argv is not None else sys.argv[1:]
    try:
        cli.main(args=list(argv), standalone_mode=False)
    except CliError as exc:
        click.echo(str(exc), err=True)
        return 1
    except click.ClickException as exc:
        exc.show()
        return exc.exit_code
    except click.Abort:
        click.echo("Aborted.", err=True)
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
