"""Lifecycle of one q-file golden test."""

from __future__ import annotations

import logging
import shutil
from collections.abc import Callable
from enum import Enum
from pathlib import Path
from typing import TextIO

from qfile_golden_tester.configuration.runtime_settings import Configuration
from qfile_golden_tester.result_comparison import compare_files
from qfile_golden_tester.shell_session import (
    BeelineProcessShell,
    QueryShell,
    ShellSession,
    script_failed,
)
from qfile_golden_tester.transcript_filtering import FilterContext, filter_transcript

from .qfile_case import QFileCase

ShellFactory = Callable[[], QueryShell]
ContextFactory = Callable[[QFileCase], FilterContext]
Comparator = Callable[[Path, Path], bool]

_LOGGER = logging.getLogger("qfile_golden_tester.qfile.client")

# Transcripts are rewritten byte for byte apart from the masked spans.
_TRANSCRIPT_ENCODING = "utf-8"
_TRANSCRIPT_ERRORS = "surrogateescape"


class RunPhase(str, Enum):
    """Last lifecycle phase a run completed."""

    INIT = "init"
    CONNECTED = "connected"
    SETUP_DONE = "setup_done"
    EXECUTED = "executed"
    TORN_DOWN = "torn_down"
    FILTERED = "filtered"


class QFileClient:
    """Drives one q-file through the query shell and manages its artifacts.

    Usage:
        client = QFileClient(configuration, "join1.q")
        client.run()
        if client.has_expected_results():
            passed = client.compare_results()
        else:
            client.overwrite_results()
    """

    def __init__(
        self,
        configuration: Configuration,
        qfile_name: str,
        *,
        shell_factory: ShellFactory | None = None,
        context_factory: ContextFactory | None = None,
        comparator: Comparator | None = None,
    ) -> None:
        directories = configuration.directories
        self._configuration = configuration
        self._case = QFileCase(
            qfile_name=qfile_name,
            qfile_dir=directories.qfile,
            output_dir=directories.output,
            expected_dir=directories.expected,
        )
        self._shell_factory = shell_factory or (
            lambda: BeelineProcessShell(configuration.shell.executable)
        )
        self._context_factory = context_factory or self._capture_filter_context
        self._comparator = comparator or compare_files
        self._session: ShellSession | None = None
        self._trace_stream: TextIO | None = None
        self._has_errors = False
        self._cleaned_up = True
        self._phase = RunPhase.INIT

    @property
    def case(self) -> QFileCase:
        return self._case

    @property
    def phase(self) -> RunPhase:
        return self._phase

    @property
    def has_errors(self) -> bool:
        """True when the q-file run returned the shell's explicit error status."""
        return self._has_errors

    def run(self) -> None:
        """Connect, set up, execute, tear down and filter; clean up on every path."""
        self._has_errors = False
        self._cleaned_up = False
        self._phase = RunPhase.INIT
        case = self._case
        try:
            session = self._open_session()
            self._phase = RunPhase.CONNECTED

            session.set_up(case.test_name)
            self._phase = RunPhase.SETUP_DONE

            status = session.execute(case.qfile_path, case.raw_output_path)
            self._has_errors = script_failed(status)
            if self._has_errors:
                _LOGGER.warning("q-file %s failed with status %s", case.qfile_name, status)
            self._phase = RunPhase.EXECUTED

            session.tear_down(case.test_name)
            self._phase = RunPhase.TORN_DOWN

            self._filter_results()
            self._phase = RunPhase.FILTERED
        finally:
            self.cleanup()

    def cleanup(self) -> None:
        """Quit the session, close the trace and keep a failed raw transcript as ``.error``.

        Runs once per run; calling it again, or before a session was opened, is
        harmless.
        """
        if self._cleaned_up:
            return
        self._cleaned_up = True
        session, self._session = self._session, None
        if session is not None:
            try:
                session.quit()
            except Exception:  # pylint: disable=broad-exception-caught
                _LOGGER.exception(
                    "Failed to quit query shell session for %s", self._case.qfile_name
                )
        trace_stream, self._trace_stream = self._trace_stream, None
        if trace_stream is not None:
            trace_stream.close()
        if self._has_errors:
            self._keep_failed_transcript()

    def has_expected_results(self) -> bool:
        """Does a baseline exist? False usually means this is a new test."""
        return self._case.expected_path.exists()

    def compare_results(self) -> bool:
        return self._comparator(self._case.expected_path, self._case.output_path)

    def overwrite_results(self) -> bool:
        """Replace the baseline with the filtered output of the last run."""
        case = self._case
        try:
            if case.expected_path.exists():
                case.expected_path.unlink()
            case.expected_dir.mkdir(parents=True, exist_ok=True)
            shutil.copy2(case.output_path, case.expected_path)
        except OSError:
            _LOGGER.exception("Failed to overwrite results for %s", case.qfile_name)
            return False
        _LOGGER.info("Wrote baseline %s", case.expected_path)
        return True

    def _open_session(self) -> ShellSession:
        self._case.output_dir.mkdir(parents=True, exist_ok=True)
        self._trace_stream = self._case.trace_path.open("w", encoding=_TRANSCRIPT_ENCODING)
        shell = self._shell_factory()
        shell.set_output_stream(self._trace_stream)
        shell.set_error_stream(self._trace_stream)
        self._session = ShellSession(
            shell,
            connection=self._configuration.connection,
            directories=self._configuration.directories,
            scripts=self._configuration.scripts,
        )
        self._session.connect()
        return self._session

    def _filter_results(self) -> None:
        case = self._case
        context = self._context_factory(case)
        with case.raw_output_path.open(
            encoding=_TRANSCRIPT_ENCODING, errors=_TRANSCRIPT_ERRORS, newline=""
        ) as raw:
            raw_output = raw.read()
        with case.output_path.open(
            "w", encoding=_TRANSCRIPT_ENCODING, errors=_TRANSCRIPT_ERRORS, newline=""
        ) as output:
            output.write(filter_transcript(raw_output, context))

    def _capture_filter_context(self, case: QFileCase) -> FilterContext:
        directories = self._configuration.directories
        engine = self._configuration.engine
        return FilterContext.capture(
            scratch_dir=engine.scratch_dir,
            warehouse_dir=engine.warehouse_dir,
            expected_dir=case.expected_dir,
            output_dir=case.output_dir,
            qfile_dir=case.qfile_dir,
            root_dir=directories.root,
        )

    def _keep_failed_transcript(self) -> None:
        source = self._case.raw_output_path
        destination = self._case.error_output_path
        try:
            shutil.move(source, destination)
        except OSError:
            _LOGGER.error("Failed to move '%s' to '%s'", source, destination)
