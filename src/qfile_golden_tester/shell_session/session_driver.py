"""Command batches issued to the query shell for one q-file test."""

from __future__ import annotations

import logging
from pathlib import Path

from qfile_golden_tester.configuration.runtime_settings import (
    ConnectionSettings,
    DirectorySettings,
    ScriptSettings,
)

from .shell_contracts import QueryShell

_LOGGER = logging.getLogger("qfile_golden_tester.shell.session")


class ShellSession:
    """Issues the connect, setup, execute, teardown and quit batches in order.

    Each batch goes to the shell as one ordered list. Nothing is retried; any
    exception raised by the shell propagates to the caller.
    """

    def __init__(
        self,
        shell: QueryShell,
        *,
        connection: ConnectionSettings,
        directories: DirectorySettings,
        scripts: ScriptSettings,
    ) -> None:
        self._shell = shell
        self._connection = connection
        self._directories = directories
        self._scripts = scripts

    def connect(self) -> int:
        connection = self._connection
        return self._run(
            "connect",
            [
                "!set verbose true",
                "!set shownestederrs true",
                "!set showwarnings true",
                "!set showelapsedtime false",
                "!set maxwidth -1",
                f"!connect {connection.jdbc_url} {connection.username} "
                f"{connection.password} {connection.jdbc_driver}",
            ],
        )

    def set_up(self, test_name: str) -> int:
        return self._run(
            "setup",
            [
                "USE default;",
                "SHOW TABLES;",
                f"DROP DATABASE IF EXISTS `{test_name}` CASCADE;",
                f"CREATE DATABASE `{test_name}`;",
                f"USE `{test_name}`;",
                f"set test.data.dir={self._directories.test_data};",
                f"set test.script.dir={self._directories.test_script};",
                f"!run {self._directories.test_script / self._scripts.init}",
            ],
        )

    def execute(self, qfile_path: Path, raw_output_path: Path) -> int:
        """Record the q-file run into ``raw_output_path`` and return the script's status."""
        self._run("record-start", ["!set outputformat csv", f"!record {raw_output_path}"])
        status = self._run("execute", [f"!run {qfile_path}"])
        self._run("record-stop", ["!record"])
        return status

    def tear_down(self, test_name: str) -> int:
        return self._run(
            "teardown",
            [
                "!set outputformat table",
                "USE default;",
                f"DROP DATABASE IF EXISTS `{test_name}` CASCADE;",
                f"!run {self._directories.test_script / self._scripts.cleanup}",
            ],
        )

    def quit(self) -> int:
        return self._run("quit", ["!quit"])

    def _run(self, phase: str, commands: list[str]) -> int:
        _LOGGER.debug("running %s batch (%d commands)", phase, len(commands))
        status = self._shell.run_commands(commands)
        _LOGGER.debug("%s batch returned status %s", phase, status)
        return status
