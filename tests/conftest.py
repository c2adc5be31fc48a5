"""Shared fixtures: an in-memory query shell and a configuration rooted in tmp_path."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from pathlib import Path
from typing import TextIO

import pytest
import yaml
from qfile_golden_tester.configuration.runtime_settings import (
    Configuration,
    ConnectionSettings,
    DirectorySettings,
    EngineSettings,
    ScriptSettings,
    ShellSettings,
)
from qfile_golden_tester.qfile_execution.qfile_case import QFileCase
from qfile_golden_tester.shell_session.shell_contracts import ShellStatus
from qfile_golden_tester.transcript_filtering.filter_context import FilterContext

SCRATCH_DIR = "/tmp/hive-scratch"
WAREHOUSE_DIR = "/user/hive/warehouse"
FIXED_TIME_PREFIX = "1760"
FIXED_USER_NAME = "qa_runner"


class FakeQueryShell:
    """Records batches and writes ``transcript`` into the active ``!record`` target."""

    def __init__(
        self,
        *,
        transcript: str = "",
        script_status: int = ShellStatus.OK,
        fail_on: str | None = None,
    ) -> None:
        self.transcript = transcript
        self.script_status = script_status
        self.fail_on = fail_on
        self.batches: list[list[str]] = []
        self.output_stream: TextIO | None = None
        self.error_stream: TextIO | None = None
        self._record_path: Path | None = None

    def set_output_stream(self, stream: TextIO) -> None:
        self.output_stream = stream

    def set_error_stream(self, stream: TextIO) -> None:
        self.error_stream = stream

    def run_commands(self, commands: Sequence[str]) -> int:
        self.batches.append(list(commands))
        if self.fail_on and any(command.startswith(self.fail_on) for command in commands):
            raise RuntimeError(f"shell failed on {self.fail_on}")
        status: int = ShellStatus.OK
        for command in commands:
            if self.output_stream is not None:
                self.output_stream.write(f"> {command}\n")
            if command.startswith("!record "):
                self._record_path = Path(command.split(" ", 1)[1])
                self._record_path.write_bytes(b"")
            elif command == "!record":
                self._record_path = None
            elif command.startswith("!run ") and self._record_path is not None:
                with self._record_path.open("a", encoding="utf-8", newline="") as record:
                    record.write(self.transcript)
                status = self.script_status
        return status

    @property
    def commands(self) -> list[str]:
        return [command for batch in self.batches for command in batch]


@pytest.fixture
def fake_shell_cls() -> type[FakeQueryShell]:
    return FakeQueryShell


@pytest.fixture
def configuration(tmp_path: Path) -> Configuration:
    root = tmp_path / "hive"
    directories = DirectorySettings(
        root=root,
        qfile=root / "queries",
        output=root / "output",
        expected=root / "expected",
        test_data=root / "data",
        test_script=root / "scripts",
    )
    directories.qfile.mkdir(parents=True, exist_ok=True)
    directories.expected.mkdir(parents=True, exist_ok=True)
    return Configuration(
        path=tmp_path / "config.yaml",
        connection=ConnectionSettings(
            jdbc_url="jdbc:hive2://localhost:10000",
            username="hiveuser",
            password="secret",
            jdbc_driver="org.apache.hive.jdbc.HiveDriver",
        ),
        directories=directories,
        scripts=ScriptSettings(init="q_test_init.sql", cleanup="q_test_cleanup.sql"),
        engine=EngineSettings(scratch_dir=SCRATCH_DIR, warehouse_dir=WAREHOUSE_DIR),
        shell=ShellSettings(executable="beeline"),
    )


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    """YAML configuration with relative directories under tmp_path/hive."""
    document = {
        "connection": {
            "jdbc_url": "jdbc:hive2://localhost:10000",
            "username": "hiveuser",
            "password": "secret",
            "jdbc_driver": "org.apache.hive.jdbc.HiveDriver",
        },
        "directories": {
            "root": "hive",
            "qfile": "hive/queries",
            "output": "hive/output",
            "expected": "hive/expected",
            "test_data": "hive/data",
            "test_script": "hive/scripts",
        },
        "engine": {"scratch_dir": SCRATCH_DIR, "warehouse_dir": WAREHOUSE_DIR},
    }
    (tmp_path / "hive" / "queries").mkdir(parents=True, exist_ok=True)
    (tmp_path / "hive" / "expected").mkdir(parents=True, exist_ok=True)
    path = tmp_path / "qfile-tests.yaml"
    path.write_text(yaml.safe_dump(document), encoding="utf-8")
    return path


@pytest.fixture
def fixed_context_factory() -> Callable[[QFileCase], FilterContext]:
    def factory(case: QFileCase) -> FilterContext:
        return FilterContext(
            scratch_dir=SCRATCH_DIR,
            warehouse_dir=WAREHOUSE_DIR,
            expected_dir=str(case.expected_dir),
            output_dir=str(case.output_dir),
            qfile_dir=str(case.qfile_dir),
            root_dir=str(case.qfile_dir.parent),
            time_prefix=FIXED_TIME_PREFIX,
            user_name=FIXED_USER_NAME,
        )

    return factory
