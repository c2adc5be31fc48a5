"""Configuration domain entities."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class ConnectionSettings:
    """JDBC connection details handed to the query shell."""

    jdbc_url: str
    username: str
    password: str
    jdbc_driver: str


@dataclass(frozen=True)
class DirectorySettings:
    """Directories used to locate scripts and to place transcripts."""

    root: Path
    qfile: Path
    output: Path
    expected: Path
    test_data: Path
    test_script: Path


@dataclass(frozen=True)
class ScriptSettings:
    """Shared init and cleanup scripts, relative to the test script directory."""

    init: str
    cleanup: str


@dataclass(frozen=True)
class EngineSettings:
    """Engine directories that only ever get masked in transcripts."""

    scratch_dir: str
    warehouse_dir: str


@dataclass(frozen=True)
class ShellSettings:
    """Query shell executable settings."""

    executable: str


@dataclass(frozen=True)
class Configuration:
    """Top-level configuration aggregate."""

    path: Path
    connection: ConnectionSettings
    directories: DirectorySettings
    scripts: ScriptSettings
    engine: EngineSettings
    shell: ShellSettings
