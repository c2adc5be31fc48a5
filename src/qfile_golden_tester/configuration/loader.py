"""Configuration loader service."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

from .config_scaffold_builder import OPTIONAL_PLACEHOLDER, REQUIRED_PLACEHOLDER
from .engine_properties import (
    SCRATCH_DIR_PROPERTY,
    WAREHOUSE_DIR_PROPERTY,
    EnginePropertiesError,
    read_engine_properties,
)
from .runtime_settings import (
    Configuration,
    ConnectionSettings,
    DirectorySettings,
    EngineSettings,
    ScriptSettings,
    ShellSettings,
)

DEFAULT_SHELL_EXECUTABLE = "beeline"
DEFAULT_INIT_SCRIPT = "q_test_init.sql"
DEFAULT_CLEANUP_SCRIPT = "q_test_cleanup.sql"


class ConfigurationError(Exception):
    """Raised when the configuration file is invalid."""


def load_configuration(config_path: Path | str) -> Configuration:
    """Load and validate the configuration file."""
    path = Path(config_path)
    if not path.exists():
        raise ConfigurationError(f"Configuration file not found: {path}")

    text = path.read_text(encoding="utf-8")
    try:
        parsed = yaml.safe_load(text)
    except yaml.YAMLError as exc:  # pragma: no cover - exercised indirectly
        raise ConfigurationError(f"Failed to parse configuration file: {exc}") from exc

    if parsed is None:
        parsed = {}

    if not isinstance(parsed, Mapping):
        raise ConfigurationError("Configuration root must be a mapping.")

    base_path = path.parent.resolve()
    return Configuration(
        path=path,
        connection=_parse_connection_section(parsed.get("connection")),
        directories=_parse_directories_section(parsed.get("directories"), base_path),
        scripts=_parse_scripts_section(parsed.get("scripts")),
        engine=_parse_engine_section(parsed.get("engine"), base_path),
        shell=_parse_shell_section(parsed.get("shell")),
    )


def _parse_connection_section(value: Any) -> ConnectionSettings:
    section = _require_mapping(value, "connection")
    return ConnectionSettings(
        jdbc_url=_require_non_empty_string(section.get("jdbc_url"), "connection.jdbc_url"),
        username=_optional_string(section.get("username"), "connection.username") or "",
        password=_optional_string(section.get("password"), "connection.password") or "",
        jdbc_driver=_require_non_empty_string(
            section.get("jdbc_driver"), "connection.jdbc_driver"
        ),
    )


def _parse_directories_section(value: Any, base_path: Path) -> DirectorySettings:
    section = _require_mapping(value, "directories")

    def directory(key: str) -> Path:
        raw = _require_non_empty_string(section.get(key), f"directories.{key}")
        return _resolve_path(base_path, raw)

    return DirectorySettings(
        root=directory("root"),
        qfile=directory("qfile"),
        output=directory("output"),
        expected=directory("expected"),
        test_data=directory("test_data"),
        test_script=directory("test_script"),
    )


def _parse_scripts_section(value: Any) -> ScriptSettings:
    section = _optional_mapping(value, "scripts")
    init = _optional_string(section.get("init"), "scripts.init") or DEFAULT_INIT_SCRIPT
    cleanup = (
        _optional_string(section.get("cleanup"), "scripts.cleanup") or DEFAULT_CLEANUP_SCRIPT
    )
    return ScriptSettings(init=init, cleanup=cleanup)


def _parse_engine_section(value: Any, base_path: Path) -> EngineSettings:
    section = _require_mapping(value, "engine")
    site_properties: Mapping[str, str] = {}
    site_value = _optional_string(section.get("site_file"), "engine.site_file")
    if site_value:
        try:
            site_properties = read_engine_properties(_resolve_path(base_path, site_value))
        except EnginePropertiesError as exc:
            raise ConfigurationError(str(exc)) from exc

    scratch_dir = _optional_string(
        section.get("scratch_dir"), "engine.scratch_dir"
    ) or site_properties.get(SCRATCH_DIR_PROPERTY)
    warehouse_dir = _optional_string(
        section.get("warehouse_dir"), "engine.warehouse_dir"
    ) or site_properties.get(WAREHOUSE_DIR_PROPERTY)
    if not scratch_dir:
        raise ConfigurationError(
            f"engine.scratch_dir is required (directly or as {SCRATCH_DIR_PROPERTY} in site_file)."
        )
    if not warehouse_dir:
        raise ConfigurationError(
            "engine.warehouse_dir is required "
            f"(directly or as {WAREHOUSE_DIR_PROPERTY} in site_file)."
        )
    return EngineSettings(scratch_dir=scratch_dir, warehouse_dir=warehouse_dir)


def _parse_shell_section(value: Any) -> ShellSettings:
    section = _optional_mapping(value, "shell")
    executable = (
        _optional_string(section.get("executable"), "shell.executable")
        or DEFAULT_SHELL_EXECUTABLE
    )
    return ShellSettings(executable=executable)


def _resolve_path(base_path: Path, value: str) -> Path:
    candidate = Path(value).expanduser()
    if not candidate.is_absolute():
        return (base_path / candidate).resolve()
    return candidate


def _require_mapping(value: Any, section_name: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise ConfigurationError(f"Configuration section '{section_name}' is required.")
    return value


def _optional_mapping(value: Any, section_name: str) -> Mapping[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise ConfigurationError(f"Configuration section '{section_name}' must be a mapping.")
    return value


def _require_non_empty_string(value: Any, field_name: str) -> str:
    if not isinstance(value, str):
        raise ConfigurationError(f"{field_name} must be a string.")
    stripped = value.strip()
    if not stripped:
        raise ConfigurationError(f"{field_name} must not be empty.")
    if stripped == REQUIRED_PLACEHOLDER:
        raise ConfigurationError(
            f"{field_name} still holds the {REQUIRED_PLACEHOLDER} placeholder."
        )
    return stripped


def _optional_string(value: Any, field_name: str) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ConfigurationError(f"{field_name} must be a string.")
    stripped = value.strip()
    # Untouched scaffold placeholders count as unset.
    if stripped in (OPTIONAL_PLACEHOLDER, REQUIRED_PLACEHOLDER):
        return None
    return stripped or None
