"""Configuration domain exports."""

from .config_scaffold_builder import (
    DEFAULT_CONFIG_FILENAME,
    build_placeholder_configuration,
    write_placeholder_configuration,
)
from .engine_properties import EnginePropertiesError, read_engine_properties
from .loader import ConfigurationError, load_configuration
from .runtime_settings import (
    Configuration,
    ConnectionSettings,
    DirectorySettings,
    EngineSettings,
    ScriptSettings,
    ShellSettings,
)

__all__ = [
    "Configuration",
    "ConnectionSettings",
    "DirectorySettings",
    "EngineSettings",
    "ScriptSettings",
    "ShellSettings",
    "ConfigurationError",
    "load_configuration",
    "EnginePropertiesError",
    "read_engine_properties",
    "DEFAULT_CONFIG_FILENAME",
    "build_placeholder_configuration",
    "write_placeholder_configuration",
]
