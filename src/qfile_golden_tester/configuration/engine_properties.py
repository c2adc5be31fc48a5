"""Engine property file reader (hive-site.xml style)."""

from __future__ import annotations

import xml.etree.ElementTree as ET
from pathlib import Path

SCRATCH_DIR_PROPERTY = "hive.exec.scratchdir"
WAREHOUSE_DIR_PROPERTY = "hive.metastore.warehouse.dir"


class EnginePropertiesError(Exception):
    """Raised when an engine property file cannot be read."""


def read_engine_properties(site_path: Path | str) -> dict[str, str]:
    """Return the name/value pairs declared in a Hadoop-style configuration file.

    Args:
      site_path: Path to a ``<configuration><property>...`` XML document.

    Returns:
      Mapping of property name to value. Properties without a name are skipped,
      properties without a value map to an empty string.

    Raises:
      EnginePropertiesError: If the file is missing or is not valid XML.
    """
    path = Path(site_path)
    if not path.exists():
        raise EnginePropertiesError(f"Engine property file not found: {path}")
    try:
        root = ET.parse(path).getroot()
    except ET.ParseError as exc:
        raise EnginePropertiesError(f"Failed to parse engine property file {path}: {exc}") from exc

    properties: dict[str, str] = {}
    for element in root.iter("property"):
        name = (element.findtext("name") or "").strip()
        if not name:
            continue
        properties[name] = (element.findtext("value") or "").strip()
    return properties
