"""Configuration scaffold generation helpers."""

from __future__ import annotations

from pathlib import Path

DEFAULT_CONFIG_FILENAME = "qfile-tests.yaml"
REQUIRED_PLACEHOLDER = "<REQUIRED>"
OPTIONAL_PLACEHOLDER = "<OPTIONAL>"

_CONFIG_SCAFFOLD_TEMPLATE = """# Test configuration template for qfile-golden-tester.
# Replace every <REQUIRED> placeholder before running list or run.
# Replace <OPTIONAL> placeholders only when your setup needs them.
# Relative paths are resolved against the directory of this file.

connection:
  jdbc_url: "<REQUIRED>"           # e.g. jdbc:hive2://localhost:10000
  username: "<OPTIONAL>"
  password: "<OPTIONAL>"
  jdbc_driver: "<REQUIRED>"        # e.g. org.apache.hive.jdbc.HiveDriver

directories:
  root: "<REQUIRED>"               # masked as !!{hive.root}!!
  qfile: "<REQUIRED>"              # query scripts (*.q)
  output: "<REQUIRED>"             # .raw, .out and .beeline files
  expected: "<REQUIRED>"           # baselines (<name>.out)
  test_data: "<REQUIRED>"          # exposed as test.data.dir
  test_script: "<REQUIRED>"        # exposed as test.script.dir

scripts:
  init: "<OPTIONAL>"               # default: q_test_init.sql
  cleanup: "<OPTIONAL>"            # default: q_test_cleanup.sql

engine:
  # Either set both directories or point site_file at a hive-site.xml.
  # Explicit directories win over values read from site_file.
  scratch_dir: "<OPTIONAL>"
  warehouse_dir: "<OPTIONAL>"
  # site_file: "<OPTIONAL>"

shell:
  executable: "<OPTIONAL>"         # default: beeline
"""


def build_placeholder_configuration() -> str:
    """Build a YAML test configuration template with placeholders and inline guidance."""
    return _CONFIG_SCAFFOLD_TEMPLATE


def write_placeholder_configuration(output_path: Path | str) -> Path:
    """Write the placeholder test configuration template to the requested output path.

    Args:
      output_path: Destination file path for the scaffold.

    Returns:
      The resolved destination path.

    Raises:
      FileExistsError: If the destination file already exists.
      OSError: If writing the scaffold fails.
    """
    destination = Path(output_path)
    if destination.exists():
        raise FileExistsError(f"Test configuration file already exists: {destination.resolve()}")
    destination.write_text(build_placeholder_configuration(), encoding="utf-8")
    return destination.resolve()
