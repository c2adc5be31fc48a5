"""Results writing entities."""

from __future__ import annotations

from enum import Enum


class ScriptStatus(str, Enum):
    """Rendered status of the q-file execution."""

    OK = "OK"
    FAILED = "FAILED"


class ComparisonStatus(str, Enum):
    """Rendered status of the baseline comparison."""

    MATCH = "MATCH"
    DIFF = "DIFF"
    BASELINE_WRITTEN = "BASELINE_WRITTEN"
    NOT_COMPARED = "NOT_COMPARED"
