"""Result comparison exports."""

from .diff_command import build_diff_command, uses_lenient_whitespace
from .diff_comparator import ComparisonError, compare_files

__all__ = [
    "build_diff_command",
    "uses_lenient_whitespace",
    "ComparisonError",
    "compare_files",
]
