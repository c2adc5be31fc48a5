"""Transcript filtering exports."""

from .filter_context import FilterContext, current_time_prefix
from .regex_filter_set import (
    ELIDED,
    OPERATOR_TAGS,
    SCRATCH_DIR_PLACEHOLDER,
    FilterRule,
    RegexFilterSet,
    build_filter_set,
    filter_transcript,
)

__all__ = [
    "FilterContext",
    "current_time_prefix",
    "FilterRule",
    "RegexFilterSet",
    "build_filter_set",
    "filter_transcript",
    "ELIDED",
    "OPERATOR_TAGS",
    "SCRATCH_DIR_PLACEHOLDER",
]
