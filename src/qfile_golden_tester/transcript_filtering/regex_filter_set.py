"""Ordered regex rewrite pipeline that masks nondeterministic transcript content."""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass

from .filter_context import FilterContext

Replacement = str | Callable[[re.Match[str]], str]

SCRATCH_DIR_PLACEHOLDER = "!!{hive.exec.scratchdir}!!"
WAREHOUSE_DIR_PLACEHOLDER = "!!{hive.metastore.warehouse.dir}!!"
EXPECTED_DIR_PLACEHOLDER = "!!{expectedDirectory}!!"
OUTPUT_DIR_PLACEHOLDER = "!!{outputDirectory}!!"
QFILE_DIR_PLACEHOLDER = "!!{qFileDirectory}!!"
ROOT_DIR_PLACEHOLDER = "!!{hive.root}!!"
USER_NAME_PLACEHOLDER = "!!{user.name}!!"
ELIDED = "!!ELIDED!!"
QUERY_ID_PLACEHOLDER = "!!{queryId}!!"
TIMESTAMP_PLACEHOLDER = "!!TIMESTAMP!!"
UNIXTIME_PLACEHOLDER = "!!UNIXTIME!!"
UNIXTIME_MILLIS_PLACEHOLDER = "!!UNIXTIMEMILLIS!!"

LOG_LINE_PREFIX_PATTERN = (
    r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2},\d*\s+\S+\s+\[.*\]\s+\S+:\s+"
)
TIMESTAMP_PATTERN = (
    r"(Mon|Tue|Wed|Thu|Fri|Sat|Sun) "
    r"(Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sep|Oct|Nov|Dec) "
    r"\d{2} \d{2}:\d{2}:\d{2} \w+ 20\d{2}"
)
OPERATOR_TAGS: tuple[str, ...] = (
    "CONDITION",
    "COPY",
    "DEPENDENCY_COLLECTION",
    "DDL",
    "EXPLAIN",
    "FETCH",
    "FIL",
    "FS",
    "FUNCTION",
    "GBY",
    "HASHTABLEDUMMY",
    "HASHTABLESINK",
    "JOIN",
    "LATERALVIEWFORWARD",
    "LIM",
    "LVJ",
    "MAP",
    "MAPJOIN",
    "MAPRED",
    "MAPREDLOCAL",
    "MOVE",
    "OP",
    "RS",
    "SCR",
    "SEL",
    "STATS",
    "TS",
    "UDTF",
    "UNION",
)
BANNER_LINES: tuple[str, ...] = (
    "going to print operations logs\n",
    "printed operations logs\n",
    "Getting log thread is interrupted, since query is done!\n",
)

MASK_PLACEHOLDERS: tuple[str, ...] = (
    SCRATCH_DIR_PLACEHOLDER,
    WAREHOUSE_DIR_PLACEHOLDER,
    EXPECTED_DIR_PLACEHOLDER,
    OUTPUT_DIR_PLACEHOLDER,
    QFILE_DIR_PLACEHOLDER,
    ROOT_DIR_PLACEHOLDER,
    USER_NAME_PLACEHOLDER,
    ELIDED,
    QUERY_ID_PLACEHOLDER,
    TIMESTAMP_PLACEHOLDER,
    UNIXTIME_PLACEHOLDER,
    UNIXTIME_MILLIS_PLACEHOLDER,
)

# Only placeholders written by earlier rules are protected from the user-name mask.
_MASK_PLACEHOLDER_PATTERN = "|".join(re.escape(placeholder) for placeholder in MASK_PLACEHOLDERS)


@dataclass(frozen=True)
class FilterRule:
    """One compiled pattern and the replacement applied to all of its matches."""

    pattern: re.Pattern[str]
    replacement: Replacement

    def apply(self, text: str) -> str:
        return self.pattern.sub(self.replacement, text)


class RegexFilterSet:
    """Rules applied in registration order, each one to the previous rule's output."""

    def __init__(self) -> None:
        self._rules: list[FilterRule] = []

    @property
    def rules(self) -> tuple[FilterRule, ...]:
        return tuple(self._rules)

    def add_filter(self, regex: str, replacement: Replacement) -> RegexFilterSet:
        self._rules.append(FilterRule(re.compile(regex), replacement))
        return self

    def add_literal_filter(self, literal: str, replacement: str) -> RegexFilterSet:
        """Mask every occurrence of ``literal``; an empty literal registers nothing."""
        if not literal:
            return self
        return self.add_filter(re.escape(literal), _literal(replacement))

    def filter(self, text: str) -> str:
        for rule in self._rules:
            text = rule.apply(text)
        return text


def build_filter_set(context: FilterContext) -> RegexFilterSet:
    """Build the transcript masking rules for one run.

    Order matters: directory masks run before the numeric masks so that a
    digit run inside a path is replaced as part of the path, and the
    placeholders written by earlier rules are never rewritten by later ones.
    """
    filter_set = RegexFilterSet().add_filter(LOG_LINE_PREFIX_PATTERN, "")
    for banner in BANNER_LINES:
        filter_set.add_literal_filter(banner, "")

    if context.scratch_dir:
        filter_set.add_filter(
            re.escape(context.scratch_dir) + r"[\w\-/]+", _literal(SCRATCH_DIR_PLACEHOLDER)
        )
    (
        filter_set.add_literal_filter(context.warehouse_dir, WAREHOUSE_DIR_PLACEHOLDER)
        .add_literal_filter(context.expected_dir, EXPECTED_DIR_PLACEHOLDER)
        .add_literal_filter(context.output_dir, OUTPUT_DIR_PLACEHOLDER)
        .add_literal_filter(context.qfile_dir, QFILE_DIR_PLACEHOLDER)
        .add_literal_filter(context.root_dir, ROOT_DIR_PLACEHOLDER)
        .add_filter(r"\(queryId=[^\)]*\)", _literal(f"queryId=({QUERY_ID_PLACEHOLDER})"))
        .add_filter(r"file:/\w\S+", _literal(f"file:/{ELIDED}"))
        .add_filter(r"pfile:/\w\S+", _literal(f"pfile:/{ELIDED}"))
        .add_filter(r"hdfs:/\w\S+", _literal(f"hdfs:/{ELIDED}"))
        .add_filter(r"last_modified_by=\w+", _literal(f"last_modified_by={ELIDED}"))
        .add_filter(TIMESTAMP_PATTERN, _literal(TIMESTAMP_PLACEHOLDER))
    )

    prefix = re.escape(context.time_prefix)
    filter_set.add_filter(rf"(?<=\D){prefix}\d{{6}}(?=\D)", _literal(UNIXTIME_PLACEHOLDER))
    filter_set.add_filter(rf"(?<=\D){prefix}\d{{9}}(?=\D)", _literal(UNIXTIME_MILLIS_PLACEHOLDER))

    if context.user_name:
        filter_set.add_filter(
            f"({_MASK_PLACEHOLDER_PATTERN})|{re.escape(context.user_name)}",
            _keep_placeholders(USER_NAME_PLACEHOLDER),
        )

    operators = "|".join(OPERATOR_TAGS)
    filter_set.add_filter(rf'"({operators})_\d+"', rf'"\g<1>_{ELIDED}"')
    filter_set.add_filter(
        r"Time taken: [0-9\.]* seconds", _literal(f"Time taken: {ELIDED} seconds")
    )
    return filter_set


def filter_transcript(text: str, context: FilterContext) -> str:
    """Mask ``text`` with a rule set built freshly for ``context``."""
    return build_filter_set(context).filter(text)


def _literal(replacement: str) -> Callable[[re.Match[str]], str]:
    # Callables bypass re template processing, so backslashes in paths stay as-is.
    return lambda _match: replacement


def _keep_placeholders(replacement: str) -> Callable[[re.Match[str]], str]:
    def substitute(match: re.Match[str]) -> str:
        return match.group(1) or replacement

    return substitute
