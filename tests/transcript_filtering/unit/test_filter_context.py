"""Filter context capture tests."""

from __future__ import annotations

import getpass
from pathlib import Path

import pytest
from qfile_golden_tester.transcript_filtering import filter_context
from qfile_golden_tester.transcript_filtering.filter_context import (
    FilterContext,
    current_time_prefix,
)


def test_time_prefix_is_first_four_digits_of_epoch_millis() -> None:
    assert current_time_prefix(1760712345678) == "1760"


def test_time_prefix_defaults_to_the_current_clock(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(filter_context.time, "time_ns", lambda: 1_234_567_890_123_000_000)

    assert current_time_prefix() == "1234"


def test_capture_stringifies_directories_and_reads_clock_and_user(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.setattr(filter_context.time, "time_ns", lambda: 1_760_000_000_000_000_000)
    monkeypatch.setattr(getpass, "getuser", lambda: "ci_user")

    context = FilterContext.capture(
        scratch_dir="/tmp/scratch",
        warehouse_dir="/warehouse",
        expected_dir=tmp_path / "expected",
        output_dir=tmp_path / "output",
        qfile_dir=tmp_path / "queries",
        root_dir=tmp_path,
    )

    assert context.expected_dir == str(tmp_path / "expected")
    assert context.root_dir == str(tmp_path)
    assert context.time_prefix == "1760"
    assert context.user_name == "ci_user"


def test_capture_uses_empty_user_name_when_the_os_user_is_unknown(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    def no_user() -> str:
        raise KeyError("uid not found")

    monkeypatch.setattr(getpass, "getuser", no_user)

    context = FilterContext.capture(
        scratch_dir="",
        warehouse_dir="",
        expected_dir="e",
        output_dir="o",
        qfile_dir="q",
        root_dir="r",
    )

    assert context.user_name == ""


def test_context_is_immutable() -> None:
    context = FilterContext("s", "w", "e", "o", "q", "r", "1760", "u")

    with pytest.raises(AttributeError):
        context.user_name = "other"  # type: ignore[misc]
