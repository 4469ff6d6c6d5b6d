"""Tests for core/progress.py module."""

from __future__ import annotations

import sys
from io import StringIO
from unittest.mock import patch

from symdex.core.progress import (
    _PROGRESS_THRESHOLD,
    _STYLES,
    _is_tty,
    is_console_suppressed,
    pluralize,
    progress,
    status,
    suppress_console_logs,
)


class TestIsTty:
    def test_false_for_stringio(self) -> None:
        """Returns False for non-TTY stderr."""
        original = sys.stderr
        try:
            sys.stderr = StringIO()
            assert _is_tty() is False
        finally:
            sys.stderr = original


class TestStatus:
    """Tests for status function."""

    def test_has_expected_styles(self) -> None:
        assert set(_STYLES.keys()) == {"success", "error", "info", "warning", "none"}

    def test_success_style(self) -> None:
        with patch("symdex.core.progress._console") as mock_console:
            status("Done", style="success")
            call_args = mock_console.print.call_args[0][0]
            assert "✓" in call_args

    def test_error_style(self) -> None:
        with patch("symdex.core.progress._console") as mock_console:
            status("Failed", style="error")
            call_args = mock_console.print.call_args[0][0]
            assert "✗" in call_args

    def test_with_indent(self) -> None:
        with patch("symdex.core.progress._console") as mock_console:
            status("Indented", indent=4)
            call_args = mock_console.print.call_args[0][0]
            assert "    Indented" in call_args


class TestProgress:
    """Tests for progress generator."""

    def test_yields_all_items(self) -> None:
        items = [1, 2, 3, 4, 5]
        assert list(progress(items)) == items

    def test_large_non_tty_iteration_has_no_bar(self) -> None:
        items = list(range(_PROGRESS_THRESHOLD + 5))
        with patch("symdex.core.progress._is_tty", return_value=False):
            assert list(progress(items, desc="Indexing")) == items

    def test_bar_shown_when_forced_on_tty(self) -> None:
        with patch("symdex.core.progress._is_tty", return_value=True):
            seen = []
            for item in progress([1, 2, 3], desc="Indexing", force=True):
                seen.append((item, is_console_suppressed()))
        assert seen == [(1, True), (2, True), (3, True)]
        assert not is_console_suppressed()

    def test_with_total_for_unsized_iterable(self) -> None:
        assert list(progress(iter([1, 2, 3]), total=3)) == [1, 2, 3]


class TestSuppressConsoleLogs:
    def test_flag_is_scoped(self) -> None:
        assert not is_console_suppressed()
        with suppress_console_logs():
            assert is_console_suppressed()
        assert not is_console_suppressed()


class TestPluralize:
    def test_singular(self) -> None:
        assert pluralize(1, "file") == "1 file"

    def test_plural(self) -> None:
        assert pluralize(3, "file") == "3 files"
        assert pluralize(0, "file") == "0 files"

    def test_custom_plural(self) -> None:
        assert pluralize(2, "entry", "entries") == "2 entries"
