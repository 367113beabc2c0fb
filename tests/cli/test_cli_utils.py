"""
Tests for shared CLI helpers.
"""

import io

import pytest

from binarius.cli.utils import (
    confirm,
    format_bytes,
    make_installer,
    parse_spec,
    print_warning,
)
from binarius.core.exceptions import InvalidToolSpecError, InvalidVersionError


class TestFormatBytes:
    """Test format_bytes."""

    @pytest.mark.parametrize(
        "size,expected",
        [
            (0, "0 B"),
            (1023, "1023 B"),
            (1024, "1.0 KB"),
            (1536, "1.5 KB"),
            (5 * 1024 * 1024, "5.0 MB"),
            (int(2.5 * 1024 ** 3), "2.5 GB"),
        ],
    )
    def test_units(self, size, expected):
        assert format_bytes(size) == expected


class TestParseSpec:
    """Test parse_spec."""

    def test_normalizes(self):
        assert parse_spec("terraform@1.6.0") == ("terraform", "v1.6.0")

    def test_latest(self):
        assert parse_spec("tofu@latest", allow_latest=True) == ("tofu", "latest")
        with pytest.raises(InvalidVersionError):
            parse_spec("tofu@latest")

    def test_bad_format(self):
        with pytest.raises(InvalidToolSpecError):
            parse_spec("terraform")


class TestConfirm:
    """Test confirm."""

    @pytest.mark.parametrize(
        "answer,expected",
        [("y\n", True), ("YES\n", True), (" yes \n", True), ("n\n", False), ("\n", False), ("", False)],
    )
    def test_answers(self, answer, expected, capsys):
        assert confirm("Continue?", stream=io.StringIO(answer)) is expected
        assert "Continue? [y/N]: " in capsys.readouterr().out


class TestMisc:
    """Test warning output and installer construction."""

    def test_print_warning(self, capsys):
        print_warning("careful")
        assert capsys.readouterr().err == "WARNING: careful\n"

    def test_make_installer_quiet(self, isolated_home):
        class Args:
            quiet = True

        installer = make_installer(Args())

        assert installer.progress_callback is None
        assert installer.home == isolated_home

    def test_make_installer_progress(self, isolated_home):
        assert make_installer(None).progress_callback is not None
