from __future__ import annotations

import sys
from typing import Generator
from unittest.mock import patch

import pytest
from rich.console import Console

from shipver.utils.console import (
    SHIPVER_THEME,
    _get_console,
    _should_use_color,
    colorize_category,
    print_error,
    print_outputs,
    print_success,
    print_table,
    print_warning,
    reconfigure_console,
)


@pytest.fixture(autouse=True)
def reset_console() -> Generator[None, None, None]:
    """Reset the console singleton before and after each test."""
    reconfigure_console()
    yield
    reconfigure_console()


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("NO_COLOR", raising=False)
    monkeypatch.delenv("CI", raising=False)


@pytest.mark.unit
class TestShouldUseColor:
    """Tests for _should_use_color environment detection."""

    def test_tty_enables_color(self, clean_env: None) -> None:
        with patch.object(sys.stdout, "isatty", return_value=True):
            assert _should_use_color() is True

    def test_non_tty_disables_color(self, clean_env: None) -> None:
        with patch.object(sys.stdout, "isatty", return_value=False):
            assert _should_use_color() is False

    @pytest.mark.parametrize("variable", ["NO_COLOR", "CI"])
    def test_environment_disables_color(
        self, clean_env: None, monkeypatch: pytest.MonkeyPatch, variable: str
    ) -> None:
        monkeypatch.setenv(variable, "1")

        with patch.object(sys.stdout, "isatty", return_value=True):
            assert _should_use_color() is False


@pytest.mark.unit
class TestConsoleLifecycle:
    """Tests for the console singleton."""

    def test_singleton(self) -> None:
        assert _get_console() is _get_console()

    def test_reconfigure_creates_new_instance(self) -> None:
        first = _get_console()

        reconfigure_console()

        assert _get_console() is not first

    def test_console_uses_theme(self) -> None:
        console = _get_console()

        assert isinstance(console, Console)
        assert console.get_style("success") == SHIPVER_THEME.styles["success"]

    def test_no_color_environment(self) -> None:
        """Test NO_COLOR (set by conftest) yields an uncolored console."""
        assert _get_console().no_color is True


@pytest.mark.unit
class TestStatusMessages:
    """Tests for print_success, print_error and print_warning."""

    def test_success(self, capsys: pytest.CaptureFixture) -> None:
        print_success("Version resolved")

        assert "[OK] Version resolved" in capsys.readouterr().out

    def test_error_is_not_markup(self, capsys: pytest.CaptureFixture) -> None:
        """Test square brackets in messages are printed literally."""
        print_error("Invalid value [bold]x[/bold]")

        assert "[ERROR] Invalid value [bold]x[/bold]" in capsys.readouterr().out

    def test_warning(self, capsys: pytest.CaptureFixture) -> None:
        print_warning("GITHUB_OUTPUT is not set")

        assert "[WARNING] GITHUB_OUTPUT is not set" in capsys.readouterr().out

    def test_custom_prefix(self, capsys: pytest.CaptureFixture) -> None:
        print_success("done", prefix=">>")

        assert ">> done" in capsys.readouterr().out


@pytest.mark.unit
class TestPrintTable:
    """Tests for print_table."""

    def test_renders_headers_and_values(self, capsys: pytest.CaptureFixture) -> None:
        print_table(
            [{"Field": "new_version", "Value": "1.0.1+abcdef12"}],
            title="Version decision",
        )

        out = capsys.readouterr().out
        assert "Version decision" in out
        assert "Field" in out
        assert "1.0.1+abcdef12" in out

    def test_explicit_headers_order_and_missing_values(
        self, capsys: pytest.CaptureFixture
    ) -> None:
        print_table([{"a": "1"}], headers=["b", "a"])

        out = capsys.readouterr().out
        assert out.index("b") < out.index("a")

    def test_empty_data_prints_nothing(self, capsys: pytest.CaptureFixture) -> None:
        print_table([])

        assert capsys.readouterr().out == ""


@pytest.mark.unit
class TestPrintOutputs:
    def test_key_value_lines(self, capsys: pytest.CaptureFixture) -> None:
        print_outputs({"new_version": "1.4.3-dev.17+a1b2c3d4", "version_changed": "true"})

        assert capsys.readouterr().out == (
            "new_version=1.4.3-dev.17+a1b2c3d4\nversion_changed=true\n"
        )

    def test_markup_is_literal(self, capsys: pytest.CaptureFixture) -> None:
        print_outputs({"version_category": "[red]x"})

        assert capsys.readouterr().out == "version_category=[red]x\n"


@pytest.mark.unit
class TestColorizeCategory:
    @pytest.mark.parametrize(
        "category, color",
        [
            ("release", "green"),
            ("rc", "yellow"),
            ("beta", "yellow"),
            ("alpha", "cyan"),
            ("dev", "cyan"),
            ("staging", "yellow"),
            ("testing", "cyan"),
        ],
    )
    def test_known_categories(self, category: str, color: str) -> None:
        assert colorize_category(category) == f"[{color}]{category}[/{color}]"

    def test_custom_category_unstyled(self) -> None:
        assert colorize_category("hotfix-urgent") == "hotfix-urgent"

    def test_custom_category_markup_escaped(self) -> None:
        assert colorize_category("[oops]") == "\\[oops]"
