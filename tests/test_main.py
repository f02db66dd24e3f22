from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest

from shipver.__main__ import _print_startup_error, main


@pytest.mark.unit
class TestMain:
    """Tests for main() entry point function."""

    @pytest.mark.parametrize(
        "exit_code",
        [0, 1, 130],
        ids=["success", "error", "interrupted"],
    )
    def test_main_returns_cli_exit_code(self, exit_code: int) -> None:
        """Test main returns exit code from cli_main when import succeeds."""
        mock_cli_module = MagicMock()
        mock_cli_module.main = MagicMock(return_value=exit_code)

        with patch.dict("sys.modules", {"shipver.cli": mock_cli_module}):
            result = main()

        assert result == exit_code
        mock_cli_module.main.assert_called_once_with()

    def test_main_import_error_returns_one(self, capsys: pytest.CaptureFixture) -> None:
        """Test main returns 1 when cli module import fails."""
        with patch.dict("sys.modules", {"shipver.cli": None}):
            result = main()

        assert result == 1
        captured = capsys.readouterr()
        assert "ImportError:" in captured.err
        assert "shipver.cli" in captured.err


@pytest.mark.unit
class TestPrintStartupError:
    """Tests for _print_startup_error."""

    def test_includes_version(self, capsys: pytest.CaptureFixture) -> None:
        from shipver.__version__ import __version__

        _print_startup_error(ImportError("No module named 'rich'"))

        err = capsys.readouterr().err
        assert f"shipver version: {__version__}" in err
        assert "ImportError: No module named 'rich'" in err

    def test_unknown_version(self, capsys: pytest.CaptureFixture) -> None:
        with patch.dict("sys.modules", {"shipver.__version__": None}):
            _print_startup_error(ImportError("boom"))

        assert "shipver version: <unknown>" in capsys.readouterr().err
