from __future__ import annotations

import pytest

from shipver.exceptions import (
    ConfigurationError,
    FileOperationError,
    GitError,
    ManifestError,
    ParseError,
    ShipverError,
)


@pytest.mark.unit
class TestShipverError:
    """Tests for the base exception."""

    def test_message_only(self) -> None:
        error = ShipverError("boom")

        assert str(error) == "boom"
        assert error.details == {}

    def test_details_rendered(self) -> None:
        error = ShipverError("boom", {"a": 1, "b": "x"})

        assert str(error) == "boom (a=1, b=x)"
        assert repr(error) == "ShipverError(message='boom', details={'a': 1, 'b': 'x'})"

    def test_details_copied(self) -> None:
        source = {"a": 1}
        error = ShipverError("boom", source)

        error.details["b"] = 2

        assert source == {"a": 1}

    @pytest.mark.parametrize(
        "error_type",
        [ParseError, ConfigurationError, ManifestError, GitError, FileOperationError],
    )
    def test_hierarchy(self, error_type: type) -> None:
        assert issubclass(error_type, ShipverError)


@pytest.mark.unit
class TestSubclasses:
    """Tests for structured metadata on each error type."""

    def test_parse_error(self) -> None:
        error = ParseError("bad version", value="1.x")

        assert error.value == "1.x"
        assert str(error) == "bad version (value=1.x)"

    def test_configuration_error_omits_missing_fields(self) -> None:
        error = ConfigurationError("bad", option="strategy")

        assert error.details == {"option": "strategy"}
        assert error.config_path is None

    def test_configuration_error_all_fields(self) -> None:
        error = ConfigurationError("bad", config_path="shipver.toml", option="x", value=3)

        assert error.details == {"path": "shipver.toml", "option": "x", "value": 3}

    def test_manifest_error(self) -> None:
        error = ManifestError("missing", file_path="pom.xml", project_type="maven")

        assert error.details == {"path": "pom.xml", "project_type": "maven"}

    def test_git_error_truncates_stderr(self) -> None:
        error = GitError("failed", command="git log", returncode=128, stderr="x" * 500 + "\n")

        assert error.returncode == 128
        assert error.stderr == "x" * 500 + "\n"
        assert error.details["stderr"] == "x" * 200 + "..."

    def test_file_operation_error(self) -> None:
        original = OSError("disk full")
        error = FileOperationError("write failed", file_path="a", operation="write", original_error=original)

        assert error.original_error is original
        assert error.details["original_error"] == "disk full"
