from __future__ import annotations

from pathlib import Path

import pytest

from shipver.core.pipeline import PipelineContext, write_outputs
from shipver.exceptions import ConfigurationError


@pytest.mark.unit
class TestPipelineContextFromEnviron:
    """Tests for reading GitHub Actions variables."""

    def test_reads_all_fields(self, tmp_path: Path) -> None:
        output = tmp_path / "out.txt"
        ctx = PipelineContext.from_environ(
            {
                "GITHUB_REF": "refs/heads/develop",
                "GITHUB_RUN_NUMBER": "17",
                "GITHUB_SHA": "a1b2c3d4e5f6",
                "GITHUB_OUTPUT": str(output),
            }
        )

        assert ctx.branch_name == "develop"
        assert ctx.run_number == "17"
        assert ctx.commit_sha == "a1b2c3d4e5f6"
        assert ctx.output_path == output

    def test_head_ref_preferred(self) -> None:
        ctx = PipelineContext.from_environ(
            {"GITHUB_REF": "refs/pull/9/merge", "GITHUB_HEAD_REF": "feature/login"}
        )

        assert ctx.branch_name == "feature/login"

    def test_empty_values_are_none(self) -> None:
        ctx = PipelineContext.from_environ({"GITHUB_HEAD_REF": "", "GITHUB_OUTPUT": ""})

        assert ctx == PipelineContext()

    def test_defaults_to_process_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("GITHUB_REF", "refs/heads/main")
        monkeypatch.setenv("GITHUB_RUN_NUMBER", "3")

        ctx = PipelineContext.from_environ()

        assert ctx.branch_name == "main"
        assert ctx.run_sequence == 3


@pytest.mark.unit
class TestRunSequence:
    """Tests for run number validation."""

    def test_zero_is_valid(self) -> None:
        assert PipelineContext(run_number="0").run_sequence == 0

    def test_missing_raises(self) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            PipelineContext().run_sequence

        assert exc_info.value.option == "run_number"

    @pytest.mark.parametrize("value", ["-1", "abc", "1.5", ""])
    def test_invalid_raises(self, value: str) -> None:
        with pytest.raises(ConfigurationError):
            PipelineContext(run_number=value).run_sequence


@pytest.mark.unit
class TestWriteOutputs:
    """Tests for the step output file."""

    def test_appends_key_value_lines(self, tmp_path: Path) -> None:
        path = tmp_path / "github_output"
        path.write_text("existing=1\n", encoding="utf-8")

        write_outputs({"new_version": "1.0.1+abcdef12", "version_changed": "true"}, path)

        assert path.read_text(encoding="utf-8") == (
            "existing=1\nnew_version=1.0.1+abcdef12\nversion_changed=true\n"
        )

    def test_creates_missing_file(self, tmp_path: Path) -> None:
        path = tmp_path / "github_output"

        write_outputs({"is_prerelease": "false"}, path)

        assert path.read_text(encoding="utf-8") == "is_prerelease=false\n"

    def test_multiline_value_uses_delimiter_form(self, tmp_path: Path) -> None:
        path = tmp_path / "github_output"

        write_outputs({"notes": "first\nversion_category=release", "is_prerelease": "true"}, path)

        lines = path.read_text(encoding="utf-8").splitlines()
        assert lines[0].startswith("notes<<ghadelimiter_")
        delimiter = lines[0].split("<<", 1)[1]
        assert lines[1:4] == ["first", "version_category=release", delimiter]
        assert lines[4:] == ["is_prerelease=true"]

    def test_carriage_return_uses_delimiter_form(self, tmp_path: Path) -> None:
        path = tmp_path / "github_output"

        write_outputs({"notes": "a\rb"}, path)

        assert path.read_text(encoding="utf-8").startswith("notes<<ghadelimiter_")

    @pytest.mark.parametrize("key", ["", "a=b", "a\nb", "a<<b"])
    def test_invalid_key_raises(self, tmp_path: Path, key: str) -> None:
        path = tmp_path / "github_output"

        with pytest.raises(ValueError):
            write_outputs({key: "x"}, path)

        assert not path.exists()
