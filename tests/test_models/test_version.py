"""Unit tests for shipver.models.version.

Covers numeric-prefix parsing of manifest versions, strict parsing of
rendered versions, bump arithmetic, invariants and rendering.
"""

from __future__ import annotations

import pytest

from shipver.exceptions import ParseError
from shipver.models.version import Version, parse_core


@pytest.mark.unit
class TestParseCore:
    """Tests for parse_core numeric prefix parsing."""

    @pytest.mark.parametrize(
        "text, expected",
        [
            ("1.4.2", (1, 4, 2)),
            ("0.0.0", (0, 0, 0)),
            ("10.20.30", (10, 20, 30)),
            ("2.0.0-SNAPSHOT", (2, 0, 0)),
            ("1.4.3-dev.17+a1b2c3d4", (1, 4, 3)),
            ("1.0.0+deadbeef", (1, 0, 0)),
            ("  3.1.4\n", (3, 1, 4)),
        ],
        ids=[
            "plain",
            "zeros",
            "multi-digit",
            "maven-snapshot",
            "rendered-prerelease",
            "metadata-only",
            "whitespace",
        ],
    )
    def test_numeric_prefix(self, text: str, expected: tuple) -> None:
        """Test suffixes after '-' or '+' are discarded."""
        version = parse_core(text)

        assert (version.major, version.minor, version.patch) == expected
        assert version.prerelease_label is None
        assert version.build_metadata is None

    @pytest.mark.parametrize(
        "text",
        ["", "1", "1.2", "v1.2.3", "1.2.x", "a.b.c", "1.2.3.4", "1..3", "-1.2.3"],
    )
    def test_malformed_raises_parse_error(self, text: str) -> None:
        """Test versions without three numeric components are rejected."""
        with pytest.raises(ParseError) as exc_info:
            parse_core(text)

        assert exc_info.value.value == text

    def test_non_string_raises_parse_error(self) -> None:
        """Test a non-string input is rejected rather than crashing."""
        with pytest.raises(ParseError):
            parse_core(None)  # type: ignore[arg-type]


@pytest.mark.unit
class TestVersionParse:
    """Tests for strict Version.parse."""

    def test_full_version(self) -> None:
        version = Version.parse("1.4.3-dev.17+a1b2c3d4")

        assert version == Version(1, 4, 3, "dev", 17, "a1b2c3d4")

    def test_custom_label_with_hyphen(self) -> None:
        version = Version.parse("0.9.1-hotfix-urgent.1+00000000")

        assert version.prerelease_label == "hotfix-urgent"
        assert version.prerelease_sequence == 1

    def test_dotted_label(self) -> None:
        """Test the last numeric identifier is the sequence."""
        version = Version.parse("1.0.0-team.a.5")

        assert version.prerelease_label == "team.a"
        assert version.prerelease_sequence == 5

    def test_release_with_metadata(self) -> None:
        version = Version.parse("2.1.0+deadbeef")

        assert version.prerelease_label is None
        assert version.build_metadata == "deadbeef"

    @pytest.mark.parametrize(
        "text",
        [
            "1.0.0-dev",  # label without sequence
            "1.0.0+abc",  # metadata not 8 characters
            "1.0.0-dev.1+",
            "1.0",
        ],
    )
    def test_invalid_raises_parse_error(self, text: str) -> None:
        with pytest.raises(ParseError):
            Version.parse(text)

    @pytest.mark.parametrize(
        "text",
        ["1.4.3-dev.17+a1b2c3d4", "2.1.0+deadbeef", "0.0.1", "3.0.0-rc.2"],
    )
    def test_render_parse_identity(self, text: str) -> None:
        """Test str() is the inverse of Version.parse."""
        assert str(Version.parse(text)) == text


@pytest.mark.unit
class TestVersionInvariants:
    """Tests for Version construction checks."""

    def test_label_without_sequence_rejected(self) -> None:
        with pytest.raises(ValueError):
            Version(1, 0, 0, prerelease_label="dev")

    def test_sequence_without_label_rejected(self) -> None:
        with pytest.raises(ValueError):
            Version(1, 0, 0, prerelease_sequence=3)

    def test_empty_label_rejected(self) -> None:
        with pytest.raises(ValueError):
            Version(1, 0, 0, prerelease_label="", prerelease_sequence=3)

    @pytest.mark.parametrize(
        "label", ["hotfix_urgent", "pre view", "x\nversion_category=release", "rc..1", ".rc", "rc."]
    )
    def test_label_characters_enforced(self, label: str) -> None:
        with pytest.raises(ValueError, match="prerelease_label"):
            Version(1, 0, 0, prerelease_label=label, prerelease_sequence=1)

    @pytest.mark.parametrize("sequence", [-1, True, 1.0, "3"])
    def test_sequence_must_be_non_negative_int(self, sequence) -> None:
        with pytest.raises(ValueError, match="prerelease_sequence"):
            Version(1, 0, 0, prerelease_label="dev", prerelease_sequence=sequence)

    def test_sequence_zero_allowed(self) -> None:
        assert str(Version(1, 0, 0, prerelease_label="dev", prerelease_sequence=0)) == "1.0.0-dev.0"

    @pytest.mark.parametrize("metadata", ["abc_1234", "abc.1234", "abc\n1234"])
    def test_metadata_characters_enforced(self, metadata: str) -> None:
        with pytest.raises(ValueError, match="build_metadata"):
            Version(1, 0, 0, build_metadata=metadata)

    @pytest.mark.parametrize("metadata", ["abc", "123456789", ""])
    def test_metadata_length_enforced(self, metadata: str) -> None:
        with pytest.raises(ValueError):
            Version(1, 0, 0, build_metadata=metadata)

    @pytest.mark.parametrize("parts", [(-1, 0, 0), (0, -1, 0), (1, 2, True)])
    def test_core_must_be_non_negative_int(self, parts: tuple) -> None:
        with pytest.raises(ValueError):
            Version(*parts)

    def test_frozen(self) -> None:
        version = Version(1, 2, 3)

        with pytest.raises(AttributeError):
            version.major = 2  # type: ignore[misc]


@pytest.mark.unit
class TestVersionBump:
    """Tests for Version.bump reset rules."""

    @pytest.mark.parametrize(
        "kind, expected",
        [
            ("major", "2.0.0"),
            ("minor", "1.5.0"),
            ("patch", "1.4.3"),
        ],
    )
    def test_bump(self, kind: str, expected: str) -> None:
        assert str(Version(1, 4, 2).bump(kind)) == expected

    def test_bump_drops_prerelease_and_metadata(self) -> None:
        version = Version(1, 4, 2, "dev", 3, "deadbeef")

        assert version.bump("patch") == Version(1, 4, 3)

    def test_unknown_bump_raises(self) -> None:
        with pytest.raises(ValueError):
            Version(1, 0, 0).bump("huge")


@pytest.mark.unit
class TestVersionRendering:
    """Tests for rendering and derived versions."""

    def test_render_core(self) -> None:
        assert str(Version(1, 2, 3)) == "1.2.3"

    def test_render_prerelease_and_metadata(self) -> None:
        version = Version(1, 2, 3).with_prerelease("rc", 4).with_metadata("0123abcd")

        assert str(version) == "1.2.3-rc.4+0123abcd"
        assert version.is_prerelease is True

    def test_without_metadata(self) -> None:
        version = Version(1, 2, 3, "beta", 9, "0123abcd")

        assert str(version.without_metadata()) == "1.2.3-beta.9"

    def test_core_property(self) -> None:
        version = Version(1, 2, 3, "beta", 9, "0123abcd")

        assert version.core == Version(1, 2, 3)
        assert version.core.is_prerelease is False

    @pytest.mark.parametrize(
        "version",
        [
            Version(0, 0, 0),
            Version(7, 8, 9, "alpha", 1, "ffffffff"),
            Version(12, 0, 4, "hotfix-urgent", 100),
        ],
    )
    def test_numeric_prefix_survives_rendering(self, version: Version) -> None:
        """Test rendering then parsing the prefix gives the same triple."""
        reparsed = parse_core(str(version))

        assert (reparsed.major, reparsed.minor, reparsed.patch) == (
            version.major,
            version.minor,
            version.patch,
        )
