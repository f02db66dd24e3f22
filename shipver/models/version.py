"""
Semantic version model for shipver.

This module defines the :class:`Version` value used throughout shipver.
A version renders as::

    MAJOR.MINOR.PATCH[-LABEL.SEQUENCE][+METADATA]

where ``LABEL.SEQUENCE`` is the prerelease channel plus the pipeline run
counter, and ``METADATA`` is an 8-character commit identifier.

Two parsers are provided:

- :func:`parse_core` reads only the numeric prefix of an arbitrary version
  string (``1.4.2-SNAPSHOT`` → ``1.4.2``). This is what manifest versions go
  through before arithmetic.
- :meth:`Version.parse` strictly parses shipver's own rendering and is the
  inverse of ``str(version)``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from typing import Optional

from shipver.constants import COMMIT_ID_LENGTH
from shipver.exceptions import ParseError

_CORE_RE = re.compile(r"^(\d+)\.(\d+)\.(\d+)(?:[-+].*)?$")

#: Dot-separated alphanumeric identifiers, hyphens allowed.
_LABEL_PATTERN = r"[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*"
_METADATA_PATTERN = r"[0-9A-Za-z-]+"

_LABEL_RE = re.compile(_LABEL_PATTERN)
_METADATA_RE = re.compile(_METADATA_PATTERN)

_FULL_RE = re.compile(
    r"(?P<major>\d+)\.(?P<minor>\d+)\.(?P<patch>\d+)"
    rf"(?:-(?P<label>{_LABEL_PATTERN})\.(?P<sequence>\d+))?"
    rf"(?:\+(?P<metadata>{_METADATA_PATTERN}))?"
)


def is_valid_label(label: str) -> bool:
    """Return True if ``label`` can be rendered as a prerelease label."""
    return isinstance(label, str) and _LABEL_RE.fullmatch(label) is not None


def is_valid_metadata(metadata: str) -> bool:
    """Return True if ``metadata`` can be rendered as build metadata."""
    return isinstance(metadata, str) and _METADATA_RE.fullmatch(metadata) is not None


@dataclass(frozen=True)
class Version:
    """
    An immutable semantic version.

    Attributes:
        major: Major component.
        minor: Minor component.
        patch: Patch component.
        prerelease_label: Channel label such as ``dev`` or ``rc``.
        prerelease_sequence: Run counter distinguishing prereleases that
            share a base version.
        build_metadata: Commit identifier prefix.
    """

    major: int
    minor: int
    patch: int
    prerelease_label: Optional[str] = None
    prerelease_sequence: Optional[int] = None
    build_metadata: Optional[str] = None

    def __post_init__(self) -> None:
        for name in ("major", "minor", "patch"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise ValueError(f"{name} must be a non-negative integer, got {value!r}")

        if (self.prerelease_label is None) != (self.prerelease_sequence is None):
            raise ValueError(
                "prerelease_label and prerelease_sequence must be set together"
            )
        if self.prerelease_label is not None:
            if not is_valid_label(self.prerelease_label):
                raise ValueError(
                    "prerelease_label must be dot-separated [0-9A-Za-z-] "
                    f"identifiers, got {self.prerelease_label!r}"
                )
            sequence = self.prerelease_sequence
            if isinstance(sequence, bool) or not isinstance(sequence, int) or sequence < 0:
                raise ValueError(
                    "prerelease_sequence must be a non-negative integer, "
                    f"got {sequence!r}"
                )

        if self.build_metadata is not None and (
            len(self.build_metadata) != COMMIT_ID_LENGTH
            or not is_valid_metadata(self.build_metadata)
        ):
            raise ValueError(
                f"build_metadata must be exactly {COMMIT_ID_LENGTH} [0-9A-Za-z-] characters, "
                f"got {self.build_metadata!r}"
            )

    # ------------------------------------------------------------------
    # Parsing
    # ------------------------------------------------------------------

    @classmethod
    def parse(cls, text: str) -> "Version":
        """Parse a version rendered by shipver.

        Args:
            text: Version string, e.g. ``1.4.3-dev.17+a1b2c3d4``.

        Returns:
            The parsed :class:`Version`.

        Raises:
            ParseError: ``text`` does not follow the rendering grammar.
        """
        match = _FULL_RE.fullmatch(text.strip())
        if not match:
            raise ParseError(f"Invalid version string: {text!r}", value=text)

        sequence = match.group("sequence")
        try:
            return cls(
                int(match.group("major")),
                int(match.group("minor")),
                int(match.group("patch")),
                prerelease_label=match.group("label"),
                prerelease_sequence=int(sequence) if sequence is not None else None,
                build_metadata=match.group("metadata"),
            )
        except ValueError as exc:
            raise ParseError(str(exc), value=text) from exc

    # ------------------------------------------------------------------
    # Derived versions
    # ------------------------------------------------------------------

    @property
    def core(self) -> "Version":
        """The ``MAJOR.MINOR.PATCH`` part alone."""
        return Version(self.major, self.minor, self.patch)

    @property
    def is_prerelease(self) -> bool:
        return self.prerelease_label is not None

    def bump(self, kind: str) -> "Version":
        """Return the next core version for a bump kind.

        ``major`` resets minor and patch, ``minor`` resets patch, ``patch``
        increments patch only. Prerelease and metadata are dropped.

        Raises:
            ValueError: ``kind`` is not a bump kind.
        """
        if kind == "major":
            return Version(self.major + 1, 0, 0)
        if kind == "minor":
            return Version(self.major, self.minor + 1, 0)
        if kind == "patch":
            return Version(self.major, self.minor, self.patch + 1)
        raise ValueError(f"Unknown bump kind: {kind!r}")

    def with_prerelease(self, label: str, sequence: int) -> "Version":
        return replace(self, prerelease_label=label, prerelease_sequence=sequence)

    def with_metadata(self, metadata: str) -> "Version":
        return replace(self, build_metadata=metadata)

    def without_metadata(self) -> "Version":
        return replace(self, build_metadata=None)

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def __str__(self) -> str:
        text = f"{self.major}.{self.minor}.{self.patch}"
        if self.prerelease_label is not None:
            text += f"-{self.prerelease_label}.{self.prerelease_sequence}"
        if self.build_metadata is not None:
            text += f"+{self.build_metadata}"
        return text


def parse_core(text: str) -> Version:
    """Parse the numeric ``MAJOR.MINOR.PATCH`` prefix of a version string.

    Anything after the first ``-`` or ``+`` that follows the patch number is
    discarded, so Maven snapshots and previously rendered prereleases are
    both accepted.

    Args:
        text: Version string as recorded in a manifest.

    Returns:
        A :class:`Version` without prerelease or metadata.

    Raises:
        ParseError: Three dot-separated numeric components are not present.

    Examples:
        >>> str(parse_core("1.4.2-dev.17+a1b2c3d4"))
        '1.4.2'
        >>> str(parse_core("2.0.0-SNAPSHOT"))
        '2.0.0'
    """
    if not isinstance(text, str):
        raise ParseError(f"Version must be a string, got {type(text).__name__}")

    match = _CORE_RE.fullmatch(text.strip())
    if not match:
        raise ParseError(
            f"Version {text!r} is not in MAJOR.MINOR.PATCH format",
            value=text,
        )

    major, minor, patch = (int(part) for part in match.groups())
    return Version(major, minor, patch)
