"""
Version decision model for shipver.

A :class:`VersionDecision` is the single result of resolving a version. The
four pipeline-facing fields mirror the outputs later stages consume:
``new_version``, ``version_changed``, ``is_prerelease`` and
``version_category``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

from shipver.models.version import Version


def _flag(value: bool) -> str:
    return "true" if value else "false"


@dataclass(frozen=True)
class VersionDecision:
    """
    Outcome of a version resolution.

    Attributes:
        version: The resolved :class:`Version`.
        current_version: The version string the resolution started from.
        version_category: Release channel tag used for publish routing.
        bump: The bump kind that was applied (``major``/``minor``/``patch``).
    """

    version: Version
    current_version: str
    version_category: str
    bump: Optional[str] = None

    @property
    def new_version(self) -> str:
        return str(self.version)

    @property
    def version_changed(self) -> bool:
        # Build metadata differs on every commit, so this is rarely False.
        return self.new_version != self.current_version

    @property
    def is_prerelease(self) -> bool:
        return self.version.is_prerelease

    @property
    def publish_version(self) -> str:
        """The version without build metadata, used for artifact coordinates."""
        return str(self.version.without_metadata())

    def to_outputs(self) -> Dict[str, str]:
        """Return the pipeline outputs as strings.

        Booleans are rendered as lowercase ``true``/``false``.
        """
        return {
            "new_version": self.new_version,
            "version_changed": _flag(self.version_changed),
            "is_prerelease": _flag(self.is_prerelease),
            "version_category": self.version_category,
        }

    def to_json(self) -> Dict[str, Any]:
        """Return a JSON-serialisable view including diagnostics."""
        return {
            "current_version": self.current_version,
            "new_version": self.new_version,
            "publish_version": self.publish_version,
            "version_changed": self.version_changed,
            "is_prerelease": self.is_prerelease,
            "version_category": self.version_category,
            "bump": self.bump,
        }
