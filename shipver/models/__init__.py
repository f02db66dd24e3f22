"""
Unified data model exports for shipver.

This module re-exports the core data models to provide a stable and
convenient public API. Users can import models directly from
``shipver.models`` instead of individual submodules.

Example:
    >>> from shipver.models import Version, VersionDecision
"""

from __future__ import annotations

from shipver.models.version import Version, is_valid_label, is_valid_metadata, parse_core
from shipver.models.decision import VersionDecision

__all__ = [
    "Version",
    "VersionDecision",
    "is_valid_label",
    "is_valid_metadata",
    "parse_core",
]
