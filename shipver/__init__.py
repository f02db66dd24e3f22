"""
shipver — semantic versioning for CI/CD pipelines

shipver computes the next semantic version of a Maven or Node.js project
from its current manifest version, the branch being built, the commit
history and an optional manual override, and classifies the result into
a release channel that downstream publishing stages route on.

Features include:
    • Automatic, major, minor and patch bump strategies
    • Branch-driven prerelease channels (dev, alpha, beta, rc)
    • Conventional-commit bump suggestion
    • Manifest version read/write for pom.xml and package.json
    • Channel → tier routing for artifact stores and container registries
    • Pipeline output emission for GitHub Actions
"""

from __future__ import annotations

from shipver.__version__ import __version__
from shipver.core.resolver import resolve_version
from shipver.models import Version, VersionDecision

# ---------------------------------------------------------------------------
# Package Metadata
# ---------------------------------------------------------------------------

__author__ = "shipver Contributors"
__license__ = "Apache-2.0"
__description__ = "Semantic version resolution and release channel routing for CI/CD pipelines."

# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

__all__ = [
    "__version__",
    "resolve_version",
    "Version",
    "VersionDecision",
]
