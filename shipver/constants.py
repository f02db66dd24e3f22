"""
Centralized constants for shipver.

This module defines immutable configuration values used across shipver,
including versioning strategies, channel names, routing defaults, manifest
file names, and logging formats. All values are intended to be treated as
read-only.
"""

from typing import Final, Mapping, Sequence

# ---------------------------------------------------------------------------
# Versioning strategies
# ---------------------------------------------------------------------------

#: Strategy that lets commit analysis (or the patch fallback) decide.
STRATEGY_AUTO: Final[str] = "auto"

#: Explicit bump kinds, ordered from least to most significant.
BUMP_KINDS: Final[Sequence[str]] = ("patch", "minor", "major")

#: All accepted ``strategy`` values.
STRATEGIES: Final[Sequence[str]] = (STRATEGY_AUTO, *BUMP_KINDS)

# ---------------------------------------------------------------------------
# Release channels
# ---------------------------------------------------------------------------

#: Category assigned to non-prerelease builds from the mainline branches.
RELEASE_CATEGORY: Final[str] = "release"

#: Prerelease channels inferred from branch names.
CHANNEL_DEV: Final[str] = "dev"
CHANNEL_ALPHA: Final[str] = "alpha"
CHANNEL_BETA: Final[str] = "beta"
CHANNEL_RC: Final[str] = "rc"

#: Channels shipver assigns on its own.
KNOWN_CHANNELS: Final[Sequence[str]] = (
    CHANNEL_DEV,
    CHANNEL_ALPHA,
    CHANNEL_BETA,
    CHANNEL_RC,
)

#: Length of the commit identifier used as build metadata.
COMMIT_ID_LENGTH: Final[int] = 8

#: Prefix git uses for branch refs.
BRANCH_REF_PREFIX: Final[str] = "refs/heads/"

# ---------------------------------------------------------------------------
# Publish routing
# ---------------------------------------------------------------------------

TIER_TESTING: Final[str] = "testing"
TIER_STAGING: Final[str] = "staging"
TIER_RELEASE: Final[str] = "release"

#: Promotion tiers in ascending order.
TIERS: Final[Sequence[str]] = (TIER_TESTING, TIER_STAGING, TIER_RELEASE)

#: Categories that are promoted below the release tier.
CATEGORY_TIERS: Final[Mapping[str, str]] = {
    CHANNEL_DEV: TIER_TESTING,
    CHANNEL_ALPHA: TIER_TESTING,
    CHANNEL_RC: TIER_STAGING,
    CHANNEL_BETA: TIER_STAGING,
}

#: Default artifact store per tier.
DEFAULT_ARTIFACT_STORES: Final[Mapping[str, str]] = {
    TIER_TESTING: "testing-repo",
    TIER_STAGING: "staging-repo",
    TIER_RELEASE: "release-repo",
}

#: Default container registry repository per tier.
DEFAULT_CONTAINER_REGISTRIES: Final[Mapping[str, str]] = {
    TIER_TESTING: "dev-repository",
    TIER_STAGING: "staging-repository",
    TIER_RELEASE: "prod-repository",
}

#: Branches on which a version tag is created. ``*`` marks a prefix match.
DEFAULT_TAG_BRANCHES: Final[Sequence[str]] = (
    "main",
    "master",
    "develop",
    "release/*",
)

#: Prefix prepended to the version when naming tags.
DEFAULT_TAG_PREFIX: Final[str] = "v"

# ---------------------------------------------------------------------------
# Configuration defaults
# ---------------------------------------------------------------------------

DEFAULT_STRATEGY: Final[str] = STRATEGY_AUTO
DEFAULT_STRICT_STRATEGY: Final[bool] = False
DEFAULT_ALLOW_CUSTOM_CHANNELS: Final[bool] = True

# ---------------------------------------------------------------------------
# Project manifests
# ---------------------------------------------------------------------------

PROJECT_MAVEN: Final[str] = "maven"
PROJECT_NODE: Final[str] = "node"

#: Manifest file per project type, in detection order.
MANIFEST_FILES: Final[Mapping[str, str]] = {
    PROJECT_MAVEN: "pom.xml",
    PROJECT_NODE: "package.json",
}

#: npm lockfiles whose root package version follows package.json.
NODE_LOCKFILES: Final[Sequence[str]] = ("package-lock.json", "npm-shrinkwrap.json")

#: Maximum allowed file size (in bytes) when reading manifests.
MAX_FILE_SIZE: Final[int] = 10 * 1024 * 1024  # 10 MB

# ---------------------------------------------------------------------------
# Git
# ---------------------------------------------------------------------------

#: Timeout in seconds for local git commands.
GIT_TIMEOUT: Final[float] = 30.0

# ---------------------------------------------------------------------------
# Logging configuration
# ---------------------------------------------------------------------------

#: Timestamp format for verbose logging.
LOG_DATE_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"

#: Default log format (non-verbose).
LOG_DEFAULT_FORMAT: Final[str] = "%(levelname)s: %(message)s"

#: Verbose log format including timestamp and logger name.
LOG_VERBOSE_FORMAT: Final[str] = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
