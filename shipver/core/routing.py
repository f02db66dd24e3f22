"""Publish routing and release gates.

Publishing stages route on ``version_category``. Artifact-store and
container-registry selection share one category → tier mapping so a given
version is always promoted along the same path:

- ``dev``, ``alpha`` → ``testing``
- ``rc``, ``beta`` → ``staging``
- anything else (``release`` and custom labels) → ``release``

This module also decides whether a run gets a git tag and whether a
release is created.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from shipver.config import ShipverConfig
from shipver.constants import CATEGORY_TIERS, RELEASE_CATEGORY, TIER_RELEASE
from shipver.core.channels import normalize_branch
from shipver.models import VersionDecision


@dataclass(frozen=True)
class PublishTarget:
    """Where a version is published.

    Attributes:
        category: The version category that was routed.
        tier: ``testing``, ``staging`` or ``release``.
        artifact_store: Artifact repository name for the tier.
        container_registry: Container registry repository for the tier.
    """

    category: str
    tier: str
    artifact_store: str
    container_registry: str


def tier_for_category(category: str) -> str:
    """Return the promotion tier for a version category."""
    return CATEGORY_TIERS.get(category, TIER_RELEASE)


def select_publish_target(
    category: str,
    config: Optional[ShipverConfig] = None,
) -> PublishTarget:
    """Resolve the artifact store and container registry for a category."""
    config = config or ShipverConfig()
    tier = tier_for_category(category)
    return PublishTarget(
        category=category,
        tier=tier,
        artifact_store=config.artifact_stores[tier],
        container_registry=config.container_registries[tier],
    )


def _branch_matches(branch: str, pattern: str) -> bool:
    if pattern.endswith("*"):
        return branch.startswith(pattern[:-1])
    return branch == pattern


def is_tag_branch(branch: str, patterns: Sequence[str]) -> bool:
    """Return True if ``branch`` is on the tag allow-list."""
    name = normalize_branch(branch)
    return any(_branch_matches(name, pattern) for pattern in patterns)


def should_tag(
    decision: VersionDecision,
    branch: str,
    config: Optional[ShipverConfig] = None,
) -> bool:
    """A tag is created for changed versions on allow-listed branches."""
    config = config or ShipverConfig()
    return decision.version_changed and is_tag_branch(branch, config.tag_branches)


def tag_name(
    decision: VersionDecision,
    config: Optional[ShipverConfig] = None,
) -> str:
    config = config or ShipverConfig()
    return f"{config.tag_prefix}{decision.new_version}"


def should_create_release(decision: VersionDecision) -> bool:
    """A release is created for changed versions in the release category.

    The release's prerelease flag is ``decision.is_prerelease``.
    """
    return decision.version_changed and decision.version_category == RELEASE_CATEGORY
