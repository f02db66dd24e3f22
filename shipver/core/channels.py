"""Branch → release channel classification.

Branches are classified by an ordered rule table. Rules are evaluated in
sequence and the first match wins; the final rule matches everything, so
classification is total.

=====================  ========  ==========
Branch                 Label     Category
=====================  ========  ==========
``main``, ``master``   (none)    ``release``
``develop``            ``dev``   ``dev``
``release/*``          ``rc``    ``rc``
``feature/*``          ``alpha`` ``alpha``
``bugfix/*``           ``beta``  ``beta``
``hotfix/*``           ``beta``  ``beta``
anything else          ``alpha`` ``alpha``
=====================  ========  ==========
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional, Sequence

from shipver.constants import (
    BRANCH_REF_PREFIX,
    CHANNEL_ALPHA,
    CHANNEL_BETA,
    CHANNEL_DEV,
    CHANNEL_RC,
    RELEASE_CATEGORY,
)


@dataclass(frozen=True)
class Channel:
    """A release channel.

    Attributes:
        label: Prerelease label appended to the version, or ``None`` for
            the release channel.
        category: Routing tag consumed by publishing stages.
    """

    label: Optional[str]
    category: str

    @property
    def is_prerelease(self) -> bool:
        return self.label is not None


RELEASE_CHANNEL = Channel(label=None, category=RELEASE_CATEGORY)


def custom_channel(label: str) -> Channel:
    """Channel for a user-supplied prerelease label, used verbatim."""
    return Channel(label=label, category=label)


@dataclass(frozen=True)
class ChannelRule:
    """One row of the branch classification table."""

    name: str
    matches: Callable[[str], bool]
    channel: Channel


def _exact(*names: str) -> Callable[[str], bool]:
    return lambda branch: branch in names


def _prefix(*prefixes: str) -> Callable[[str], bool]:
    return lambda branch: branch.startswith(prefixes)


def _any(branch: str) -> bool:
    return True


def _prerelease(label: str) -> Channel:
    return Channel(label=label, category=label)


BRANCH_RULES: Sequence[ChannelRule] = (
    ChannelRule("mainline", _exact("main", "master"), RELEASE_CHANNEL),
    ChannelRule("develop", _exact("develop"), _prerelease(CHANNEL_DEV)),
    ChannelRule("release", _prefix("release/"), _prerelease(CHANNEL_RC)),
    ChannelRule("feature", _prefix("feature/"), _prerelease(CHANNEL_ALPHA)),
    ChannelRule("fix", _prefix("bugfix/", "hotfix/"), _prerelease(CHANNEL_BETA)),
    ChannelRule("other", _any, _prerelease(CHANNEL_ALPHA)),
)


def normalize_branch(branch: str) -> str:
    """Strip a leading ``refs/heads/`` from a git ref."""
    if branch.startswith(BRANCH_REF_PREFIX):
        return branch[len(BRANCH_REF_PREFIX):]
    return branch


def match_rule(
    branch: str,
    rules: Sequence[ChannelRule] = BRANCH_RULES,
) -> ChannelRule:
    """Return the first rule matching ``branch``.

    Raises:
        LookupError: No rule matched (only possible with a custom table
            lacking a catch-all).
    """
    name = normalize_branch(branch)
    for rule in rules:
        if rule.matches(name):
            return rule
    raise LookupError(f"No channel rule matches branch {branch!r}")


def classify_branch(branch: str) -> Channel:
    """Return the release channel for a branch name or ref."""
    return match_rule(branch).channel
