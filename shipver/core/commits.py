"""Conventional-commit analysis.

Derives a bump suggestion from commit messages of the form::

    type(scope)!: subject

    body

    BREAKING CHANGE: footer

Release rules (a commit takes the highest bump of every rule it matches):

- breaking change (``!`` or a ``BREAKING CHANGE:`` footer) → major
- ``feat`` → minor
- ``fix``, ``docs``, ``style``, ``refactor``, ``perf``, ``test``, ``build``,
  ``ci``, ``chore`` → patch
- scope ``deps`` → patch

Messages that are not conventional commits do not contribute.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, Mapping, Optional

from shipver.constants import BUMP_KINDS
from shipver.utils.logger import get_logger

logger = get_logger("core.commits")

_HEADER_RE = re.compile(
    r"^(?P<type>[A-Za-z][\w-]*)"
    r"(?:\((?P<scope>[^()\r\n]*)\))?"
    r"(?P<breaking>!)?"
    r": (?P<subject>\S.*)$"
)

_BREAKING_FOOTER_RE = re.compile(r"^BREAKING[ -]CHANGE: ", re.MULTILINE)

TYPE_RULES: Mapping[str, str] = {
    "feat": "minor",
    "fix": "patch",
    "docs": "patch",
    "style": "patch",
    "refactor": "patch",
    "perf": "patch",
    "test": "patch",
    "build": "patch",
    "ci": "patch",
    "chore": "patch",
}

SCOPE_RULES: Mapping[str, str] = {
    "deps": "patch",
}


@dataclass(frozen=True)
class ConventionalCommit:
    type: str
    scope: Optional[str]
    subject: str
    breaking: bool = False


def parse_commit(message: str) -> Optional[ConventionalCommit]:
    """Parse a commit message, returning ``None`` if it is not conventional."""
    lines = message.strip().splitlines()
    if not lines:
        return None

    match = _HEADER_RE.match(lines[0].strip())
    if not match:
        return None

    scope = match.group("scope")
    return ConventionalCommit(
        type=match.group("type").lower(),
        scope=scope.strip() if scope else None,
        subject=match.group("subject").strip(),
        breaking=bool(match.group("breaking"))
        or bool(_BREAKING_FOOTER_RE.search(message)),
    )


def _rank(bump: Optional[str]) -> int:
    return BUMP_KINDS.index(bump) if bump is not None else -1


def _max_bump(*bumps: Optional[str]) -> Optional[str]:
    return max(bumps, key=_rank, default=None)


def commit_bump(commit: ConventionalCommit) -> Optional[str]:
    """Return the bump a single commit calls for."""
    if commit.breaking:
        return "major"
    return _max_bump(
        TYPE_RULES.get(commit.type),
        SCOPE_RULES.get(commit.scope or ""),
    )


def suggest_bump(messages: Iterable[str]) -> Optional[str]:
    """Return the highest bump called for by ``messages``, or ``None``."""
    suggestion: Optional[str] = None
    analyzed = 0

    for message in messages:
        commit = parse_commit(message)
        if commit is None:
            continue
        analyzed += 1
        suggestion = _max_bump(suggestion, commit_bump(commit))
        if suggestion == "major":
            break

    logger.debug(
        "Analyzed %d conventional commit(s), suggested bump: %s",
        analyzed,
        suggestion or "none",
    )
    return suggestion
