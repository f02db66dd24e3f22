"""Version resolution.

:func:`resolve_version` turns the current manifest version plus pipeline
context into a :class:`~shipver.models.VersionDecision`:

1. Parse the numeric prefix of ``current_version``.
2. Pick a bump. With ``strategy="auto"`` a commit-derived suggestion wins,
   otherwise patch is bumped so every run ships a new version. Any other
   strategy is applied directly and the suggestion is ignored.
3. Pick a channel: a custom prerelease label if given, else the branch
   rule table (:mod:`shipver.core.channels`). Prerelease channels append
   ``-{label}.{run_sequence}``.
4. Append ``+{commit id prefix}``.

The function is pure: everything it needs is passed in.
"""

from __future__ import annotations

from typing import Optional

from shipver.constants import (
    BUMP_KINDS,
    COMMIT_ID_LENGTH,
    KNOWN_CHANNELS,
    STRATEGIES,
    STRATEGY_AUTO,
)
from shipver.core.channels import Channel, classify_branch, custom_channel
from shipver.exceptions import ConfigurationError, ParseError
from shipver.models import (
    VersionDecision,
    is_valid_label,
    is_valid_metadata,
    parse_core,
)
from shipver.utils.logger import get_logger

logger = get_logger("core.resolver")


def normalize_strategy(strategy: Optional[str], *, strict: bool = False) -> str:
    """Return a canonical strategy name.

    ``None`` and blank values mean ``auto``. Unknown values fall back to
    ``auto`` with a warning, or raise when ``strict`` is set.

    Raises:
        ConfigurationError: ``strict`` is set and the strategy is unknown.
    """
    if strategy is None or not strategy.strip():
        return STRATEGY_AUTO

    normalized = strategy.strip().lower()
    if normalized in STRATEGIES:
        return normalized

    if strict:
        raise ConfigurationError(
            f"Unknown version strategy {strategy!r}; "
            f"expected one of {', '.join(STRATEGIES)}",
            option="strategy",
            value=strategy,
        )

    logger.warning("Unknown version strategy %r, falling back to auto", strategy)
    return STRATEGY_AUTO


def select_bump(strategy: str, suggested_bump: Optional[str]) -> str:
    """Return the bump kind to apply for a normalized strategy.

    Raises:
        ConfigurationError: ``suggested_bump`` is not a bump kind.
    """
    if suggested_bump is not None and suggested_bump not in BUMP_KINDS:
        raise ConfigurationError(
            f"Unknown suggested bump {suggested_bump!r}; "
            f"expected one of {', '.join(BUMP_KINDS)}",
            option="commit_suggested_bump",
            value=suggested_bump,
        )

    if strategy != STRATEGY_AUTO:
        if suggested_bump is not None and suggested_bump != strategy:
            logger.info(
                "Ignoring commit-suggested %s bump, strategy is %s",
                suggested_bump,
                strategy,
            )
        return strategy

    if suggested_bump is not None:
        return suggested_bump

    logger.info("No bump suggested by commits, incrementing patch version")
    return "patch"


def select_channel(
    branch_name: str,
    custom_prerelease: Optional[str] = None,
    *,
    allow_custom_channels: bool = True,
) -> Channel:
    """Return the release channel for a run.

    Raises:
        ConfigurationError: The custom label is not made of dot-separated
            ``[0-9A-Za-z-]`` identifiers, or is outside the known channels
            while custom channels are disallowed.
    """
    if custom_prerelease:
        if not is_valid_label(custom_prerelease):
            raise ConfigurationError(
                f"Custom prerelease {custom_prerelease!r} must be dot-separated "
                "identifiers of letters, digits and hyphens",
                option="prerelease",
                value=custom_prerelease,
            )
        if not allow_custom_channels and custom_prerelease not in KNOWN_CHANNELS:
            raise ConfigurationError(
                f"Custom prerelease {custom_prerelease!r} is not one of "
                f"{', '.join(KNOWN_CHANNELS)}",
                option="prerelease",
                value=custom_prerelease,
            )
        return custom_channel(custom_prerelease)

    return classify_branch(branch_name)


def commit_id_prefix(commit_id: str) -> str:
    """Return the first eight characters of a commit identifier.

    Raises:
        ParseError: The identifier is shorter than eight characters or its
            prefix contains characters other than ``[0-9A-Za-z-]``.
    """
    commit_id = commit_id.strip()
    if len(commit_id) < COMMIT_ID_LENGTH:
        raise ParseError(
            f"Commit identifier must be at least {COMMIT_ID_LENGTH} characters",
            value=commit_id,
        )
    prefix = commit_id[:COMMIT_ID_LENGTH]
    if not is_valid_metadata(prefix):
        raise ParseError(
            "Commit identifier may only contain letters, digits and hyphens",
            value=commit_id,
        )
    return prefix


def check_run_sequence(run_sequence: int) -> int:
    """Validate a pipeline run counter.

    Raises:
        ConfigurationError: ``run_sequence`` is not a non-negative integer.
    """
    if (
        isinstance(run_sequence, bool)
        or not isinstance(run_sequence, int)
        or run_sequence < 0
    ):
        raise ConfigurationError(
            "Run number must be a non-negative integer",
            option="run_number",
            value=run_sequence,
        )
    return run_sequence


def resolve_version(
    current_version: str,
    *,
    branch_name: str,
    run_sequence: int,
    commit_id: str,
    strategy: Optional[str] = STRATEGY_AUTO,
    custom_prerelease: Optional[str] = None,
    commit_suggested_bump: Optional[str] = None,
    strict_strategy: bool = False,
    allow_custom_channels: bool = True,
) -> VersionDecision:
    """Compute the next version and its release channel.

    Args:
        current_version: Version currently recorded in the manifest.
        branch_name: Branch the pipeline runs on (``refs/heads/`` allowed).
        run_sequence: Pipeline run counter used as prerelease sequence.
        commit_id: Current commit; its first 8 characters become build
            metadata.
        strategy: ``auto``, ``major``, ``minor`` or ``patch``.
        custom_prerelease: Label overriding branch-based channel inference.
        commit_suggested_bump: Bump derived from commit messages, if any.
        strict_strategy: Reject unknown strategies instead of using ``auto``.
        allow_custom_channels: Accept custom labels outside the known
            channel set.

    Returns:
        The resulting :class:`VersionDecision`.

    Raises:
        ParseError: ``current_version`` or ``commit_id`` is malformed.
        ConfigurationError: A rejected strategy, bump, custom label or
            run sequence.

    Examples:
        >>> resolve_version(
        ...     "1.4.2", branch_name="develop", run_sequence=17, commit_id="a1b2c3d4"
        ... ).new_version
        '1.4.3-dev.17+a1b2c3d4'
    """
    base = parse_core(current_version)
    check_run_sequence(run_sequence)
    normalized = normalize_strategy(strategy, strict=strict_strategy)
    bump = select_bump(normalized, commit_suggested_bump)
    channel = select_channel(
        branch_name,
        custom_prerelease,
        allow_custom_channels=allow_custom_channels,
    )

    version = base.bump(bump)
    if channel.label is not None:
        version = version.with_prerelease(channel.label, run_sequence)
    version = version.with_metadata(commit_id_prefix(commit_id))

    decision = VersionDecision(
        version=version,
        current_version=current_version,
        version_category=channel.category,
        bump=bump,
    )
    logger.info(
        "Resolved %s -> %s (bump=%s, category=%s)",
        current_version,
        decision.new_version,
        bump,
        decision.version_category,
    )
    return decision
