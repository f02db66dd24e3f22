"""Resolve command implementation for shipver.

Computes the next version of a project and, optionally, applies it.

The command wires the collaborators around the resolver:

1. **Manifest reader** — reads the current version from ``pom.xml`` or
   ``package.json`` (unless ``--current-version`` is given).
2. **Commit analyzer** — derives a bump suggestion from conventional
   commits since the last tag (only for the ``auto`` strategy).
3. **Pipeline context** — branch, run number and commit, from options or
   the CI environment.
4. **Resolver** — produces the :class:`VersionDecision`.
5. **Manifest writer / tag creator** — with ``--write`` / ``--tag``.

Typical usage::

    # Inside a GitHub Actions job
    $ shipver resolve --format github --write

    # Locally, everything explicit
    $ shipver resolve --current-version 1.4.2 --branch develop \\
        --run-number 17 --sha a1b2c3d4e5 --no-analyze-commits
"""

from __future__ import annotations

import sys
import json
from pathlib import Path
from typing import Dict, Optional

import click

from shipver.config import ShipverConfig
from shipver.constants import BUMP_KINDS, MANIFEST_FILES, STRATEGY_AUTO
from shipver.context import ShipverContext, pass_context
from shipver.core import git, manifest
from shipver.core.commits import suggest_bump
from shipver.core.pipeline import PipelineContext, write_outputs
from shipver.core.resolver import normalize_strategy, resolve_version
from shipver.core.routing import (
    PublishTarget,
    select_publish_target,
    should_create_release,
    should_tag,
    tag_name,
)
from shipver.exceptions import ConfigurationError, GitError, ShipverError
from shipver.models import VersionDecision
from shipver.utils import (
    colorize_category,
    get_logger,
    print_error,
    print_outputs,
    print_success,
    print_table,
    print_warning,
)

logger = get_logger("commands.resolve")


@click.command()
@click.option(
    "--project-dir",
    "-d",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=".",
    show_default=True,
    help="Project root containing the manifest.",
)
@click.option(
    "--project-type",
    "-t",
    type=click.Choice(["auto", *MANIFEST_FILES], case_sensitive=False),
    default="auto",
    show_default=True,
    help="Manifest flavour; auto detects pom.xml, then package.json.",
)
@click.option(
    "--current-version",
    help="Use this version instead of reading the manifest.",
)
@click.option(
    "--strategy",
    "-s",
    envvar="SHIPVER_STRATEGY",
    help="Versioning strategy: auto, major, minor or patch.",
)
@click.option(
    "--prerelease",
    "-p",
    envvar="SHIPVER_PRERELEASE",
    default="",
    help="Custom prerelease label overriding branch-based channels.",
)
@click.option("--branch", "-b", help="Branch name (default: from CI environment).")
@click.option(
    "--run-number",
    "-n",
    type=click.IntRange(min=0),
    help="Run counter (default: GITHUB_RUN_NUMBER).",
)
@click.option("--sha", help="Commit identifier (default: GITHUB_SHA).")
@click.option(
    "--bump",
    type=click.Choice(BUMP_KINDS, case_sensitive=False),
    help="Bump suggestion to use instead of analyzing commits.",
)
@click.option(
    "--analyze-commits/--no-analyze-commits",
    default=True,
    show_default=True,
    help="Derive the bump from conventional commits since the last tag.",
)
@click.option(
    "--write",
    is_flag=True,
    help="Write the new version to the manifest when it changed.",
)
@click.option(
    "--tag",
    is_flag=True,
    help="Create an annotated version tag on allow-listed branches.",
)
@click.option(
    "--format",
    "-f",
    type=click.Choice(["table", "json", "github"], case_sensitive=False),
    default="table",
    show_default=True,
    help="Output format; github also appends to $GITHUB_OUTPUT.",
)
@pass_context
def resolve(
    ctx: ShipverContext,
    project_dir: Path,
    project_type: str,
    current_version: Optional[str],
    strategy: Optional[str],
    prerelease: str,
    branch: Optional[str],
    run_number: Optional[int],
    sha: Optional[str],
    bump: Optional[str],
    analyze_commits: bool,
    write: bool,
    tag: bool,
    format: str,
) -> None:
    """Calculate the next semantic version and its release channel.

    \b
    Exits:
        0 on success, 1 if the version cannot be resolved.
    """
    config = ctx.get_config()
    pipeline = PipelineContext.from_environ()

    try:
        branch_name = branch or pipeline.branch_name
        if not branch_name:
            raise ConfigurationError(
                "Branch not available; pass --branch or set GITHUB_REF",
                option="branch",
            )
        commit_id = sha or pipeline.commit_sha
        if not commit_id:
            raise ConfigurationError(
                "Commit not available; pass --sha or set GITHUB_SHA",
                option="sha",
            )
        run_sequence = run_number if run_number is not None else pipeline.run_sequence

        resolved_type: Optional[str] = None
        if current_version is None or write:
            resolved_type = _resolve_project_type(project_dir, project_type)
        if current_version is None:
            current_version = manifest.read_version(project_dir, resolved_type)

        effective_strategy = normalize_strategy(
            strategy or config.strategy,
            strict=config.strict_strategy,
        )
        suggested = bump.lower() if bump else None
        if suggested is None and effective_strategy == STRATEGY_AUTO and analyze_commits:
            suggested = _suggest_from_history(project_dir)

        decision = resolve_version(
            current_version,
            branch_name=branch_name,
            run_sequence=run_sequence,
            commit_id=commit_id,
            strategy=effective_strategy,
            custom_prerelease=prerelease or None,
            commit_suggested_bump=suggested,
            strict_strategy=config.strict_strategy,
            allow_custom_channels=config.allow_custom_channels,
        )
        target = select_publish_target(decision.version_category, config)
        tagging = should_tag(decision, branch_name, config)

        if write and resolved_type is not None:
            if decision.version_changed:
                manifest.write_version(project_dir, resolved_type, decision.new_version)
            else:
                logger.info("Version unchanged, manifest not written")

        if tag and tagging:
            git.create_tag(project_dir, tag_name(decision, config))
        elif tag:
            logger.info("Branch %s is not eligible for tagging", branch_name)

        outputs = _build_outputs(decision, target, tagging, config)
        _display(format, decision, outputs, pipeline)

    except ShipverError as e:
        print_error(f"{e}")
        logger.debug("resolve failed", exc_info=True)
        sys.exit(1)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _resolve_project_type(project_dir: Path, project_type: str) -> str:
    project_type = project_type.lower()
    if project_type == "auto":
        return manifest.detect_project_type(project_dir)
    return project_type


def _suggest_from_history(project_dir: Path) -> Optional[str]:
    """Analyze commits since the last tag.

    Git problems degrade to "no suggestion", which bumps patch.
    """
    try:
        since = git.last_tag(project_dir)
        messages = git.commit_messages(project_dir, since)
    except GitError as exc:
        print_warning(f"Commit analysis skipped: {exc}")
        return None

    suggestion = suggest_bump(messages)
    logger.info(
        "Commits since %s suggest: %s",
        since or "repository start",
        suggestion or "no release",
    )
    return suggestion


def _build_outputs(
    decision: VersionDecision,
    target: PublishTarget,
    tagging: bool,
    config: ShipverConfig,
) -> Dict[str, str]:
    outputs = decision.to_outputs()
    outputs.update(
        {
            "publish_version": decision.publish_version,
            "publish_tier": target.tier,
            "artifact_store": target.artifact_store,
            "container_registry": target.container_registry,
            "tag_name": tag_name(decision, config) if tagging else "",
            "create_release": "true" if should_create_release(decision) else "false",
        }
    )
    return outputs


def _display(
    format: str,
    decision: VersionDecision,
    outputs: Dict[str, str],
    pipeline: PipelineContext,
) -> None:
    format = format.lower()

    if format == "json":
        data = decision.to_json()
        data.update({k: v for k, v in outputs.items() if k not in data})
        click.echo(json.dumps(data, indent=2))
        return

    if format == "github":
        if pipeline.output_path is not None:
            write_outputs(outputs, pipeline.output_path)
        else:
            print_warning("GITHUB_OUTPUT is not set; outputs printed only")
        print_outputs(outputs)
        return

    rows = [
        {"Field": "Current version", "Value": decision.current_version},
        {"Field": "New version", "Value": decision.new_version},
        {"Field": "Bump", "Value": decision.bump or ""},
        {"Field": "Category", "Value": colorize_category(decision.version_category)},
        {"Field": "Prerelease", "Value": outputs["is_prerelease"]},
        {"Field": "Publish tier", "Value": colorize_category(outputs["publish_tier"])},
        {"Field": "Artifact store", "Value": outputs["artifact_store"]},
        {"Field": "Container registry", "Value": outputs["container_registry"]},
        {"Field": "Tag", "Value": outputs["tag_name"] or "-"},
        {"Field": "Create release", "Value": outputs["create_release"]},
    ]
    print_table(rows, title="Version decision", column_styles={"Field": {"style": "bold"}})
    print_success(f"Resolved version {decision.new_version}")
