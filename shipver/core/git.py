"""Local git operations.

Thin wrappers around the ``git`` executable for the few things version
resolution needs: the most recent tag, commit messages since that tag,
and creating an annotated version tag. Pushing tags is left to the
pipeline.
"""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import List, Optional, Sequence

from shipver.constants import GIT_TIMEOUT
from shipver.exceptions import GitError
from shipver.utils.logger import get_logger

logger = get_logger("core.git")

#: Separates commit messages in ``git log`` output.
_RECORD_SEPARATOR = "\x1e"


def _run_git(args: Sequence[str], cwd: Path) -> subprocess.CompletedProcess:
    command = ["git", *args]
    logger.debug("Running: %s", " ".join(command))
    try:
        return subprocess.run(
            command,
            cwd=str(cwd),
            capture_output=True,
            text=True,
            timeout=GIT_TIMEOUT,
            check=False,
        )
    except FileNotFoundError as exc:
        raise GitError("git executable not found", command=" ".join(command)) from exc
    except subprocess.TimeoutExpired as exc:
        raise GitError(
            f"git timed out after {GIT_TIMEOUT:.0f}s",
            command=" ".join(command),
        ) from exc


def _check(result: subprocess.CompletedProcess, message: str) -> str:
    if result.returncode != 0:
        raise GitError(
            message,
            command=" ".join(result.args),
            returncode=result.returncode,
            stderr=result.stderr,
        )
    return result.stdout


def last_tag(cwd: Path) -> Optional[str]:
    """Return the most recent tag reachable from HEAD, or ``None``."""
    result = _run_git(["describe", "--tags", "--abbrev=0"], cwd)
    if result.returncode != 0:
        # git describe fails with "No names found" in untagged repositories
        if "no names found" in result.stderr.lower() or "no tags" in result.stderr.lower():
            logger.debug("No tags found in %s", cwd)
            return None
        _check(result, "Failed to find last tag")
    tag = result.stdout.strip()
    logger.debug("Last tag: %s", tag)
    return tag or None


def commit_messages(cwd: Path, since: Optional[str] = None) -> List[str]:
    """Return full commit messages in ``since..HEAD``, newest first.

    When ``since`` is ``None`` the entire history of HEAD is returned.
    """
    revision = f"{since}..HEAD" if since else "HEAD"
    result = _run_git(["log", f"--format=%B{_RECORD_SEPARATOR}", revision], cwd)
    output = _check(result, f"Failed to read commit log for {revision}")

    messages = [m.strip() for m in output.split(_RECORD_SEPARATOR)]
    messages = [m for m in messages if m]
    logger.debug("Read %d commit message(s) from %s", len(messages), revision)
    return messages


def create_tag(cwd: Path, name: str, message: Optional[str] = None) -> None:
    """Create an annotated tag at HEAD.

    Raises:
        GitError: The tag already exists or git fails.
    """
    result = _run_git(["tag", "-a", name, "-m", message or f"Release {name}"], cwd)
    _check(result, f"Failed to create tag {name}")
    logger.info("Created tag %s", name)
