"""Pipeline context and outputs.

Reads the values the CI platform provides for a run (branch, run counter,
commit) once into a :class:`PipelineContext`, and writes a decision back as
step outputs. GitHub Actions variables are used:

- ``GITHUB_HEAD_REF`` / ``GITHUB_REF`` → branch
- ``GITHUB_RUN_NUMBER`` → run sequence
- ``GITHUB_SHA`` → commit
- ``GITHUB_OUTPUT`` → output file
"""

from __future__ import annotations

import os
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import List, Mapping, Optional

from shipver.core.channels import normalize_branch
from shipver.exceptions import ConfigurationError
from shipver.utils.filesystem import PathLike, append_lines
from shipver.utils.logger import get_logger

logger = get_logger("core.pipeline")


@dataclass(frozen=True)
class PipelineContext:
    """Values supplied by the CI platform for one run.

    Fields are ``None`` when the platform did not provide them.
    """

    branch_name: Optional[str] = None
    run_number: Optional[str] = None
    commit_sha: Optional[str] = None
    output_path: Optional[Path] = None

    @classmethod
    def from_environ(
        cls,
        environ: Optional[Mapping[str, str]] = None,
    ) -> "PipelineContext":
        env = os.environ if environ is None else environ

        # Pull request runs carry the source branch in GITHUB_HEAD_REF
        branch = env.get("GITHUB_HEAD_REF") or env.get("GITHUB_REF") or None
        output = env.get("GITHUB_OUTPUT") or None

        return cls(
            branch_name=normalize_branch(branch) if branch else None,
            run_number=env.get("GITHUB_RUN_NUMBER") or None,
            commit_sha=env.get("GITHUB_SHA") or None,
            output_path=Path(output) if output else None,
        )

    @property
    def run_sequence(self) -> int:
        """The run counter as an integer.

        Raises:
            ConfigurationError: The run number is missing or not a
                non-negative integer.
        """
        if self.run_number is None:
            raise ConfigurationError(
                "Run number not available; pass --run-number or set GITHUB_RUN_NUMBER",
                option="run_number",
            )
        try:
            value = int(self.run_number)
        except ValueError:
            value = -1
        if value < 0:
            raise ConfigurationError(
                "Run number must be a non-negative integer",
                option="run_number",
                value=self.run_number,
            )
        return value


def _output_lines(key: str, value: str) -> List[str]:
    """Render one step output.

    Single-line values use ``key=value``. Values containing a line break use
    the ``key<<DELIMITER`` form so they cannot inject further outputs.
    """
    if not key or any(c in key for c in "=\r\n") or "<<" in key:
        raise ValueError(f"Invalid output name: {key!r}")

    if "\n" not in value and "\r" not in value:
        return [f"{key}={value}"]

    delimiter = f"ghadelimiter_{uuid.uuid4()}"
    return [f"{key}<<{delimiter}", *value.splitlines(), delimiter]


def write_outputs(outputs: Mapping[str, str], path: PathLike) -> None:
    """Append outputs to a step output file."""
    lines: List[str] = []
    for key, value in outputs.items():
        lines.extend(_output_lines(key, value))
    append_lines(path, lines)
    logger.debug("Wrote %d output(s) to %s", len(outputs), path)
