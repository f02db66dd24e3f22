from __future__ import annotations

import logging
from typing import Generator

import pytest

from shipver.utils.console import reconfigure_console

_PIPELINE_VARS = (
    "GITHUB_REF",
    "GITHUB_HEAD_REF",
    "GITHUB_RUN_NUMBER",
    "GITHUB_SHA",
    "GITHUB_OUTPUT",
    "SHIPVER_CONFIG",
    "SHIPVER_COLOR",
    "SHIPVER_STRATEGY",
    "SHIPVER_PRERELEASE",
)


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Keep CI variables of the machine running the tests out of every test."""
    for name in _PIPELINE_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("NO_COLOR", "1")

    reconfigure_console()
    yield
    reconfigure_console()

    root_logger = logging.getLogger("shipver")
    root_logger.handlers.clear()
    root_logger.setLevel(logging.NOTSET)
    root_logger.propagate = True
