"""
Core functionality exports for shipver.

This module provides convenient access to the core subsystems of shipver.
Importing from here keeps user-facing imports clean and stable:

    from shipver.core import resolve_version, select_publish_target
"""

from __future__ import annotations

from shipver.core.channels import Channel, ChannelRule, BRANCH_RULES, classify_branch
from shipver.core.commits import ConventionalCommit, parse_commit, suggest_bump
from shipver.core.pipeline import PipelineContext, write_outputs
from shipver.core.resolver import resolve_version
from shipver.core.routing import (
    PublishTarget,
    select_publish_target,
    should_create_release,
    should_tag,
    tag_name,
    tier_for_category,
)

__all__ = [
    "BRANCH_RULES",
    "Channel",
    "ChannelRule",
    "classify_branch",
    "ConventionalCommit",
    "parse_commit",
    "suggest_bump",
    "PipelineContext",
    "write_outputs",
    "resolve_version",
    "PublishTarget",
    "select_publish_target",
    "should_create_release",
    "should_tag",
    "tag_name",
    "tier_for_category",
]
