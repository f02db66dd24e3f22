from __future__ import annotations

import pytest

from shipver.core.channels import (
    BRANCH_RULES,
    RELEASE_CHANNEL,
    Channel,
    ChannelRule,
    classify_branch,
    custom_channel,
    match_rule,
    normalize_branch,
)


@pytest.mark.unit
class TestBranchRules:
    """Tests for the ordered branch rule table."""

    def test_rule_order(self) -> None:
        """Test rules are evaluated in the documented precedence."""
        assert [rule.name for rule in BRANCH_RULES] == [
            "mainline",
            "develop",
            "release",
            "feature",
            "fix",
            "other",
        ]

    def test_last_rule_is_catch_all(self) -> None:
        assert BRANCH_RULES[-1].matches("anything/at-all")

    @pytest.mark.parametrize(
        "branch, rule",
        [
            ("main", "mainline"),
            ("master", "mainline"),
            ("develop", "develop"),
            ("release/1.x", "release"),
            ("feature/JIRA-1", "feature"),
            ("bugfix/a", "fix"),
            ("hotfix/b", "fix"),
            ("dependabot/npm/x", "other"),
            ("mainline", "other"),
            ("developer", "other"),
            ("releases/1.0", "other"),
            ("feature", "other"),
        ],
    )
    def test_first_match_wins(self, branch: str, rule: str) -> None:
        assert match_rule(branch).name == rule

    def test_custom_table_without_catch_all(self) -> None:
        rules = (ChannelRule("only-main", lambda b: b == "main", RELEASE_CHANNEL),)

        with pytest.raises(LookupError):
            match_rule("develop", rules)


@pytest.mark.unit
class TestClassifyBranch:
    """Tests for classify_branch results."""

    @pytest.mark.parametrize(
        "branch, expected",
        [
            ("main", Channel(None, "release")),
            ("master", Channel(None, "release")),
            ("develop", Channel("dev", "dev")),
            ("release/3.0", Channel("rc", "rc")),
            ("feature/x", Channel("alpha", "alpha")),
            ("bugfix/x", Channel("beta", "beta")),
            ("hotfix/x", Channel("beta", "beta")),
            ("wip", Channel("alpha", "alpha")),
        ],
    )
    def test_classification(self, branch: str, expected: Channel) -> None:
        assert classify_branch(branch) == expected

    def test_full_ref_is_normalized(self) -> None:
        assert classify_branch("refs/heads/release/2.1") == Channel("rc", "rc")

    def test_release_channel_is_not_prerelease(self) -> None:
        assert RELEASE_CHANNEL.is_prerelease is False
        assert classify_branch("develop").is_prerelease is True

    def test_custom_channel_uses_label_verbatim(self) -> None:
        channel = custom_channel("Nightly-Build")

        assert channel.label == "Nightly-Build"
        assert channel.category == "Nightly-Build"


@pytest.mark.unit
class TestNormalizeBranch:
    @pytest.mark.parametrize(
        "value, expected",
        [
            ("refs/heads/main", "main"),
            ("refs/heads/feature/a", "feature/a"),
            ("main", "main"),
            ("refs/tags/v1.0.0", "refs/tags/v1.0.0"),
        ],
    )
    def test_normalize(self, value: str, expected: str) -> None:
        assert normalize_branch(value) == expected
