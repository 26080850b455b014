import pytest

from mobiledev.constants import ADVANCED_ONLY_TOOLS, ADVANCED_TOOLS, FREE_TOOLS
from mobiledev.domains.license import Tier
from mobiledev.domains.policy import TierLimits, ToolAccessPolicy


@pytest.mark.parametrize("tool", ADVANCED_TOOLS)
def test_advanced_can_do_everything_free_can(policy, tool):
    if policy.can_access(tool, Tier.FREE):
        assert policy.can_access(tool, Tier.ADVANCED)
    assert policy.can_access(tool, Tier.ADVANCED)


@pytest.mark.parametrize("tool", FREE_TOOLS)
def test_free_tools_are_open(policy, tool):
    assert policy.can_access(tool, Tier.FREE)
    assert policy.is_free_tool(tool)
    assert not policy.is_advanced_only_tool(tool)


@pytest.mark.parametrize("tool", ADVANCED_ONLY_TOOLS)
def test_advanced_only_tools_are_denied_to_free(policy, tool):
    assert not policy.can_access(tool, Tier.FREE)
    assert not policy.can_access(tool, "enterprise")
    assert policy.is_advanced_only_tool(tool)


@pytest.mark.parametrize("tier", [Tier.FREE, Tier.ADVANCED, "advanced", "bogus"])
def test_unknown_tool_is_denied(policy, tier):
    assert not policy.can_access("format_disk", tier)
    assert not policy.can_access("", tier)


def test_limits(policy):
    assert policy.limits_for(Tier.FREE) == TierLimits(max_log_lines=50, max_devices=1)
    assert policy.limits_for(Tier.ADVANCED) == TierLimits(max_log_lines=200, max_devices=3)
    assert policy.limits_for("ADVANCED") == policy.limits_for(Tier.ADVANCED)


def test_unknown_tier_gets_free_limits(policy):
    assert policy.limits_for("bogus-tier") == policy.limits_for(Tier.FREE)
    assert policy.tools_for("bogus-tier") == policy.tools_for(Tier.FREE)


def test_tool_sets(policy):
    assert policy.tools_for(Tier.FREE) < policy.tools_for(Tier.ADVANCED)
    assert len(policy.tools_for(Tier.FREE)) == 9
    assert len(policy.tools_for(Tier.ADVANCED)) == 21
    assert "set_license_key" in policy.tools_for(Tier.FREE)


def test_free_tools_are_folded_into_advanced():
    policy = ToolAccessPolicy(free_tools=["a"], advanced_tools=["b"])

    assert policy.can_access("a", Tier.ADVANCED)
    assert policy.tools_for(Tier.ADVANCED) == {"a", "b"}


def test_limits_require_free_tier():
    with pytest.raises(ValueError):
        ToolAccessPolicy(limits={Tier.ADVANCED: TierLimits(200, 3)})
