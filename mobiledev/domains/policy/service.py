from dataclasses import dataclass
from types import MappingProxyType
from typing import FrozenSet, Iterable, Mapping, Union

from ...constants import ADVANCED_TOOLS, FREE_TOOLS
from ..license.types import Tier


@dataclass(frozen=True)
class TierLimits:
    max_log_lines: int
    max_devices: int


TIER_LIMITS: Mapping[Tier, TierLimits] = MappingProxyType(
    {
        Tier.FREE: TierLimits(max_log_lines=50, max_devices=1),
        Tier.ADVANCED: TierLimits(max_log_lines=200, max_devices=3),
    }
)


class ToolAccessPolicy:
    """Pure allow/deny and limits lookup for a resolved tier.

    Unknown tool names are always denied and unknown tier values are treated
    as ``free``.
    """

    def __init__(
        self,
        free_tools: Iterable[str] = FREE_TOOLS,
        advanced_tools: Iterable[str] = ADVANCED_TOOLS,
        limits: Mapping[Tier, TierLimits] = TIER_LIMITS,
    ) -> None:
        self.free_tools: FrozenSet[str] = frozenset(free_tools)
        # free is always a subset of advanced
        self.advanced_tools: FrozenSet[str] = frozenset(advanced_tools) | self.free_tools
        if Tier.FREE not in limits:
            raise ValueError("tier limits must define the free tier")
        self.limits = MappingProxyType(dict(limits))

    def can_access(self, tool_name: str, tier: Union[Tier, str]) -> bool:
        if tool_name in self.free_tools:
            return True
        return Tier.coerce(tier) is Tier.ADVANCED and tool_name in self.advanced_tools

    def limits_for(self, tier: Union[Tier, str]) -> TierLimits:
        return self.limits.get(Tier.coerce(tier), self.limits[Tier.FREE])

    def is_free_tool(self, tool_name: str) -> bool:
        return tool_name in self.free_tools

    def is_advanced_only_tool(self, tool_name: str) -> bool:
        return tool_name in self.advanced_tools and tool_name not in self.free_tools

    def tools_for(self, tier: Union[Tier, str]) -> FrozenSet[str]:
        if Tier.coerce(tier) is Tier.ADVANCED:
            return self.advanced_tools
        return self.free_tools
