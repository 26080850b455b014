from .service import TIER_LIMITS, TierLimits, ToolAccessPolicy

__all__ = ["TIER_LIMITS", "TierLimits", "ToolAccessPolicy"]
