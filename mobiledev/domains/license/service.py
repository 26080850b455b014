import logging
from typing import TYPE_CHECKING, Any, Dict

from .cache import EntitlementCache
from .types import LicenseInfo, Tier
from .validator import RemoteValidator

if TYPE_CHECKING:
    from ..policy import ToolAccessPolicy

logger = logging.getLogger("mobiledev.license")

MIN_KEY_LEN = 10
MAX_KEY_LEN = 100


class LicenseService:
    def __init__(
        self,
        cache: EntitlementCache,
        validator: RemoteValidator,
        policy: "ToolAccessPolicy",
        upgrade_url: str = "",
    ) -> None:
        self.cache = cache
        self.validator = validator
        self.policy = policy
        self.upgrade_url = upgrade_url

    def resolve(self) -> LicenseInfo:
        """Return the caller's current entitlement, falling back to free.

        A fresh cached record is trusted as is. A stale one is re-validated;
        if that fails the cache is dropped, so a revoked key stops working
        within one TTL window plus one failed round trip.
        """
        stale = False
        try:
            record = self.cache.load()
            if record is None or not record.license_key:
                return LicenseInfo.free()
            if self.cache.is_fresh(record):
                return LicenseInfo.from_record(record)
            stale = True
            refreshed = self.validator.validate(record.license_key)
            if refreshed is not None:
                return LicenseInfo.from_record(refreshed)
            logger.info("license re-validation failed, falling back to free tier")
            self.cache.clear()
            return LicenseInfo.free()
        except Exception:
            logger.exception("license resolution failed, falling back to free tier")
            if stale:
                self.cache.clear()
            return LicenseInfo.free()

    def status(self) -> Dict[str, Any]:
        license_info = self.resolve()
        limits = self.policy.limits_for(license_info.tier)
        is_free = license_info.tier is Tier.FREE
        return {
            "tier": license_info.tier.value.upper(),
            "valid": license_info.valid,
            "expiresAt": license_info.expires_at or "N/A",
            "features": {
                "maxLogLines": limits.max_log_lines,
                "maxDevices": limits.max_devices,
                "tools": len(self.policy.tools_for(license_info.tier)),
            },
            "upgrade": {
                "url": self.upgrade_url,
                "features": ["iOS Simulator support", "UI inspection", "Screen analysis", "Multi-device support"],
            }
            if is_free
            else None,
        }

    def activate(self, license_key) -> Dict[str, Any]:
        if not isinstance(license_key, str) or not license_key.strip():
            return {"success": False, "error": "License key is required"}
        key = license_key.strip()
        if not MIN_KEY_LEN <= len(key) <= MAX_KEY_LEN:
            return {"success": False, "error": "Invalid license key format"}
        record = self.validator.validate(key)
        if record is None:
            return {
                "success": False,
                "error": "Invalid license key. Please check your key and try again.",
            }
        tier_name = record.tier.value.upper()
        return {
            "success": True,
            "tier": tier_name,
            "expiresAt": record.expires_at or "N/A",
            "message": "License activated! You now have {} tier access with {} tools.".format(
                tier_name, len(self.policy.tools_for(record.tier))
            ),
        }
