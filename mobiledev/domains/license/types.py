from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Union


class Tier(str, Enum):
    FREE = "free"
    ADVANCED = "advanced"

    @classmethod
    def coerce(cls, value) -> "Tier":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.FREE


@dataclass(frozen=True)
class EntitlementRecord:
    tier: Tier
    last_validated: int
    license_key: Optional[str] = None
    expires_at: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"tier": self.tier.value, "licenseKey": self.license_key}
        if self.expires_at is not None:
            data["expiresAt"] = self.expires_at
        data["lastValidated"] = self.last_validated
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EntitlementRecord":
        if not isinstance(data, dict):
            raise ValueError("entitlement data must be an object")
        tier = Tier(data.get("tier"))
        last_validated = data.get("lastValidated")
        if isinstance(last_validated, bool) or not isinstance(last_validated, (int, float)):
            raise ValueError("lastValidated must be a number")
        license_key = data.get("licenseKey")
        if license_key is not None and not isinstance(license_key, str):
            raise ValueError("licenseKey must be a string")
        expires_at = data.get("expiresAt")
        if expires_at is not None and not isinstance(expires_at, str):
            raise ValueError("expiresAt must be a string")
        return cls(
            tier=tier,
            last_validated=int(last_validated),
            license_key=license_key,
            expires_at=expires_at,
        )


@dataclass(frozen=True)
class ValidResponse:
    tier: Tier
    expires_at: Optional[str] = None


@dataclass(frozen=True)
class InvalidResponse:
    reason: str


ValidationOutcome = Union[ValidResponse, InvalidResponse]


@dataclass(frozen=True)
class LicenseInfo:
    tier: Tier
    valid: bool = True
    license_key: Optional[str] = None
    expires_at: Optional[str] = None

    @classmethod
    def free(cls) -> "LicenseInfo":
        return cls(tier=Tier.FREE)

    @classmethod
    def from_record(cls, record: EntitlementRecord) -> "LicenseInfo":
        return cls(
            tier=record.tier,
            license_key=record.license_key,
            expires_at=record.expires_at,
        )
