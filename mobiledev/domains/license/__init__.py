from .cache import CACHE_TTL_SECONDS, EntitlementCache, canonical_json
from .machine import MachineIdentity
from .service import LicenseService
from .types import (
    EntitlementRecord,
    InvalidResponse,
    LicenseInfo,
    Tier,
    ValidationOutcome,
    ValidResponse,
)
from .validator import (
    LICENSE_API_URL,
    RemoteValidator,
    map_product_to_tier,
    parse_validation_response,
)

__all__ = [
    "CACHE_TTL_SECONDS",
    "EntitlementCache",
    "canonical_json",
    "MachineIdentity",
    "LicenseService",
    "EntitlementRecord",
    "InvalidResponse",
    "LicenseInfo",
    "Tier",
    "ValidationOutcome",
    "ValidResponse",
    "LICENSE_API_URL",
    "RemoteValidator",
    "map_product_to_tier",
    "parse_validation_response",
]
