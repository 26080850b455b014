import logging
from typing import Callable, Optional
from urllib.parse import urlsplit

from pydantic import BaseModel, ConfigDict, StrictBool, ValidationError

from infra.http import HttpError, post_json
from .cache import EntitlementCache
from .machine import MachineIdentity
from .types import (
    EntitlementRecord,
    InvalidResponse,
    Tier,
    ValidationOutcome,
    ValidResponse,
)

logger = logging.getLogger("mobiledev.license")

LICENSE_API_URL = "https://mobiledev-license-api.giladworkersdev.workers.dev/validate"
VALIDATION_TIMEOUT = 5.0
MAX_RESPONSE_BYTES = 1024 * 1024
PAID_PRODUCT_KEYWORDS = ("advanced", "pro", "basic")


class _ProductMeta(BaseModel):
    model_config = ConfigDict(extra="ignore")

    product_name: Optional[str] = None


class _LicenseKeyMeta(BaseModel):
    model_config = ConfigDict(extra="ignore")

    expires_at: Optional[str] = None


class ValidationPayload(BaseModel):
    model_config = ConfigDict(extra="ignore")

    valid: StrictBool
    meta: Optional[_ProductMeta] = None
    license_key: Optional[_LicenseKeyMeta] = None
    error: Optional[str] = None


def map_product_to_tier(product_name: Optional[str]) -> Tier:
    name = (product_name or "").lower()
    if any(keyword in name for keyword in PAID_PRODUCT_KEYWORDS):
        return Tier.ADVANCED
    return Tier.FREE


def parse_validation_response(body: str) -> ValidationOutcome:
    try:
        payload = ValidationPayload.model_validate_json(body)
    except ValidationError as exc:
        return InvalidResponse("malformed validation response: {} error(s)".format(exc.error_count()))
    if not payload.valid:
        return InvalidResponse(payload.error or "license key is not valid")
    product_name = payload.meta.product_name if payload.meta else None
    expires_at = payload.license_key.expires_at if payload.license_key else None
    return ValidResponse(tier=map_product_to_tier(product_name), expires_at=expires_at)


class RemoteValidator:
    def __init__(
        self,
        identity: MachineIdentity,
        cache: EntitlementCache,
        url: str = LICENSE_API_URL,
        timeout: float = VALIDATION_TIMEOUT,
        max_bytes: int = MAX_RESPONSE_BYTES,
        post: Callable[..., str] = post_json,
    ) -> None:
        if urlsplit(url).scheme != "https":
            raise ValueError("license endpoint must use https: {}".format(url))
        self.url = url
        self.identity = identity
        self.cache = cache
        self.timeout = timeout
        self.max_bytes = max_bytes
        self._post = post

    def validate(self, license_key: str) -> Optional[EntitlementRecord]:
        payload = {"license_key": license_key, "instance_id": self.identity.resolve()}
        try:
            body = self._post(
                self.url, payload, timeout=self.timeout, max_bytes=self.max_bytes
            )
        except HttpError as exc:
            logger.info("license validation request failed: %s", exc)
            return None
        outcome = parse_validation_response(body)
        if isinstance(outcome, InvalidResponse):
            logger.info("license rejected: %s", outcome.reason)
            return None
        record = EntitlementRecord(
            tier=outcome.tier,
            last_validated=self.cache.now_ms(),
            license_key=license_key,
            expires_at=outcome.expires_at,
        )
        self.cache.save(record)
        return record
