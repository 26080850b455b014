import hashlib
import hmac
import json
import logging
import os
import tempfile
import time
from pathlib import Path
from typing import Any, Callable, Dict, Optional

from .machine import MachineIdentity
from .types import EntitlementRecord

logger = logging.getLogger("mobiledev.license")

CACHE_TTL_SECONDS = 60 * 60


def canonical_json(data: Dict[str, Any]) -> str:
    # compact, keys in insertion order; matches files written by earlier releases
    return json.dumps(data, separators=(",", ":"), ensure_ascii=False)


class EntitlementCache:
    """Signed on-disk record of the last validated license.

    The envelope is ``{"data": {...}, "signature": "<hex>"}``. The signature
    is an HMAC-SHA256 keyed by the machine identity, so a file copied from
    another host, hand-edited, or written by an older unsigned release is
    deleted on read instead of being trusted.
    """

    def __init__(
        self,
        path: Path,
        identity: MachineIdentity,
        ttl_seconds: float = CACHE_TTL_SECONDS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.path = Path(path)
        self.identity = identity
        self.ttl_seconds = ttl_seconds
        self.clock = clock

    def _secret(self) -> bytes:
        return "mobiledev-{}-cache-v1".format(self.identity.resolve()).encode("utf-8")

    def sign(self, data: Dict[str, Any]) -> str:
        payload = canonical_json(data).encode("utf-8")
        return hmac.new(self._secret(), payload, hashlib.sha256).hexdigest()

    def verify(self, data: Dict[str, Any], signature: str) -> bool:
        expected = self.sign(data).encode("utf-8")
        actual = signature.encode("utf-8")
        if len(actual) != len(expected):
            return False
        return hmac.compare_digest(actual, expected)

    def now_ms(self) -> int:
        return int(self.clock() * 1000)

    def is_fresh(self, record: EntitlementRecord) -> bool:
        return self.now_ms() - record.last_validated < self.ttl_seconds * 1000

    def load(self) -> Optional[EntitlementRecord]:
        if not self.path.exists():
            return None
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.warning("license cache unreadable (%s), clearing", exc)
            self.clear()
            return None
        data = raw.get("data") if isinstance(raw, dict) else None
        signature = raw.get("signature") if isinstance(raw, dict) else None
        if not isinstance(data, dict) or not isinstance(signature, str) or not signature:
            logger.warning("license cache is unsigned, clearing")
            self.clear()
            return None
        if not self.verify(data, signature):
            logger.warning("license cache signature mismatch, clearing")
            self.clear()
            return None
        try:
            return EntitlementRecord.from_dict(data)
        except ValueError as exc:
            logger.warning("license cache data invalid (%s), clearing", exc)
            self.clear()
            return None

    def save(self, record: EntitlementRecord) -> None:
        data = record.to_dict()
        envelope = {"data": data, "signature": self.sign(data)}
        tmp_path = None
        try:
            self.path.parent.mkdir(mode=0o700, parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(
                dir=str(self.path.parent), prefix=".license-", suffix=".tmp"
            )
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(envelope, handle, indent=2)
            os.chmod(tmp_path, 0o600)
            os.replace(tmp_path, self.path)
            tmp_path = None
        except OSError as exc:
            logger.debug("license cache write failed: %s", exc)
        finally:
            if tmp_path:
                try:
                    os.unlink(tmp_path)
                except OSError:
                    pass

    def clear(self) -> None:
        try:
            self.path.unlink()
        except FileNotFoundError:
            pass
        except OSError as exc:
            logger.debug("license cache delete failed: %s", exc)
