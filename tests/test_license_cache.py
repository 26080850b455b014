import hashlib
import hmac
import json
import os
import stat
import sys

import pytest

from mobiledev.domains.license import EntitlementCache, EntitlementRecord, Tier, canonical_json

from fakes import FixedIdentity


def _record(last_validated, tier=Tier.ADVANCED):
    return EntitlementRecord(
        tier=tier,
        last_validated=last_validated,
        license_key="KEY-1234567890",
        expires_at="2027-01-01T00:00:00Z",
    )


def test_round_trip(cache, clock):
    record = _record(cache.now_ms())

    cache.save(record)

    assert cache.load() == record


def test_envelope_layout(cache, cache_path):
    cache.save(_record(1000))

    envelope = json.loads(cache_path.read_text())
    assert set(envelope) == {"data", "signature"}
    assert list(envelope["data"]) == ["tier", "licenseKey", "expiresAt", "lastValidated"]
    assert envelope["data"] == {
        "tier": "advanced",
        "licenseKey": "KEY-1234567890",
        "expiresAt": "2027-01-01T00:00:00Z",
        "lastValidated": 1000,
    }
    assert envelope["signature"] == cache.sign(envelope["data"])
    assert len(envelope["signature"]) == 64


def test_signature_is_over_compact_json_in_key_order(cache):
    data = {"b": 1, "a": "x"}

    assert canonical_json(data) == '{"b":1,"a":"x"}'
    assert cache.sign(data) != cache.sign({"a": "x", "b": 1})


def test_reads_file_written_by_earlier_release(cache, cache_path):
    payload = (
        '{"tier":"advanced","licenseKey":"KEY-1234567890",'
        '"expiresAt":"2027-01-01T00:00:00Z","lastValidated":1000}'
    )
    signature = hmac.new(b"mobiledev-machine-a-cache-v1", payload.encode("utf-8"), hashlib.sha256).hexdigest()
    cache_path.parent.mkdir(parents=True)
    cache_path.write_text(json.dumps({"data": json.loads(payload), "signature": signature}, indent=2))

    assert cache.load() == _record(1000)
    assert cache.sign(_record(1000).to_dict()) == signature


@pytest.mark.skipif(sys.platform == "win32", reason="POSIX permissions")
def test_owner_only_permissions(cache, cache_path):
    cache.save(_record(1000))

    assert stat.S_IMODE(os.stat(cache_path).st_mode) == 0o600
    assert stat.S_IMODE(os.stat(cache_path.parent).st_mode) == 0o700
    assert [p.name for p in cache_path.parent.iterdir()] == ["license.json"]


def test_missing_file_is_absent(cache, cache_path):
    assert not cache_path.exists()
    assert cache.load() is None


def test_tampered_data_is_discarded(cache, cache_path):
    cache.save(_record(1000, tier=Tier.FREE))
    envelope = json.loads(cache_path.read_text())
    envelope["data"]["tier"] = "advanced"
    cache_path.write_text(json.dumps(envelope))

    assert cache.load() is None
    assert not cache_path.exists()


@pytest.mark.parametrize("field", ["data", "signature"])
def test_single_bit_flip_is_discarded(cache, cache_path, field):
    cache.save(_record(1000))
    envelope = json.loads(cache_path.read_text())
    if field == "signature":
        signature = envelope["signature"]
        flipped = chr(ord(signature[0]) ^ 1)
        envelope["signature"] = flipped + signature[1:]
    else:
        envelope["data"]["lastValidated"] ^= 1
    cache_path.write_text(json.dumps(envelope))

    assert cache.load() is None
    assert not cache_path.exists()


def test_truncated_signature_is_discarded(cache, cache_path):
    cache.save(_record(1000))
    envelope = json.loads(cache_path.read_text())
    envelope["signature"] = envelope["signature"][:-2]
    cache_path.write_text(json.dumps(envelope))

    assert cache.load() is None
    assert not cache_path.exists()


def test_cache_is_not_portable_across_machines(cache_path, clock):
    EntitlementCache(cache_path, FixedIdentity("machine-a"), clock=clock).save(_record(1000))

    other = EntitlementCache(cache_path, FixedIdentity("machine-b"), clock=clock)

    assert other.load() is None
    assert not cache_path.exists()


@pytest.mark.parametrize(
    "content",
    [
        json.dumps({"tier": "advanced", "licenseKey": "KEY-1234567890", "lastValidated": 1}),
        json.dumps({"data": {"tier": "advanced"}}),
        json.dumps({"data": {"tier": "advanced"}, "signature": ""}),
        json.dumps(["not", "an", "object"]),
        "{not json",
    ],
)
def test_legacy_or_corrupt_files_are_removed(cache, cache_path, content):
    cache_path.parent.mkdir(parents=True)
    cache_path.write_text(content)

    assert cache.load() is None
    assert not cache_path.exists()


def test_signed_but_invalid_data_is_removed(cache, cache_path):
    data = {"tier": "platinum", "licenseKey": "KEY-1234567890", "lastValidated": 1}
    cache_path.parent.mkdir(parents=True)
    cache_path.write_text(json.dumps({"data": data, "signature": cache.sign(data)}))

    assert cache.load() is None
    assert not cache_path.exists()


def test_freshness_window(cache, clock):
    record = _record(cache.now_ms())

    assert cache.is_fresh(record)
    clock.advance(59 * 60)
    assert cache.is_fresh(record)
    clock.advance(60)
    assert not cache.is_fresh(record)


def test_save_failure_is_swallowed(tmp_path, identity, clock):
    blocker = tmp_path / "blocker"
    blocker.write_text("a file, not a directory")
    cache = EntitlementCache(blocker / "license.json", identity, clock=clock)

    cache.save(_record(1000))

    assert cache.load() is None


def test_clear_is_idempotent(cache, cache_path):
    cache.save(_record(1000))

    cache.clear()
    cache.clear()

    assert not cache_path.exists()
