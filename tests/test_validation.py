import pytest

from shared.utils import (
    validate_device_id,
    validate_log_filter,
    validate_log_level,
    validate_package_name,
    validate_port,
    validate_udid,
)


@pytest.mark.parametrize("value", ["emulator-5554", "RF8M12345XY", "192.168.1.1:5555", "device.local"])
def test_valid_device_ids(value):
    assert validate_device_id(value)


@pytest.mark.parametrize("value", ["", None, "a b", "emu;reboot", "$(id)", "x" * 65, "emulator-5554\n"])
def test_invalid_device_ids(value):
    assert not validate_device_id(value)


@pytest.mark.parametrize("value", ["com.example.app", "org.reactjs.native.example.Demo", "a.b"])
def test_valid_package_names(value):
    assert validate_package_name(value)


@pytest.mark.parametrize("value", ["example", "com..app", "1com.app", "com.app;ls", "com.app\n", ""])
def test_invalid_package_names(value):
    assert not validate_package_name(value)


def test_udid():
    assert validate_udid("booted")
    assert validate_udid("A1B2C3D4-1111-2222-3333-444455556666")
    assert not validate_udid("A1B2C3D4")
    assert not validate_udid("")


def test_log_filter_and_level():
    assert validate_log_filter("ReactNativeJS")
    assert validate_log_filter("*")
    assert not validate_log_filter("Tag:V")
    assert not validate_log_filter("")
    assert validate_log_level("W")
    assert not validate_log_level("w")
    assert not validate_log_level("INFO")


@pytest.mark.parametrize("value, ok", [(8081, True), (1, True), (65535, True), (0, False), (65536, False), (True, False), ("8081", False)])
def test_port(value, ok):
    assert validate_port(value) is ok
