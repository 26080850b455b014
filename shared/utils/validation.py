import re

_DEVICE_ID_RE = re.compile(r"^[a-zA-Z0-9\-.:]+$")
_PACKAGE_RE = re.compile(r"^[a-zA-Z][a-zA-Z0-9_]*(\.[a-zA-Z][a-zA-Z0-9_]*)+$")
_UDID_RE = re.compile(
    r"^[0-9A-Fa-f]{8}-[0-9A-Fa-f]{4}-[0-9A-Fa-f]{4}-[0-9A-Fa-f]{4}-[0-9A-Fa-f]{12}$"
)
_LOG_FILTER_RE = re.compile(r"^[a-zA-Z0-9_*]+$")

LOG_LEVELS = ("V", "D", "I", "W", "E", "F")


def validate_device_id(device_id):
    # emulator-5554, RF8M12345XY, 192.168.1.1:5555
    if not device_id or len(device_id) > 64:
        return False
    return bool(_DEVICE_ID_RE.fullmatch(device_id))


def validate_package_name(package_name):
    if not package_name or not 3 <= len(package_name) <= 255:
        return False
    return bool(_PACKAGE_RE.fullmatch(package_name))


def validate_udid(udid):
    if not udid:
        return False
    if udid == "booted":
        return True
    return bool(_UDID_RE.fullmatch(udid))


def validate_log_filter(log_filter):
    if not log_filter or len(log_filter) > 128:
        return False
    return bool(_LOG_FILTER_RE.fullmatch(log_filter))


def validate_log_level(level):
    return level in LOG_LEVELS


def validate_port(port):
    return isinstance(port, int) and not isinstance(port, bool) and 1 <= port <= 65535
