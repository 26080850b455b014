from shared.utils.geometry import bounds_center, clamp
from shared.utils.validation import (
    validate_device_id,
    validate_log_filter,
    validate_log_level,
    validate_package_name,
    validate_port,
    validate_udid,
)

__all__ = [
    "bounds_center",
    "clamp",
    "validate_device_id",
    "validate_log_filter",
    "validate_log_level",
    "validate_package_name",
    "validate_port",
    "validate_udid",
]
