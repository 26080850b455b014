from infra.adb.client import (
    DEVICE_PROPS,
    AdbClient,
    extract_hierarchy,
    resolve_adb_path,
)

__all__ = ["DEVICE_PROPS", "AdbClient", "extract_hierarchy", "resolve_adb_path"]
