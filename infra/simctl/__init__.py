from infra.simctl.client import SimctlClient, is_supported, resolve_xcrun_path

__all__ = ["SimctlClient", "is_supported", "resolve_xcrun_path"]
