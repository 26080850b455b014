import json
import logging
import os
import subprocess
import sys
import tempfile
from pathlib import Path

from shared.errors import SimctlError

logger = logging.getLogger("infra.simctl")

SIMULATOR_LOG_PREDICATE = 'subsystem CONTAINS "com.apple.CoreSimulator"'


def resolve_xcrun_path():
    if sys.platform != "darwin":
        return "xcrun"
    for candidate in (
        "/usr/bin/xcrun",
        "/Applications/Xcode.app/Contents/Developer/usr/bin/xcrun",
    ):
        if Path(candidate).exists():
            return candidate
    return "xcrun"


def is_supported():
    return sys.platform == "darwin"


class SimctlClient:
    def __init__(self, xcrun_path="xcrun"):
        self.xcrun_path = xcrun_path

    def _run(self, cmd, timeout=30, text=True):
        logger.debug("run %s", " ".join(cmd))
        try:
            result = subprocess.run(cmd, capture_output=True, timeout=timeout, text=text)
        except FileNotFoundError as exc:
            raise SimctlError("{} not found".format(cmd[0])) from exc
        except subprocess.TimeoutExpired as exc:
            raise SimctlError("{} timed out after {}s".format(cmd[0], timeout)) from exc
        if result.returncode != 0:
            stderr = result.stderr
            if isinstance(stderr, bytes):
                stderr = stderr.decode("utf-8", errors="replace")
            raise SimctlError(
                "command failed: {}\n{}".format(" ".join(cmd), (stderr or "").strip())
            )
        return result

    def simctl(self, args, timeout=30, text=True):
        return self._run([self.xcrun_path, "simctl"] + list(args), timeout=timeout, text=text)

    def list_devices(self):
        result = self.simctl(["list", "devices", "--json"])
        try:
            data = json.loads(result.stdout or "{}")
        except json.JSONDecodeError as exc:
            raise SimctlError("simctl returned invalid JSON") from exc
        devices = data.get("devices") if isinstance(data, dict) else None
        if not isinstance(devices, dict):
            return {}
        return devices

    def find_device(self, udid="booted"):
        for devices in self.list_devices().values():
            for device in devices:
                if device.get("udid") == udid:
                    return device
                if udid == "booted" and device.get("state") == "Booted":
                    return device
        return None

    def screenshot_bytes(self, udid="booted"):
        fd, path = tempfile.mkstemp(prefix="mobiledev_", suffix=".png")
        os.close(fd)
        try:
            self.simctl(["io", udid or "booted", "screenshot", path])
            return Path(path).read_bytes()
        finally:
            try:
                os.unlink(path)
            except FileNotFoundError:
                pass

    def recent_logs(self, lines, window="5m", timeout=10):
        result = self._run(
            [
                "log",
                "show",
                "--predicate",
                SIMULATOR_LOG_PREDICATE,
                "--last",
                window,
                "--style",
                "compact",
            ],
            timeout=timeout,
        )
        output = (result.stdout or "").splitlines()
        return output[-lines:] if lines > 0 else []
