import logging
import os
import re
import subprocess
import sys
from pathlib import Path

from shared.errors import AdbError

logger = logging.getLogger("infra.adb")

UI_DUMP_PATH = "/sdcard/uidump.xml"
DEVICE_PROPS = (
    "ro.product.model",
    "ro.build.version.release",
    "ro.build.version.sdk",
    "ro.product.manufacturer",
)


def resolve_adb_path():
    home = Path.home()
    android_home = os.environ.get("ANDROID_HOME")
    if sys.platform == "win32":
        local_app_data = os.environ.get("LOCALAPPDATA") or str(home / "AppData" / "Local")
        candidates = [
            Path(local_app_data) / "Android" / "Sdk" / "platform-tools" / "adb.exe",
            Path(android_home) / "platform-tools" / "adb.exe" if android_home else None,
            Path("C:/Android/Sdk/platform-tools/adb.exe"),
            home / "Android" / "Sdk" / "platform-tools" / "adb.exe",
        ]
    else:
        candidates = [
            Path(android_home) / "platform-tools" / "adb" if android_home else None,
            home / "Library" / "Android" / "sdk" / "platform-tools" / "adb",
            home / "Android" / "Sdk" / "platform-tools" / "adb",
            Path("/opt/homebrew/bin/adb"),
            Path("/usr/local/bin/adb"),
        ]
    for candidate in candidates:
        if candidate and candidate.exists():
            return str(candidate)
    return "adb"


def extract_hierarchy(xml_text):
    if not xml_text:
        return None
    xml_text = xml_text.replace("\x00", "")
    match = re.search(r"<hierarchy[^>]*>.*</hierarchy>", xml_text, re.DOTALL)
    if not match:
        return None
    return match.group(0).strip()


class AdbClient:
    def __init__(self, adb_path="adb", device_id=None, dump_timeout=10):
        self.adb_path = adb_path
        self.device_id = device_id or None
        self.dump_timeout = dump_timeout

    def for_device(self, device_id):
        if not device_id or device_id == self.device_id:
            return self
        return AdbClient(self.adb_path, device_id, dump_timeout=self.dump_timeout)

    def _base_cmd(self):
        cmd = [self.adb_path]
        if self.device_id:
            cmd += ["-s", self.device_id]
        return cmd

    def run(self, args, timeout=30, check=True, text=True):
        cmd = self._base_cmd() + list(args)
        logger.debug("adb %s", " ".join(cmd[1:]))
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                timeout=timeout,
                text=text,
            )
        except FileNotFoundError as exc:
            raise AdbError("adb not found at {}".format(self.adb_path)) from exc
        except subprocess.TimeoutExpired as exc:
            raise AdbError(
                "adb timed out after {}s: {}".format(timeout, " ".join(cmd))
            ) from exc
        if check and result.returncode != 0:
            stderr = result.stderr
            if isinstance(stderr, bytes):
                stderr = stderr.decode("utf-8", errors="replace")
            raise AdbError(
                "adb failed: {}\n{}".format(" ".join(cmd), (stderr or "").strip())
            )
        return result

    def list_devices(self):
        output = self.run(["devices"], timeout=10).stdout.splitlines()
        devices = []
        for line in output[1:]:
            parts = line.split()
            if len(parts) >= 2:
                devices.append((parts[0], parts[1]))
        return devices

    def shell(self, cmd, timeout=30, check=True):
        if isinstance(cmd, str):
            args = ["shell", cmd]
        else:
            args = ["shell"] + list(cmd)
        return self.run(args, timeout=timeout, check=check)

    def exec_out(self, cmd, timeout=30):
        if isinstance(cmd, str):
            args = ["exec-out", cmd]
        else:
            args = ["exec-out"] + list(cmd)
        return self.run(args, timeout=timeout, check=True, text=False)

    def getprop(self, name):
        return (self.shell(["getprop", name], timeout=10).stdout or "").strip()

    def screen_size(self):
        return (self.shell(["wm", "size"], timeout=10).stdout or "").strip()

    def meminfo(self, lines=3):
        output = self.shell(["cat", "/proc/meminfo"], timeout=10).stdout or ""
        return output.splitlines()[:lines]

    def dumpsys_package(self, package, lines=50):
        output = self.shell(["dumpsys", "package", package], timeout=15).stdout or ""
        return output.splitlines()[:lines]

    def logcat(self, lines, log_filter="*", level="I", timeout=5):
        args = ["logcat", "-d"]
        if log_filter != "*":
            args += ["-s", "{}:{}".format(log_filter, level)]
        args += ["-t", str(lines)]
        return self.run(args, timeout=timeout).stdout or ""

    def screenshot_bytes(self):
        result = self.exec_out(["screencap", "-p"])
        return result.stdout

    def _dump_ui_direct(self):
        candidates = [
            ["uiautomator", "dump", "--compressed", "/dev/tty"],
            ["uiautomator", "dump", "/dev/tty"],
        ]
        for args in candidates:
            try:
                result = self.exec_out(args, timeout=self.dump_timeout)
            except AdbError as exc:
                logger.debug("direct ui dump failed: %s", exc)
                continue
            xml_text = result.stdout.decode("utf-8", errors="replace")
            extracted = extract_hierarchy(xml_text)
            if extracted:
                return extracted
        return None

    def dump_ui(self):
        xml_text = self._dump_ui_direct()
        if xml_text:
            return xml_text
        self.shell(["uiautomator", "dump", UI_DUMP_PATH], timeout=self.dump_timeout)
        result = self.exec_out(["cat", UI_DUMP_PATH], timeout=self.dump_timeout)
        extracted = extract_hierarchy(
            result.stdout.decode("utf-8", errors="replace")
        )
        if not extracted:
            raise AdbError("failed to extract UI hierarchy")
        return extracted
