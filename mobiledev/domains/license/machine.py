import logging
import re
import socket
import subprocess
import sys
from pathlib import Path
from typing import Optional

logger = logging.getLogger("mobiledev.license")

MACHINE_ID_FILE = Path("/etc/machine-id")
_IOREG_UUID_RE = re.compile(r'"IOPlatformUUID"\s*=\s*"([A-Fa-f0-9-]+)"')


class MachineIdentity:
    """Stable per-host identifier, computed once per instance.

    Hardware sources are tried for the current platform; any failure falls
    back to the hostname so ``resolve`` never raises.
    """

    def __init__(self, platform: Optional[str] = None, machine_id_file: Path = MACHINE_ID_FILE):
        self.platform = platform or sys.platform
        self.machine_id_file = machine_id_file
        self._value: Optional[str] = None

    def resolve(self) -> str:
        if self._value is None:
            try:
                value = self._hardware_id()
            except Exception as exc:
                logger.debug("hardware machine id unavailable: %s", exc)
                value = None
            self._value = value or socket.gethostname()
        return self._value

    def _hardware_id(self) -> Optional[str]:
        if self.platform == "win32":
            output = self._run(["wmic", "csproduct", "get", "uuid"])
            lines = [line.strip() for line in output.strip().splitlines() if line.strip()]
            return lines[1] if len(lines) > 1 else None
        if self.platform.startswith("linux"):
            if self.machine_id_file.exists():
                return self.machine_id_file.read_text(encoding="utf-8").strip() or None
            return None
        if self.platform == "darwin":
            output = self._run(["ioreg", "-rd1", "-c", "IOPlatformExpertDevice"])
            match = _IOREG_UUID_RE.search(output)
            return match.group(1) if match else None
        return None

    def _run(self, cmd) -> str:
        return subprocess.run(
            cmd, capture_output=True, text=True, timeout=5, check=True
        ).stdout
