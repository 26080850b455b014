import base64
import json
from typing import Callable

from infra.adb import DEVICE_PROPS, AdbClient
from infra.http import HttpError, get_text
from infra.simctl import SimctlClient, is_supported
from shared.utils import (
    clamp,
    validate_log_filter,
    validate_log_level,
    validate_package_name,
    validate_port,
    validate_udid,
)
from ...constants import DEFAULT_LOG_LINES
from ..policy import TierLimits
from ..tools.result import ToolResult
from ..tools.schemas import (
    AdbLogsArgs,
    AppInfoArgs,
    DeviceArgs,
    ListSimulatorsArgs,
    LogLinesArgs,
    MetroStatusArgs,
    NoArgs,
    SimulatorArgs,
)

UPGRADE_LINES_NOTE = "[Showing {} lines, upgrade to ADVANCED for more]"
INVALID_UDID = "Invalid iOS Simulator UDID format. Must be UUID format or 'booted'."
MACOS_ONLY = "iOS Simulators are only available on macOS"


def clip_lines(requested, limits: TierLimits) -> int:
    requested = requested or DEFAULT_LOG_LINES
    return int(clamp(int(requested), 1, limits.max_log_lines))


class DeviceService:
    def __init__(
        self,
        adb: AdbClient,
        simctl: SimctlClient,
        metro_port: int = 8081,
        http_get: Callable[..., str] = get_text,
        ios_supported: Callable[[], bool] = is_supported,
    ) -> None:
        self.adb = adb
        self.simctl = simctl
        self.metro_port = metro_port
        self._http_get = http_get
        self._ios_supported = ios_supported

    # Android

    def screenshot_emulator(self, args: DeviceArgs, limits: TierLimits) -> ToolResult:
        png = self.adb.for_device(args.device).screenshot_bytes()
        return ToolResult.image(
            "Screenshot captured successfully", base64.b64encode(png).decode("ascii")
        )

    def list_devices(self, args: NoArgs, limits: TierLimits) -> ToolResult:
        devices = self.adb.list_devices()
        if not devices:
            return ToolResult.text(
                "No devices connected. Start an emulator or connect a device."
            )
        limited = devices[: limits.max_devices]
        lines = ["Connected devices (showing {}/{}):".format(len(limited), len(devices))]
        lines += ["  {} - {}".format(device_id, status) for device_id, status in limited]
        text = "\n".join(lines)
        if len(devices) > limits.max_devices:
            text += "\n\n[Upgrade to ADVANCED to see all {} devices]".format(len(devices))
        return ToolResult.text(text)

    def get_device_info(self, args: DeviceArgs, limits: TierLimits) -> ToolResult:
        adb = self.adb.for_device(args.device)
        lines = ["Device Information:"]
        for prop in DEVICE_PROPS:
            lines.append("  {}: {}".format(prop, adb.getprop(prop)))
        lines.append("  Screen: {}".format(adb.screen_size()))
        lines.append("  Memory:")
        lines += ["    {}".format(line) for line in adb.meminfo(3)]
        return ToolResult.text("\n".join(lines))

    def get_app_info(self, args: AppInfoArgs, limits: TierLimits) -> ToolResult:
        if not validate_package_name(args.package_name):
            return ToolResult.text(
                "Invalid package name format. Package names should be like 'com.example.app'."
            )
        output = self.adb.for_device(args.device).dumpsys_package(args.package_name, 50)
        return ToolResult.text("\n".join(output))

    def get_adb_logs(self, args: AdbLogsArgs, limits: TierLimits) -> ToolResult:
        requested = args.lines or DEFAULT_LOG_LINES
        lines = clip_lines(requested, limits)
        if not validate_log_filter(args.log_filter):
            return ToolResult.text(
                "Invalid log filter format. Filters should be alphanumeric with "
                "underscores (e.g., 'ReactNativeJS', '*')."
            )
        if not validate_log_level(args.level):
            return ToolResult.text("Invalid log level. Use one of: V, D, I, W, E, F.")
        output = self.adb.for_device(args.device).logcat(
            lines, log_filter=args.log_filter, level=args.level
        )
        text = output or "No logs found"
        if lines < requested:
            text += "\n\n" + UPGRADE_LINES_NOTE.format(lines)
        return ToolResult.text(text)

    # Metro

    def _metro_status(self, port: int) -> str:
        return self._http_get("http://localhost:{}/status".format(port), timeout=2)

    def get_metro_logs(self, args: LogLinesArgs, limits: TierLimits) -> ToolResult:
        requested = args.lines or DEFAULT_LOG_LINES
        lines = clip_lines(requested, limits)
        try:
            status = self._metro_status(self.metro_port)
        except HttpError:
            return ToolResult.text(
                "Metro not responding on port {}. Is it running?".format(self.metro_port)
            )
        text = "Metro Status (port {}): {}\n".format(self.metro_port, status)
        text += "\n[Metro logs are written to the terminal running the bundler]"
        if lines < requested:
            text += "\n" + UPGRADE_LINES_NOTE.format(lines)
        return ToolResult.text(text)

    def check_metro_status(self, args: MetroStatusArgs, limits: TierLimits) -> ToolResult:
        port = self.metro_port if args.port is None else args.port
        if not validate_port(port):
            return ToolResult.text(
                "Invalid port number. Port must be between 1 and 65535."
            )
        try:
            status = self._metro_status(port)
        except HttpError:
            return ToolResult.text("Metro bundler is NOT running on port {}".format(port))
        return ToolResult.text(
            "Metro bundler is running on port {}\nStatus: {}".format(port, status)
        )

    # iOS Simulator

    def screenshot_ios_simulator(self, args: SimulatorArgs, limits: TierLimits) -> ToolResult:
        if not self._ios_supported():
            return ToolResult.text("iOS screenshots only available on macOS")
        if args.udid and not validate_udid(args.udid):
            return ToolResult.text(INVALID_UDID)
        png = self.simctl.screenshot_bytes(args.udid or "booted")
        return ToolResult.image(
            "iOS screenshot captured successfully", base64.b64encode(png).decode("ascii")
        )

    def list_ios_simulators(self, args: ListSimulatorsArgs, limits: TierLimits) -> ToolResult:
        if not self._ios_supported():
            return ToolResult.text(MACOS_ONLY)
        lines = ["iOS Simulators:"]
        for runtime, devices in self.simctl.list_devices().items():
            if args.only_booted:
                devices = [device for device in devices if device.get("state") == "Booted"]
            if not devices:
                continue
            lines.append("")
            lines.append("{}:".format(runtime))
            for device in devices:
                lines.append(
                    "  {} ({}) - {}".format(
                        device.get("name"), device.get("udid"), device.get("state")
                    )
                )
        return ToolResult.text("\n".join(lines))

    def get_ios_simulator_info(self, args: SimulatorArgs, limits: TierLimits) -> ToolResult:
        if not self._ios_supported():
            return ToolResult.text(MACOS_ONLY)
        udid = args.udid or "booted"
        if not validate_udid(udid):
            return ToolResult.text(INVALID_UDID)
        device = self.simctl.find_device(udid)
        if device is None:
            return ToolResult.text("Simulator not found")
        return ToolResult.text(json.dumps(device, indent=2))

    def get_ios_simulator_logs(self, args: LogLinesArgs, limits: TierLimits) -> ToolResult:
        if not self._ios_supported():
            return ToolResult.text("iOS Simulator logs only available on macOS")
        lines = clip_lines(args.lines, limits)
        output = self.simctl.recent_logs(lines)
        return ToolResult.text("\n".join(output) or "No recent logs found")
