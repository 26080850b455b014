from dataclasses import dataclass
from typing import Any, Dict, Mapping, Tuple, Type

from ...constants import FREE_TOOLS
from ..license.types import Tier
from .schemas import (
    AdbLogsArgs,
    AppInfoArgs,
    AssertElementArgs,
    DeviceArgs,
    ElementPropertyArgs,
    ElementQueryArgs,
    LicenseKeyArgs,
    ListSimulatorsArgs,
    LogLinesArgs,
    MetroStatusArgs,
    NoArgs,
    SimulatorArgs,
    SuggestActionArgs,
    ToolArgs,
    UiTreeArgs,
    WaitForElementArgs,
)


@dataclass(frozen=True)
class ToolSpec:
    name: str
    description: str
    args_model: Type[ToolArgs]
    failure: str

    @property
    def tier(self) -> Tier:
        return Tier.FREE if self.name in FREE_TOOLS else Tier.ADVANCED

    def input_schema(self) -> Dict[str, Any]:
        schema = self.args_model.model_json_schema(by_alias=True)
        schema.pop("title", None)
        schema.setdefault("properties", {})
        return schema


def _advanced(description: str) -> str:
    return "[ADVANCED] " + description


CATALOGUE: Tuple[ToolSpec, ...] = (
    ToolSpec(
        "screenshot_emulator",
        "Capture a screenshot from the currently running Android emulator. "
        "Returns base64-encoded PNG image.",
        DeviceArgs,
        "capture screenshot",
    ),
    ToolSpec(
        "screenshot_ios_simulator",
        _advanced("Capture a screenshot from the running iOS Simulator (macOS only)."),
        SimulatorArgs,
        "capture iOS screenshot",
    ),
    ToolSpec(
        "list_devices",
        "List all connected Android devices and emulators.",
        NoArgs,
        "list devices",
    ),
    ToolSpec(
        "list_ios_simulators",
        _advanced("List available iOS Simulators (macOS only)."),
        ListSimulatorsArgs,
        "list simulators",
    ),
    ToolSpec(
        "get_device_info",
        "Get model, OS version, screen size and memory of an Android device.",
        DeviceArgs,
        "get device info",
    ),
    ToolSpec(
        "get_ios_simulator_info",
        _advanced("Get details about an iOS Simulator."),
        SimulatorArgs,
        "get simulator info",
    ),
    ToolSpec(
        "get_app_info",
        "Get information about an installed Android app.",
        AppInfoArgs,
        "get app info",
    ),
    ToolSpec(
        "get_metro_logs",
        "Get Metro bundler status for React Native apps.",
        LogLinesArgs,
        "get Metro logs",
    ),
    ToolSpec(
        "get_adb_logs",
        "Get logcat output from an Android device, filtered by tag and level.",
        AdbLogsArgs,
        "get logs",
    ),
    ToolSpec(
        "get_ios_simulator_logs",
        _advanced("Get recent iOS Simulator logs (macOS only)."),
        LogLinesArgs,
        "get iOS logs",
    ),
    ToolSpec(
        "check_metro_status",
        "Check whether the Metro bundler is running.",
        MetroStatusArgs,
        "check Metro status",
    ),
    ToolSpec(
        "get_license_status",
        "Show the current license tier, limits and available upgrades.",
        NoArgs,
        "get license status",
    ),
    ToolSpec(
        "get_ui_tree",
        _advanced("Get the UI hierarchy of the current Android screen."),
        UiTreeArgs,
        "get UI tree",
    ),
    ToolSpec(
        "find_element",
        _advanced(
            "Find the first UI element matching any of text, resourceId, "
            "contentDescription or className."
        ),
        ElementQueryArgs,
        "find element",
    ),
    ToolSpec(
        "wait_for_element",
        _advanced("Wait until a matching UI element appears on screen."),
        WaitForElementArgs,
        "wait for element",
    ),
    ToolSpec(
        "get_element_property",
        _advanced("Read one property of the first matching UI element."),
        ElementPropertyArgs,
        "get element property",
    ),
    ToolSpec(
        "assert_element",
        _advanced("Check that a UI element exists (or not) and has the expected state."),
        AssertElementArgs,
        "assert element",
    ),
    ToolSpec(
        "suggest_action",
        _advanced("Suggest which on-screen element helps reach a goal. Read-only."),
        SuggestActionArgs,
        "analyze screen",
    ),
    ToolSpec(
        "analyze_screen",
        _advanced("Summarise what is currently on the Android screen."),
        DeviceArgs,
        "analyze screen",
    ),
    ToolSpec(
        "get_screen_text",
        _advanced("Extract all visible text from the current Android screen."),
        DeviceArgs,
        "get screen text",
    ),
    ToolSpec(
        "set_license_key",
        "Activate a license key to unlock ADVANCED features.",
        LicenseKeyArgs,
        "set license key",
    ),
)

TOOLS_BY_NAME: Mapping[str, ToolSpec] = {spec.name: spec for spec in CATALOGUE}
