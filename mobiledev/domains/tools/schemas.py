from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ToolArgs(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class NoArgs(ToolArgs):
    pass


class DeviceArgs(ToolArgs):
    device: Optional[str] = Field(
        default=None, description="Specific device ID. Leave empty for default device."
    )


class SimulatorArgs(ToolArgs):
    udid: Optional[str] = Field(
        default=None, description="Simulator UDID. Leave empty for the booted simulator."
    )


class ListSimulatorsArgs(ToolArgs):
    only_booted: bool = Field(
        default=False, alias="onlyBooted", description="Only show booted simulators"
    )


class AppInfoArgs(DeviceArgs):
    package_name: str = Field(
        alias="packageName", description="Package name (e.g., com.example.app)"
    )


class LogLinesArgs(ToolArgs):
    lines: Optional[int] = Field(default=None, description="Number of log lines to return")


class AdbLogsArgs(DeviceArgs):
    lines: Optional[int] = Field(default=None, description="Number of log lines to return")
    log_filter: str = Field(
        default="ReactNativeJS",
        alias="filter",
        description="Log tag to filter ('*' for all tags)",
    )
    level: str = Field(default="I", description="Minimum log level: V, D, I, W, E, F")


class MetroStatusArgs(ToolArgs):
    port: Optional[int] = Field(default=None, description="Metro bundler port")


class UiTreeArgs(DeviceArgs):
    compressed: bool = Field(
        default=True,
        description="Only include clickable elements and elements with text or labels",
    )


class ElementQueryArgs(DeviceArgs):
    text: Optional[str] = Field(default=None, description="Element text (case-insensitive substring)")
    resource_id: Optional[str] = Field(
        default=None, alias="resourceId", description="Resource ID (substring)"
    )
    content_desc: Optional[str] = Field(
        default=None,
        alias="contentDescription",
        description="Accessibility label (case-insensitive substring)",
    )
    class_name: Optional[str] = Field(
        default=None, alias="className", description="Class name (substring)"
    )


class WaitForElementArgs(ElementQueryArgs):
    timeout: Optional[int] = Field(
        default=None, description="Maximum wait in milliseconds (1000-60000, default 5000)"
    )


class ElementPropertyArgs(ElementQueryArgs):
    prop: str = Field(
        alias="property",
        description="Property to read (text, resourceId, className, contentDescription, "
        "bounds, clickable, enabled, focused, selected, checked, scrollable, center)"
    )


class AssertElementArgs(ElementQueryArgs):
    should_exist: bool = Field(
        default=True, alias="shouldExist", description="Whether the element should exist"
    )
    is_enabled: Optional[bool] = Field(
        default=None, alias="isEnabled", description="Expected enabled state"
    )
    is_checked: Optional[bool] = Field(
        default=None, alias="isChecked", description="Expected checked state"
    )


class SuggestActionArgs(DeviceArgs):
    goal: str = Field(
        description="What you're trying to accomplish (e.g., 'login', 'navigate to settings')"
    )


class LicenseKeyArgs(ToolArgs):
    license_key: str = Field(alias="licenseKey", description="Your license key")
