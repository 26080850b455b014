import logging
import subprocess
from typing import Any, Callable, Dict, List, Mapping, Optional

from pydantic import ValidationError

from infra.http import HttpError
from infra.uiautomator import DumpTooLargeError
from shared.errors import AdbError, SimctlError
from shared.utils import validate_device_id
from ..device import DeviceService
from ..inspect import InspectService
from ..license import LicenseService
from ..license.types import Tier
from ..policy import TierLimits, ToolAccessPolicy
from .catalogue import TOOLS_BY_NAME, ToolSpec
from .result import ToolResult
from .schemas import ToolArgs

logger = logging.getLogger("mobiledev.tools")

Handler = Callable[[ToolArgs, TierLimits], ToolResult]

COLLABORATOR_ERRORS = (
    AdbError,
    SimctlError,
    HttpError,
    DumpTooLargeError,
    subprocess.SubprocessError,
    OSError,
)


class ToolDispatcher:
    """Routes a tool call through the access policy to its handler.

    A denied call is a normal result carrying an upgrade message. Collaborator
    failures become ``Failed to ...`` text results; anything else is reported
    as an error result. No exception escapes ``call``.
    """

    def __init__(
        self,
        license_service: LicenseService,
        policy: ToolAccessPolicy,
        device: DeviceService,
        inspect: InspectService,
        catalogue: Mapping[str, ToolSpec] = TOOLS_BY_NAME,
    ) -> None:
        self.license = license_service
        self.policy = policy
        self.catalogue = catalogue
        self.handlers: Dict[str, Handler] = {
            "screenshot_emulator": device.screenshot_emulator,
            "screenshot_ios_simulator": device.screenshot_ios_simulator,
            "list_devices": device.list_devices,
            "list_ios_simulators": device.list_ios_simulators,
            "get_device_info": device.get_device_info,
            "get_ios_simulator_info": device.get_ios_simulator_info,
            "get_app_info": device.get_app_info,
            "get_metro_logs": device.get_metro_logs,
            "get_adb_logs": device.get_adb_logs,
            "get_ios_simulator_logs": device.get_ios_simulator_logs,
            "check_metro_status": device.check_metro_status,
            "get_ui_tree": inspect.get_ui_tree,
            "find_element": inspect.find_element,
            "wait_for_element": inspect.wait_for_element,
            "get_element_property": inspect.get_element_property,
            "assert_element": inspect.assert_element,
            "suggest_action": inspect.suggest_action,
            "analyze_screen": inspect.analyze_screen,
            "get_screen_text": inspect.get_screen_text,
            "get_license_status": self._license_status,
            "set_license_key": self._set_license_key,
        }

    def list_tools(self, tier: Optional[Tier] = None) -> List[ToolSpec]:
        if tier is None:
            tier = self.license.resolve().tier
        return [
            spec
            for spec in self.catalogue.values()
            if self.policy.can_access(spec.name, tier)
        ]

    def call(self, name: str, arguments: Optional[Dict[str, Any]] = None) -> ToolResult:
        try:
            tier = self.license.resolve().tier
            return self._dispatch(name, arguments or {}, tier)
        except Exception as exc:
            logger.exception("tool %s failed", name)
            return ToolResult.text("Error: {}".format(exc), is_error=True)

    def _dispatch(self, name: str, arguments: Dict[str, Any], tier: Tier) -> ToolResult:
        spec = self.catalogue.get(name)
        handler = self.handlers.get(name)
        if spec is None or handler is None:
            return ToolResult.text("Unknown tool: {}".format(name))
        if not self.policy.can_access(name, tier):
            logger.info("tool %s denied for tier %s", name, tier.value)
            return ToolResult.text(
                "This tool requires ADVANCED tier. Your tier: {}. Upgrade at {}".format(
                    tier.value.upper(), self.license.upgrade_url
                )
            )
        try:
            args = spec.args_model.model_validate(arguments)
        except ValidationError as exc:
            return ToolResult.text(
                "Invalid arguments for {}: {}".format(name, _format_errors(exc))
            )
        device = getattr(args, "device", None)
        if device and not validate_device_id(device):
            return ToolResult.text(
                "Invalid device ID format. Device IDs should be alphanumeric with "
                "dashes, colons, or periods."
            )
        limits = self.policy.limits_for(tier)
        try:
            return handler(args, limits)
        except COLLABORATOR_ERRORS as exc:
            logger.info("tool %s collaborator failure: %s", name, exc)
            return ToolResult.text("Failed to {}: {}".format(spec.failure, exc))

    def _license_status(self, args: ToolArgs, limits: TierLimits) -> ToolResult:
        return ToolResult.json(self.license.status())

    def _set_license_key(self, args: ToolArgs, limits: TierLimits) -> ToolResult:
        return ToolResult.json(self.license.activate(args.license_key))


def _format_errors(exc: ValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(item) for item in error.get("loc", ()))
        parts.append("{} ({})".format(location, error.get("msg")) if location else error.get("msg"))
    return "; ".join(parts)
