from dataclasses import dataclass
from typing import Optional

from infra.adb import AdbClient
from infra.simctl import SimctlClient
from infra.uiautomator import UiTreeParser
from .domains.device import DeviceService
from .domains.inspect import InspectService
from .domains.license import (
    EntitlementCache,
    LicenseService,
    MachineIdentity,
    RemoteValidator,
)
from .domains.policy import ToolAccessPolicy
from .domains.tools.dispatcher import ToolDispatcher
from .settings import Settings, load_settings


@dataclass
class Container:
    settings: Settings
    identity: MachineIdentity
    cache: EntitlementCache
    validator: RemoteValidator
    policy: ToolAccessPolicy
    license: LicenseService
    dispatcher: ToolDispatcher


def build_container(
    settings: Optional[Settings] = None,
    identity: Optional[MachineIdentity] = None,
    adb: Optional[AdbClient] = None,
    simctl: Optional[SimctlClient] = None,
) -> Container:
    settings = settings or load_settings()
    identity = identity or MachineIdentity()
    cache = EntitlementCache(settings.license_cache_file, identity)
    validator = RemoteValidator(identity, cache)
    policy = ToolAccessPolicy()
    license_service = LicenseService(
        cache, validator, policy, upgrade_url=settings.upgrade_url
    )
    adb = adb or AdbClient(settings.resolved_adb_path, dump_timeout=settings.dump_timeout)
    simctl = simctl or SimctlClient(settings.resolved_xcrun_path)
    parser = UiTreeParser(
        max_chars=settings.max_dump_chars, max_elements=settings.max_elements
    )
    dispatcher = ToolDispatcher(
        license_service,
        policy,
        DeviceService(adb, simctl, metro_port=settings.metro_port),
        InspectService(adb, parser),
    )
    return Container(
        settings=settings,
        identity=identity,
        cache=cache,
        validator=validator,
        policy=policy,
        license=license_service,
        dispatcher=dispatcher,
    )
