import socketserver
import threading

import pytest

from infra.uiautomator import UiTreeParser
from mobiledev.domains.device import DeviceService
from mobiledev.domains.inspect import InspectService
from mobiledev.domains.license import EntitlementCache, LicenseService, RemoteValidator
from mobiledev.domains.policy import ToolAccessPolicy
from mobiledev.domains.tools.dispatcher import ToolDispatcher

from fakes import FakeAdb, FakeClock, FakePost, FakeSimctl, FixedIdentity


@pytest.fixture
def identity():
    return FixedIdentity()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache_path(tmp_path):
    return tmp_path / "config" / "license.json"


@pytest.fixture
def cache(cache_path, identity, clock):
    return EntitlementCache(cache_path, identity, clock=clock)


@pytest.fixture
def policy():
    return ToolAccessPolicy()


@pytest.fixture
def make_dispatcher(cache, identity, policy):
    def factory(adb=None, post=None, simctl=None, http_get=None, ios_supported=False, sleep=None, monotonic=None):
        post = post or FakePost(error=None, responses=[{"valid": False}])
        validator = RemoteValidator(identity, cache, url="https://license.test/validate", post=post)
        license_service = LicenseService(cache, validator, policy, upgrade_url="https://example.test/upgrade")
        adb = adb or FakeAdb()
        device = DeviceService(
            adb,
            simctl or FakeSimctl(),
            metro_port=8081,
            http_get=http_get or (lambda url, timeout=None: '{"status":"running"}'),
            ios_supported=lambda: ios_supported,
        )
        inspect_kwargs = {}
        if monotonic is not None:
            inspect_kwargs["clock"] = monotonic
        if sleep is not None:
            inspect_kwargs["sleep"] = sleep
        inspect = InspectService(adb, UiTreeParser(), **inspect_kwargs)
        return ToolDispatcher(license_service, policy, device, inspect)

    return factory


class _MalformedChunkedHandler(socketserver.BaseRequestHandler):
    """Answers any request with a chunked body whose chunk size is not hex."""

    def handle(self):
        data = b""
        while b"\r\n\r\n" not in data:
            chunk = self.request.recv(4096)
            if not chunk:
                return
            data += chunk
        head, _, body = data.partition(b"\r\n\r\n")
        length = 0
        for line in head.split(b"\r\n"):
            name, _, value = line.partition(b":")
            if name.strip().lower() == b"content-length":
                length = int(value.strip())
        while len(body) < length:
            chunk = self.request.recv(4096)
            if not chunk:
                break
            body += chunk
        self.request.sendall(
            b"HTTP/1.1 200 OK\r\n"
            b"Content-Type: application/json\r\n"
            b"Transfer-Encoding: chunked\r\n"
            b"Connection: close\r\n"
            b"\r\n"
            b"zz\r\n"
            b'{"valid": true}\r\n'
        )


@pytest.fixture
def malformed_chunked_url():
    server = socketserver.ThreadingTCPServer(("127.0.0.1", 0), _MalformedChunkedHandler)
    server.daemon_threads = True
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    try:
        yield "http://127.0.0.1:{}/validate".format(server.server_address[1])
    finally:
        server.shutdown()
        server.server_close()
