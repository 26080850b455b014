import socket

from mobiledev.domains.license import MachineIdentity


def test_linux_machine_id_file(tmp_path):
    machine_id = tmp_path / "machine-id"
    machine_id.write_text("0123456789abcdef\n")

    identity = MachineIdentity(platform="linux", machine_id_file=machine_id)

    assert identity.resolve() == "0123456789abcdef"


def test_falls_back_to_hostname(tmp_path, monkeypatch):
    monkeypatch.setattr(socket, "gethostname", lambda: "build-host")

    identity = MachineIdentity(platform="linux", machine_id_file=tmp_path / "missing")

    assert identity.resolve() == "build-host"


def test_hardware_failure_falls_back_to_hostname(monkeypatch):
    monkeypatch.setattr(socket, "gethostname", lambda: "mac-host")
    identity = MachineIdentity(platform="darwin")

    def broken(cmd):
        raise OSError("ioreg missing")

    monkeypatch.setattr(identity, "_run", broken)

    assert identity.resolve() == "mac-host"


def test_darwin_uuid(monkeypatch):
    identity = MachineIdentity(platform="darwin")
    monkeypatch.setattr(
        identity, "_run", lambda cmd: '  "IOPlatformUUID" = "AB12CD34-0000-1111-2222-333344445555"\n'
    )

    assert identity.resolve() == "AB12CD34-0000-1111-2222-333344445555"


def test_resolved_once(tmp_path):
    machine_id = tmp_path / "machine-id"
    machine_id.write_text("first")
    identity = MachineIdentity(platform="linux", machine_id_file=machine_id)

    assert identity.resolve() == "first"
    machine_id.write_text("second")
    assert identity.resolve() == "first"
