import json

import pytest

from mobiledev.cli.handlers import build_parser, main


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    monkeypatch.setenv("MOBILEDEV_CONFIG_DIR", str(tmp_path / "config"))


def test_default_command_is_stdio():
    args = build_parser().parse_args([])

    assert args.command is None


def test_tools_lists_free_tier(capsys):
    assert main(["tools"]) == 0

    lines = capsys.readouterr().out.splitlines()
    assert len(lines) == 9
    assert lines[0].split() == ["screenshot_emulator", "free"]


def test_status(capsys):
    assert main(["status"]) == 0

    assert json.loads(capsys.readouterr().out)["tier"] == "FREE"


def test_activate_rejects_malformed_key(capsys):
    assert main(["activate", "short"]) == 1

    assert json.loads(capsys.readouterr().out) == {"success": False, "error": "Invalid license key format"}


def test_call_prints_tool_result(capsys):
    assert main(["call", "get_license_status"]) == 0

    payload = json.loads(capsys.readouterr().out)
    assert payload["content"][0]["type"] == "text"
    assert "isError" not in payload


def test_call_rejects_non_object_arguments():
    with pytest.raises(SystemExit):
        main(["call", "list_devices", "--args", "[1, 2]"])


def test_missing_config_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        main(["--config", str(tmp_path / "nope.json"), "status"])
