import pytest

from mobiledev.constants import ADVANCED_ONLY_TOOLS, FREE_TOOLS
from mobiledev.domains.license import Tier
from mobiledev.domains.tools import CATALOGUE, TOOLS_BY_NAME


def test_catalogue_covers_every_gated_tool():
    names = [spec.name for spec in CATALOGUE]

    assert len(names) == len(set(names)) == 21
    assert set(names) == set(FREE_TOOLS) | set(ADVANCED_ONLY_TOOLS)


@pytest.mark.parametrize("spec", CATALOGUE, ids=lambda spec: spec.name)
def test_descriptions_mark_advanced_tools(spec):
    if spec.tier is Tier.ADVANCED:
        assert spec.description.startswith("[ADVANCED] ")
    else:
        assert not spec.description.startswith("[ADVANCED]")


@pytest.mark.parametrize("spec", CATALOGUE, ids=lambda spec: spec.name)
def test_input_schemas_are_objects(spec):
    schema = spec.input_schema()

    assert schema["type"] == "object"
    assert "title" not in schema
    assert isinstance(schema["properties"], dict)


def test_schemas_use_wire_names():
    find = TOOLS_BY_NAME["find_element"].input_schema()["properties"]
    logs = TOOLS_BY_NAME["get_adb_logs"].input_schema()["properties"]
    license_key = TOOLS_BY_NAME["set_license_key"].input_schema()

    assert {"text", "resourceId", "contentDescription", "className", "device"} <= set(find)
    assert "filter" in logs
    assert license_key["required"] == ["licenseKey"]
