"""
Tests for the rendered runtime-support module.
"""

from __future__ import annotations

import ast
import importlib.util
import sys
from datetime import date, datetime, timedelta, timezone

import pytest

from csdl_to_code.pipeline.ast_backends import SupportModuleRenderer
from csdl_to_code.pipeline.config import CodeGeneratorConfig


@pytest.fixture
def odata(tmp_path, monkeypatch):
    """The rendered support module, imported from a temporary file."""
    pytest.importorskip("dataclasses_json")
    path = tmp_path / "odata_support.py"
    path.write_text(SupportModuleRenderer(CodeGeneratorConfig()).render_support())
    spec = importlib.util.spec_from_file_location("odata_support", path)
    module = importlib.util.module_from_spec(spec)
    monkeypatch.setitem(sys.modules, "odata_support", module)
    spec.loader.exec_module(module)
    return module


def test_rendered_module_parses():
    code = SupportModuleRenderer(CodeGeneratorConfig()).render_support("# Generated by test")
    assert code.startswith("# Generated by test\n")
    tree = ast.parse(code)
    classes = {node.name for node in tree.body if isinstance(node, ast.ClassDef)}
    assert classes == {"OdataID", "Action", "Resource_PowerState", "Resource_Status"}


def test_package_init():
    renderer = SupportModuleRenderer(CodeGeneratorConfig())
    code = renderer.render_package(["Widget", "Resource"])
    assert "from . import odata\nfrom . import Resource\nfrom . import Widget\n" in code
    ast.parse(code)


def test_package_init_without_support():
    renderer = SupportModuleRenderer(CodeGeneratorConfig(emit_support_module=False))
    code = renderer.render_package(["Widget"])
    assert "odata" not in code
    ast.parse(code)


@pytest.mark.parametrize(
    "text,expected",
    [
        ("P1DT2H3M4.5S", timedelta(days=1, hours=2, minutes=3, seconds=4.5)),
        ("PT30S", timedelta(seconds=30)),
        ("P3D", timedelta(days=3)),
        ("PT1H", timedelta(hours=1)),
        ("PT0.25S", timedelta(milliseconds=250)),
    ],
)
def test_parse_duration(odata, text, expected):
    assert odata.parse_duration(text) == expected


@pytest.mark.parametrize("text", ["", "P", "PT", "1D", "-P1D", "P1H", "PT1D", "P1DT", "PTxS"])
def test_parse_duration_rejects_malformed(odata, text):
    with pytest.raises(ValueError):
        odata.parse_duration(text)


def test_parse_duration_none(odata):
    assert odata.parse_duration(None) is None


@pytest.mark.parametrize(
    "value,expected",
    [
        (timedelta(days=1, hours=2, minutes=3, seconds=4.5), "P1DT2H3M4.5S"),
        (timedelta(days=2), "P2D"),
        (timedelta(minutes=90), "PT1H30M"),
        (timedelta(0), "PT0S"),
    ],
)
def test_format_duration(odata, value, expected):
    assert odata.format_duration(value) == expected


def test_format_duration_rejects_negative(odata):
    with pytest.raises(ValueError):
        odata.format_duration(timedelta(seconds=-1))


def test_date_codecs(odata):
    assert odata.parse_date("2024-02-29") == date(2024, 2, 29)
    assert odata.format_date(date(2024, 2, 29)) == "2024-02-29"
    moment = odata.parse_datetime("2024-02-29T10:30:00Z")
    assert moment == datetime(2024, 2, 29, 10, 30, tzinfo=timezone.utc)
    assert odata.format_datetime(moment) == "2024-02-29T10:30:00+00:00"


def test_many(odata):
    assert odata.many(odata.parse_duration)(["PT1S", "PT2S"]) == [timedelta(seconds=1), timedelta(seconds=2)]
    assert odata.many(odata.parse_duration)(None) is None


def test_odata_id_round_trip(odata):
    link = odata.OdataID.from_dict({"@odata.id": "/redfish/v1/Chassis/1"})
    assert link.ID == "/redfish/v1/Chassis/1"
    assert link.to_dict() == {"@odata.id": "/redfish/v1/Chassis/1"}


def test_action_round_trip(odata):
    action = odata.Action.from_dict({"target": "/redfish/v1/Systems/1/Actions/ComputerSystem.Reset"})
    assert action.ActionInfo is None
    assert action.to_dict() == {"target": "/redfish/v1/Systems/1/Actions/ComputerSystem.Reset"}

    with_info = odata.Action.from_dict({"target": "/t", "@Redfish.ActionInfo": "/info"})
    assert with_info.to_dict() == {"target": "/t", "@Redfish.ActionInfo": "/info"}


def test_status(odata):
    status = odata.Resource_Status.from_dict({"State": "Enabled", "Health": "OK"})
    assert status.to_dict() == {"State": "Enabled", "Health": "OK"}
    assert odata.Resource_PowerState("On") is odata.Resource_PowerState.On
