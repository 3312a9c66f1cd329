"""
Tests for inheritance folding.
"""

from __future__ import annotations

import copy

import pytest
from structlog.testing import capture_logs

from csdl_to_code.pipeline.analyzer import (
    AliasTable,
    FoldStatus,
    InheritanceFolder,
    PropertyType,
    Type,
    TypeModel,
    build_model,
    fold_model,
)
from csdl_to_code.pipeline.analyzer.folder import LEGACY_LINKS_BASE, LEGACY_RESOURCE_BASE
from csdl_to_code.pipeline.errors import FoldCycleError


def prop(declared_type: str = "Edm.String", **kwargs) -> PropertyType:
    return PropertyType(declared_type=declared_type, **kwargs)


def make_type(qualified_name: str, base_type: str = "", **properties: PropertyType) -> Type:
    namespace, _, name = qualified_name.rpartition(".")
    return Type(name=name, namespace=namespace, base_type=base_type, properties=dict(properties))


def test_properties_are_inherited_through_the_chain():
    model = TypeModel(
        [
            make_type("A.v1_0_0.Base", A=prop()),
            make_type("A.v1_0_0.Middle", "A.v1_0_0.Base", B=prop()),
            make_type("A.v1_1_0.Leaf", "A.v1_0_0.Middle", C=prop()),
        ]
    )
    fold_model(model)

    leaf = model["A.v1_1_0.Leaf"]
    assert set(leaf.properties) == {"A", "B", "C"}
    assert leaf.base_type == ""
    assert leaf.status is FoldStatus.FOLDED


def test_derived_declaration_wins():
    model = TypeModel(
        [
            make_type("A.v1_0_0.Base", Shared=prop("Edm.Int64")),
            make_type("A.v1_0_0.Derived", "A.v1_0_0.Base", Shared=prop("Edm.String")),
        ]
    )
    fold_model(model)
    assert model["A.v1_0_0.Derived"].properties["Shared"].declared_type == "Edm.String"


def test_inherited_properties_are_copies():
    model = TypeModel(
        [
            make_type("A.v1_0_0.Base", X=prop()),
            make_type("A.v1_0_0.Derived", "A.v1_0_0.Base"),
        ]
    )
    fold_model(model)
    model["A.v1_0_0.Derived"].properties["X"].is_nullable = False
    assert model["A.v1_0_0.Base"].properties["X"].is_nullable is True


def test_folding_is_idempotent(fixture_record_set):
    model, aliases = build_model(fixture_record_set)
    fold_model(model, aliases)
    snapshot = copy.deepcopy(model)

    fold_model(model, aliases)

    assert list(model) == list(snapshot)
    for name, type_ in model.items():
        assert type_.properties == snapshot[name].properties
        assert type_.base_type == snapshot[name].base_type


def test_fold_returns_same_record_when_already_folded():
    model = TypeModel([make_type("A.v1_0_0.T", X=prop())])
    folder = InheritanceFolder(model)
    folded = folder.fold(model["A.v1_0_0.T"])
    assert folder.fold(folded) is folded


def test_unknown_base_deletes_type():
    model = TypeModel(
        [
            make_type("A.v1_0_0.Orphan", "Missing.v1_0_0.Thing", X=prop()),
            make_type("A.v1_0_0.Child", "A.v1_0_0.Orphan", Y=prop()),
        ]
    )
    with capture_logs() as logs:
        fold_model(model)

    assert "A.v1_0_0.Orphan" not in model
    assert "A.v1_0_0.Child" not in model
    assert model.is_deleted("A.v1_0_0.Orphan")
    assert any(log["event"] == "type_deleted" and log["type"] == "A.v1_0_0.Orphan" for log in logs)


def test_legacy_resource_base_is_synthesized():
    model = TypeModel([make_type("Old.v1_0_0.Thing", LEGACY_RESOURCE_BASE, Size=prop("Edm.Int64"))])
    fold_model(model)

    thing = model["Old.v1_0_0.Thing"]
    assert set(thing.properties) == {"Size", "ID", "Type", "Name", "Description"}
    assert thing.properties["ID"].json_name == "@odata.id"
    assert thing.properties["ID"].is_nullable is False
    assert thing.properties["Type"].json_name == "@odata.type"
    assert thing.properties["Name"].is_nullable is True
    assert thing.properties["Description"].is_nullable is True


def test_synthesized_properties_do_not_replace_declared_ones():
    model = TypeModel([make_type("Old.v1_0_0.Thing", LEGACY_RESOURCE_BASE, Name=prop("Old.v1_0_0.Label", is_nullable=False))])
    fold_model(model)
    assert model["Old.v1_0_0.Thing"].properties["Name"].declared_type == "Old.v1_0_0.Label"


def test_legacy_links_base_is_synthesized():
    model = TypeModel([make_type("Old.v1_0_0.Links", LEGACY_LINKS_BASE, Peers=prop("Collection(Old.Thing)", is_navigation=True))])
    fold_model(model)
    assert model["Old.v1_0_0.Links"].properties["Oem"].declared_type == "Resource.Oem"


def test_base_found_through_alias():
    model = TypeModel([make_type("A.v1_0_0.Base", X=prop()), make_type("A.v1_0_0.Derived", "A.Base", Y=prop())])
    fold_model(model, AliasTable({"A.Base": "A.v1_0_0.Base"}))
    assert set(model["A.v1_0_0.Derived"].properties) == {"X", "Y"}


def test_folded_types_carry_alias_table():
    aliases = AliasTable({"A.Id": "Edm.String"})
    model = TypeModel([make_type("A.v1_0_0.T", X=prop())])
    fold_model(model, aliases)
    assert model["A.v1_0_0.T"].alias_table is aliases


def test_cycle_is_fatal():
    model = TypeModel(
        [
            make_type("Loop.v1_0_0.A", "Loop.v1_0_0.B", Left=prop()),
            make_type("Loop.v1_0_0.B", "Loop.v1_0_0.A", Right=prop()),
        ]
    )
    with pytest.raises(FoldCycleError) as exc_info:
        fold_model(model)
    assert exc_info.value.chain[0] == exc_info.value.chain[-1]


def test_fixture_fold(fixture_record_set):
    model, aliases = build_model(fixture_record_set)
    fold_model(model, aliases)

    widget = model["Widget.v1_2_0.Widget"]
    assert {"Id", "Name", "Description", "Oem", "Status", "Temperature"} <= set(widget.properties)
    assert model["Widget.Widget"].is_struct
    assert "Widget.v1_0_0.Orphan" not in model
    assert set(model["Widget.v1_0_0.Links"].properties) == {"Peers", "Oem"}
