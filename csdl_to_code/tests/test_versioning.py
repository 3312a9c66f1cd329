"""
Tests for the version-aware ordering of qualified type names.
"""

from __future__ import annotations

import functools
import itertools

import pytest

from csdl_to_code.pipeline.analyzer.versioning import (
    compare_qualified_names,
    group_name,
    qualified_name_key,
    split_namespace,
    split_version,
    version_insensitive_name,
)


@pytest.mark.parametrize(
    "name,expected",
    [
        ("Chassis.v1_2_0.Chassis", ("Chassis", "v1_2_0", "Chassis")),
        ("Resource.Status", ("Resource", "Status", "")),
        ("Resource", ("Resource", "", "")),
        ("Vendor.v1_0_0.Nested.Name", ("Vendor", "v1_0_0", "Nested.Name")),
    ],
)
def test_split_namespace(name, expected):
    assert split_namespace(name) == expected


@pytest.mark.parametrize(
    "version,expected",
    [
        ("v1_2_0", (1, 2, 0)),
        ("v1_10_3", (1, 10, 3)),
        ("v2", (2, 0, 0)),
        ("v1_x_5", (1, 0, 0)),
        ("Status", (0, 0, 0)),
    ],
)
def test_split_version(version, expected):
    assert split_version(version) == expected


def test_numeric_version_order():
    assert compare_qualified_names("Chassis.v1_2_0.Chassis", "Chassis.v1_10_0.Chassis") == -1
    assert compare_qualified_names("Chassis.v1_10_0.Chassis", "Chassis.v1_2_0.Chassis") == 1


@pytest.mark.parametrize(
    "a,b,expected",
    [
        ("Chassis.v1_0_0.Chassis", "Chassis.v1_0_2.Chassis", -1),
        ("Chassis.v1_0_2.Chassis", "Chassis.v1_0_0.Chassis", 1),
        ("Chassis.v2_0_0.Chassis", "Chassis.v1_0_0.Chassis", 1),
        ("Chassis.v2_0_0.Chassis", "Chassis.v1_0_2.Chassis", 1),
        ("Chassis.v1_0_2.Chassis", "Chassis.v2_0_0.Chassis", -1),
        ("Chassis.v1_9_9.Chassis", "Chassis.v2_0_0.Chassis", -1),
    ],
)
def test_revision_and_major_order(a, b, expected):
    assert compare_qualified_names(a, b) == expected


def test_same_name_compares_equal():
    assert compare_qualified_names("Chassis.v1_2_0.Chassis", "Chassis.v1_2_0.Chassis") == 0


def test_vendor_decides_first():
    assert compare_qualified_names("Alpha.v9_0_0.Thing", "Beta.v1_0_0.Thing") == -1


def test_unversioned_sorts_before_versioned_of_same_vendor():
    assert compare_qualified_names("Resource.Status", "Resource.v1_0_0.Resource") == -1
    assert compare_qualified_names("Resource.v1_0_0.Resource", "Resource.Status") == 1


def test_type_name_breaks_version_ties():
    assert compare_qualified_names("Chassis.v1_0_0.Alpha", "Chassis.v1_0_0.Beta") == -1


def test_order_is_total_over_mixed_names():
    names = [
        "Resource.v1_10_0.Resource",
        "Chassis.v1_2_0.Chassis",
        "Resource.Status",
        "Resource.v1_2_0.Resource",
        "Chassis.Chassis",
        "Resource.Oem",
        "Chassis.v1_0_0.Location",
    ]
    by_key = sorted(names, key=qualified_name_key)
    by_compare = sorted(names, key=functools.cmp_to_key(compare_qualified_names))
    assert by_key == by_compare
    assert by_key == [
        "Chassis.Chassis",
        "Chassis.v1_0_0.Location",
        "Chassis.v1_2_0.Chassis",
        "Resource.Oem",
        "Resource.Status",
        "Resource.v1_2_0.Resource",
        "Resource.v1_10_0.Resource",
    ]


def test_version_insensitive_name():
    assert version_insensitive_name("Vendor.v1_0_0.Widget") == ("Vendor", "Widget")
    assert version_insensitive_name("Vendor.Widget") == ("Vendor", "Widget")


def test_group_name():
    assert group_name("Chassis.v1_2_0.Chassis") == "Chassis"
    assert group_name("Resource") == "Resource"


MIXED_NAMES = [
    "Chassis.v1_0_0.Chassis",
    "Chassis.v1_0_2.Chassis",
    "Chassis.v2_0_0.Chassis",
    "Chassis.v1_10_0.Chassis",
    "Chassis.Chassis",
    "Chassis.vX_1.Chassis",
    "Chassis.v1_0.Chassis",
    "Chassis.v1_0_0.Location",
    "Resource.Status",
    "Resource.v1_0_0.Resource",
]


def test_comparison_is_antisymmetric_and_reflexive():
    for a, b in itertools.product(MIXED_NAMES, repeat=2):
        assert compare_qualified_names(a, b) == -compare_qualified_names(b, a)
        assert (compare_qualified_names(a, b) == 0) == (a == b)


def test_comparison_is_transitive():
    for a, b, c in itertools.permutations(MIXED_NAMES, 3):
        if compare_qualified_names(a, b) < 0 and compare_qualified_names(b, c) < 0:
            assert compare_qualified_names(a, c) < 0


def test_mixed_versions_sort_order():
    assert sorted(MIXED_NAMES, key=functools.cmp_to_key(compare_qualified_names)) == [
        "Chassis.Chassis",
        "Chassis.vX_1.Chassis",
        "Chassis.v1_0.Chassis",
        "Chassis.v1_0_0.Chassis",
        "Chassis.v1_0_0.Location",
        "Chassis.v1_0_2.Chassis",
        "Chassis.v1_10_0.Chassis",
        "Chassis.v2_0_0.Chassis",
        "Resource.Status",
        "Resource.v1_0_0.Resource",
    ]
