"""
Ordering of qualified type names across namespace versions.

A qualified name decomposes into ``vendor.version.TypeName`` (for example
``Chassis.v1_2_0.Chassis``) or ``vendor.TypeName`` for unversioned
namespaces. Plain string sorting puts ``v1_10_0`` before ``v1_2_0``, so
version segments are compared numerically.
"""

from __future__ import annotations

import re

_INTEGER = re.compile(r"[+-]?[0-9]+")


def split_namespace(name: str) -> tuple[str, str, str]:
    """
    Split a qualified name into its first, second and remaining components.

    Examples:
        "Chassis.v1_2_0.Chassis" -> ("Chassis", "v1_2_0", "Chassis")
        "Resource.Status" -> ("Resource", "Status", "")
        "Resource" -> ("Resource", "", "")
    """
    first, sep, remainder = name.partition(".")
    if not sep:
        return first, "", ""
    second, sep, rest = remainder.partition(".")
    if not sep:
        return first, second, ""
    return first, second, rest


def _atoi(text: str) -> int | None:
    if _INTEGER.fullmatch(text) is None:
        return None
    return int(text)


def split_version(version: str) -> tuple[int, int, int]:
    """
    Parse a ``vMAJOR[_MINOR[_REVISION]]`` segment.

    Missing parts are 0. An unparseable part stops parsing and it and
    every later part become 0.
    """
    parts = version.removeprefix("v").split("_", 2)
    numbers = [0, 0, 0]
    for index, part in enumerate(parts):
        value = _atoi(part)
        if value is None:
            break
        numbers[index] = value
    return numbers[0], numbers[1], numbers[2]


def qualified_name_key(name: str) -> tuple:
    """Sort key implementing the version-aware order of qualified names."""
    vendor, middle, rest = split_namespace(name)
    if not rest:
        # Unversioned names sort ahead of every versioned name of the same vendor
        return (vendor, 0, middle, name)
    return (vendor, 1, split_version(middle), rest, middle, name)


def compare_qualified_names(a: str, b: str) -> int:
    """
    Three-way comparison of qualified names.

    Returns:
        -1 if a sorts before b, 1 if after, 0 if they are the same name
    """
    key_a = qualified_name_key(a)
    key_b = qualified_name_key(b)
    if key_a < key_b:
        return -1
    if key_a > key_b:
        return 1
    return 0


def version_insensitive_name(name: str) -> tuple[str, str]:
    """
    Return ``(vendor, bare type name)`` with any version segment dropped.

    ``Vendor.v1_0_0.Widget`` and ``Vendor.Widget`` both yield ``("Vendor", "Widget")``.
    """
    vendor, middle, rest = split_namespace(name)
    if not rest:
        return vendor, middle
    return vendor, rest


def group_name(name: str) -> str:
    """The vendor prefix of a qualified name, used to group output files."""
    return name.partition(".")[0]
