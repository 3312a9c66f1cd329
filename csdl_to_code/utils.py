"""
Naming helpers for generated code.
"""

import keyword


def class_name(namespace: str, name: str) -> str:
    """Python class name for a schema type.

    A type whose namespace starts with its own name keeps the bare name;
    everything else is prefixed with the vendor (first namespace segment).

    Examples:
        ("Chassis.v1_2_0", "Chassis") -> "Chassis"
        ("Chassis.v1_2_0", "Location") -> "Chassis_Location"
        ("Resource", "Status") -> "Resource_Status"

    Args:
        namespace: The schema namespace
        name: The type name within the namespace

    Returns:
        A valid Python identifier
    """
    if namespace.startswith(name):
        return name
    vendor = namespace.partition(".")[0]
    return f"{vendor}_{name}".replace(".", "_")


def python_identifier(name: str) -> str:
    """Escape Python keywords by appending an underscore ("None" -> "None_")."""
    if keyword.iskeyword(name):
        return f"{name}_"
    return name


def unique_identifier(name: str, taken: set[str]) -> str:
    """Return ``name`` (keyword-escaped) with underscores appended until it is not in ``taken``."""
    candidate = python_identifier(name)
    while candidate in taken:
        candidate = f"{candidate}_"
    return candidate
