"""
Node definitions for parsed CSDL documents.

These nodes mirror the declarations found in a schema document before
any folding, alias substitution or language-specific processing.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class AnnotationNode:
    """An annotation attached to a declaration."""

    term: str = ""
    qualifier: str = ""

    # At most one of these carries the literal value
    string: str | None = None
    bool_value: bool | None = None
    int_value: int | None = None
    decimal: float | None = None
    enum_member: str | None = None

    @property
    def value(self) -> Any:
        for candidate in (self.string, self.bool_value, self.int_value, self.decimal, self.enum_member):
            if candidate is not None:
                return candidate
        return None


@dataclass
class PropertyNode:
    """A structural property."""

    name: str = ""
    type: str = ""
    nullable: bool | None = None  # None means "not declared"
    annotations: list[AnnotationNode] = field(default_factory=list)


@dataclass
class NavigationPropertyNode:
    """A navigation (relationship) property."""

    name: str = ""
    type: str = ""
    nullable: bool | None = None
    partner: str = ""
    contains_target: bool = False
    annotations: list[AnnotationNode] = field(default_factory=list)


@dataclass
class StructuredTypeNode:
    """Common shape of entity and complex type declarations."""

    name: str = ""
    base_type: str = ""
    abstract: bool = False
    open_type: bool = False
    properties: list[PropertyNode] = field(default_factory=list)
    navigation_properties: list[NavigationPropertyNode] = field(default_factory=list)
    annotations: list[AnnotationNode] = field(default_factory=list)


@dataclass
class EntityTypeNode(StructuredTypeNode):
    """An individually addressable entity type."""

    has_stream: bool = False
    key: list[str] = field(default_factory=list)  # PropertyRef names, opaque to the core


@dataclass
class ComplexTypeNode(StructuredTypeNode):
    """An embeddable complex type."""


@dataclass
class MemberNode:
    """An enumeration member."""

    name: str = ""
    value: str | None = None
    annotations: list[AnnotationNode] = field(default_factory=list)


@dataclass
class EnumTypeNode:
    """An enumeration type."""

    name: str = ""
    underlying_type: str = ""
    is_flags: bool = False
    members: list[MemberNode] = field(default_factory=list)
    annotations: list[AnnotationNode] = field(default_factory=list)


@dataclass
class TypeDefinitionNode:
    """A type definition, i.e. an alias for an underlying type."""

    name: str = ""
    underlying_type: str = ""
    annotations: list[AnnotationNode] = field(default_factory=list)


@dataclass
class SchemaNode:
    """One <Schema> element."""

    namespace: str = ""
    alias: str = ""
    source: str = ""  # Document the schema was read from (for error messages)

    entity_types: list[EntityTypeNode] = field(default_factory=list)
    complex_types: list[ComplexTypeNode] = field(default_factory=list)
    enum_types: list[EnumTypeNode] = field(default_factory=list)
    type_definitions: list[TypeDefinitionNode] = field(default_factory=list)
    annotations: list[AnnotationNode] = field(default_factory=list)

    # Actions, functions, terms and containers are passed through as counts only
    opaque: dict[str, int] = field(default_factory=dict)


@dataclass
class RecordSet:
    """All schemas read from the input documents, in load order."""

    schemas: list[SchemaNode] = field(default_factory=list)

    def add(self, schema: SchemaNode) -> None:
        self.schemas.append(schema)

    def extend(self, schemas: list[SchemaNode]) -> None:
        self.schemas.extend(schemas)

    def by_namespace(self) -> dict[str, list[SchemaNode]]:
        """Group the schemas by namespace, preserving load order within each namespace."""
        grouped: dict[str, list[SchemaNode]] = {}
        for schema in self.schemas:
            grouped.setdefault(schema.namespace, []).append(schema)
        return grouped

    def __len__(self) -> int:
        return len(self.schemas)
