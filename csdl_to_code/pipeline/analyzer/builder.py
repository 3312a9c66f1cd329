"""
Type model builder.

Converts raw schema declarations into Type records and collects type
definitions into the shared alias table. Nothing is validated here:
incomplete declarations are accepted as-is and repaired or dropped by
the folder.
"""

from __future__ import annotations

import structlog

from ..schema_ast.nodes import (
    AnnotationNode,
    ComplexTypeNode,
    EntityTypeNode,
    EnumTypeNode,
    RecordSet,
    SchemaNode,
    StructuredTypeNode,
)
from .type_model import AliasTable, Member, PropertyType, Type, TypeModel

logger = structlog.get_logger(__name__)

# Annotation terms (matched on their bare name, so aliased vocabularies work too)
DYNAMIC_PROPERTY_PATTERNS = "DynamicPropertyPatterns"
ADDITIONAL_PROPERTIES = "AdditionalProperties"


def _bare_term(term: str) -> str:
    return term.rsplit(".", 1)[-1]


def is_wildcard_annotated(annotations: list[AnnotationNode]) -> bool:
    """True if the annotations allow arbitrary dynamically named properties."""
    for annotation in annotations:
        term = _bare_term(annotation.term)
        if term == DYNAMIC_PROPERTY_PATTERNS:
            return True
        if term == ADDITIONAL_PROPERTIES and annotation.bool_value:
            return True
    return False


def _structured_properties(node: StructuredTypeNode) -> dict[str, PropertyType]:
    properties: dict[str, PropertyType] = {}
    for prop in node.properties:
        properties[prop.name] = PropertyType(
            declared_type=prop.type,
            is_navigation=False,
            is_nullable=True if prop.nullable is None else prop.nullable,
        )
    for nav in node.navigation_properties:
        properties[nav.name] = PropertyType(
            declared_type=nav.type,
            is_navigation=True,
            is_nullable=True if nav.nullable is None else nav.nullable,
        )
    return properties


def type_from_entity(node: EntityTypeNode, namespace: str) -> Type:
    return Type(
        name=node.name,
        namespace=namespace,
        base_type=node.base_type,
        properties=_structured_properties(node),
        is_complex=False,
    )


def type_from_complex(node: ComplexTypeNode, namespace: str) -> Type:
    type_ = Type(
        name=node.name,
        namespace=namespace,
        base_type=node.base_type,
        properties=_structured_properties(node),
        is_complex=True,
    )
    if not type_.properties:
        type_.is_wildcard = is_wildcard_annotated(node.annotations)
    return type_


def type_from_enum(node: EnumTypeNode, namespace: str) -> Type:
    return Type(
        name=node.name,
        namespace=namespace,
        members={member.name: Member(name=member.name, value=member.value) for member in node.members},
    )


class TypeModelBuilder:
    """Builds the unfolded type model and alias table from a record set."""

    def __init__(self):
        self.model = TypeModel()
        self.aliases: dict[str, str] = {}

    def add_schema(self, schema: SchemaNode) -> None:
        namespace = schema.namespace
        for entity in schema.entity_types:
            self.model.add(type_from_entity(entity, namespace))
        for enum in schema.enum_types:
            self.model.add(type_from_enum(enum, namespace))
        for complex_type in schema.complex_types:
            self.model.add(type_from_complex(complex_type, namespace))
        for definition in schema.type_definitions:
            self.aliases[f"{namespace}.{definition.name}"] = definition.underlying_type

    def build(self, record_set: RecordSet) -> tuple[TypeModel, AliasTable]:
        """
        Build the model from every schema in the record set.

        Returns:
            The unfolded type model and the alias table
        """
        for schema in record_set.schemas:
            self.add_schema(schema)
        logger.debug("model_built", types=len(self.model), aliases=len(self.aliases))
        return self.model, AliasTable(self.aliases)


def build_model(record_set: RecordSet) -> tuple[TypeModel, AliasTable]:
    return TypeModelBuilder().build(record_set)
