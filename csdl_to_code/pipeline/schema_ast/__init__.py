"""
Schema AST module.

Contains the raw CSDL declaration nodes and the document loader.
"""

from __future__ import annotations

from .nodes import (
    AnnotationNode,
    ComplexTypeNode,
    EntityTypeNode,
    EnumTypeNode,
    MemberNode,
    NavigationPropertyNode,
    PropertyNode,
    RecordSet,
    SchemaNode,
    TypeDefinitionNode,
)
from .parser import CsdlParser

__all__ = [
    "AnnotationNode",
    "PropertyNode",
    "NavigationPropertyNode",
    "EntityTypeNode",
    "ComplexTypeNode",
    "MemberNode",
    "EnumTypeNode",
    "TypeDefinitionNode",
    "SchemaNode",
    "RecordSet",
    "CsdlParser",
]
