"""
Analyzer module.

Contains the type model, inheritance folding, reference resolution,
output grouping and IR building.
"""

from __future__ import annotations

from .analyzer import SchemaAnalyzer
from .builder import TypeModelBuilder, build_model
from .folder import InheritanceFolder, fold_model
from .grouping import TypeGroup, group_types
from .ir_nodes import (
    IR,
    ClassDef,
    EnumDef,
    FieldDef,
    TypeKind,
    TypeRef,
)
from .reference_resolver import TypeResolver
from .type_model import AliasTable, FoldStatus, Member, PropertyType, Type, TypeModel
from .versioning import compare_qualified_names, qualified_name_key

__all__ = [
    "Type",
    "PropertyType",
    "Member",
    "AliasTable",
    "FoldStatus",
    "TypeModel",
    "TypeModelBuilder",
    "build_model",
    "InheritanceFolder",
    "fold_model",
    "TypeResolver",
    "TypeGroup",
    "group_types",
    "compare_qualified_names",
    "qualified_name_key",
    "ClassDef",
    "FieldDef",
    "TypeRef",
    "TypeKind",
    "EnumDef",
    "IR",
    "SchemaAnalyzer",
]
