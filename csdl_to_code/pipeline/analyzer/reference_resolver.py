"""
Type resolver for property type references.

Maps a declared type string (``Edm.Int64``, ``Chassis.v1_0_0.Location``,
``Collection(Resource.Status)``) to a TypeRef: a primitive, a shared
runtime type, a generated class, or a collection of one of those.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Iterable

import structlog

from ...utils import class_name
from .grouping import is_replicated_message
from .ir_nodes import TypeKind, TypeRef
from .type_model import OEM_ACTIONS_SUFFIX, AliasTable, Type, TypeModel, unwrap_collection
from .versioning import group_name

logger = structlog.get_logger(__name__)


def _primitive(name: str) -> TypeRef:
    return TypeRef(kind=TypeKind.PRIMITIVE, name=name)


def _shared(name: str) -> TypeRef:
    return TypeRef(kind=TypeKind.SHARED, name=name)


def open_object() -> TypeRef:
    """``dict[str, Any]``"""
    return TypeRef(kind=TypeKind.DICT, type_args=[TypeRef(kind=TypeKind.ANY)])


# Fixed mapping of well-known type names to target types
KNOWN_TYPES: dict[str, TypeRef] = {
    "Edm.Boolean": _primitive("bool"),
    "Edm.Byte": _primitive("int"),
    "Edm.SByte": _primitive("int"),
    "Edm.Int16": _primitive("int"),
    "Edm.Int32": _primitive("int"),
    "Edm.Int64": _primitive("int"),
    "Edm.Decimal": _primitive("float"),
    "Edm.Double": _primitive("float"),
    "Edm.Single": _primitive("float"),
    "Edm.String": _primitive("str"),
    "Edm.PrimitiveType": TypeRef(kind=TypeKind.ANY),
    "Edm.Date": _shared("Date"),
    "Edm.DateTimeOffset": _shared("DateTimeOffset"),
    "Edm.Duration": _shared("Duration"),
    "Edm.Guid": _shared("UUID"),
    "Resource.UUID": _shared("UUID"),
    "Resource.Description": _primitive("str"),
    "Resource.Name": _primitive("str"),
    "Resource.Status": _shared("Resource_Status"),
    "Resource.PowerState": _shared("Resource_PowerState"),
    "Resource.Oem": open_object(),
}


def _known(name: str) -> TypeRef:
    known = KNOWN_TYPES[name]
    return dataclasses.replace(known, type_args=list(known.type_args))


def provided_by_support(name: str) -> bool:
    """Whether the runtime support module already declares the type ``name``."""
    known = KNOWN_TYPES.get(name)
    return known is not None and known.kind is TypeKind.SHARED


class TypeResolver:
    """Resolves declared property types against the folded type model."""

    def __init__(self, model: TypeModel, aliases: AliasTable | None = None, ignore_classes: Iterable[str] = ()):
        """
        Initialize the resolver.

        Args:
            model: The folded type model
            aliases: Alias table substituted before lookup
            ignore_classes: Classes that are not emitted, by class name or qualified name
        """
        self.model = model
        self.aliases = aliases if aliases is not None else AliasTable()
        self.ignore_classes = set(ignore_classes)
        self._unresolved: set[str] = set()

    def resolve(self, declared_type: str) -> TypeRef:
        """
        Resolve a declared type reference.

        Unresolvable names degrade to an ANY reference and are logged once.

        Args:
            declared_type: The type as written in the schema, possibly wrapped in Collection(...)

        Returns:
            The resolved TypeRef; collections become ARRAY refs around the inner type
        """
        inner, is_collection = unwrap_collection(declared_type)
        type_ref = self._resolve_name(inner)
        # Open objects absorb the collection wrapper
        if is_collection and type_ref.kind is not TypeKind.DICT:
            return TypeRef(kind=TypeKind.ARRAY, type_args=[type_ref])
        return type_ref

    def _resolve_name(self, name: str) -> TypeRef:
        name = self.aliases.substitute(name)

        if name.endswith(OEM_ACTIONS_SUFFIX):
            return open_object()

        if name in KNOWN_TYPES:
            return _known(name)

        target = self.find_type(name)
        if target is None:
            if name not in self._unresolved:
                self._unresolved.add(name)
                logger.warning("type_unresolved", type=name)
            return TypeRef(kind=TypeKind.ANY)

        return self.class_ref(target)

    def class_ref(self, target: Type) -> TypeRef:
        """Reference to the class emitted for ``target``."""
        if is_replicated_message(target):
            # Registry copies are never emitted
            return TypeRef(kind=TypeKind.ANY)
        if target.is_empty:
            if target.is_wildcard or target.name.endswith(OEM_ACTIONS_SUFFIX):
                return open_object()
            populated = self.model.populated_version(target)
            if populated is None:
                return TypeRef(kind=TypeKind.ANY)
            target = populated
        if provided_by_support(target.qualified_name):
            return _known(target.qualified_name)
        if self.is_ignored(target):
            return TypeRef(kind=TypeKind.ANY)
        return TypeRef(
            kind=TypeKind.CLASS,
            name=class_name(target.namespace, target.name),
            module=group_name(target.qualified_name),
            target=target,
        )

    def is_ignored(self, target: Type) -> bool:
        """Whether ``target`` is listed in ``ignore_classes``."""
        return target.qualified_name in self.ignore_classes or class_name(target.namespace, target.name) in self.ignore_classes

    def find_type(self, name: str) -> Type | None:
        """
        Look a qualified name up in the model.

        On a miss, any version of the same vendor and bare type name is
        accepted; the highest version wins.
        """
        direct = self.model.get(name)
        if direct is not None:
            return direct
        candidates = self.model.versions_of(name)
        return candidates[0] if candidates else None
