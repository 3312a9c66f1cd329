"""
IR (Intermediate Representation) node definitions.

These nodes describe what the backend has to emit for each folded type:
the declaration kind, the ordered field list with resolved field types,
and serialization hints. All type references are resolved.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from .type_model import Type


class TypeKind(Enum):
    """Kind of type in the IR."""

    PRIMITIVE = "primitive"  # bool, int, float, str
    SHARED = "shared"  # A type from the runtime-support module (OdataID, Duration, ...)
    CLASS = "class"  # A generated class or enum
    ARRAY = "array"  # list[T]
    DICT = "dict"  # dict[str, T], open-ended objects
    ANY = "any"  # Unresolved or untyped


@dataclass
class TypeRef:
    """A resolved type reference."""

    kind: TypeKind = TypeKind.PRIMITIVE
    name: str = ""  # Target type name (e.g., "int", "Chassis_Status", "Duration")

    # Output group (module) holding a CLASS target
    module: str = ""

    # For container types
    type_args: list[TypeRef] = field(default_factory=list)

    # The model record a CLASS reference points at
    target: Type | None = field(default=None, repr=False, compare=False)

    @property
    def is_container(self) -> bool:
        return self.kind in (TypeKind.ARRAY, TypeKind.DICT)

    @property
    def item(self) -> TypeRef | None:
        return self.type_args[0] if self.type_args else None


@dataclass
class FieldDef:
    """A field definition in a class."""

    name: str = ""  # Python attribute name
    original_name: str = ""  # Property name in the schema
    type_ref: TypeRef | None = None

    # Serialized field name, when it differs from the attribute name
    json_name: str = ""

    # Omit from serialized output when empty; the field gets a default
    is_optional: bool = False

    is_navigation: bool = False


@dataclass
class EnumDef:
    """An enum definition."""

    name: str = ""
    original_name: str = ""
    value_type: str = "string"
    members: dict[str, str] = field(default_factory=dict)  # member_name -> json_value


@dataclass
class ClassDef:
    """A class definition."""

    name: str = ""
    original_name: str = ""  # Qualified name of the source type

    fields: list[FieldDef] = field(default_factory=list)

    # Complex types are embedded values without an @odata.id
    is_complex: bool = False

    # For enum classes
    is_enum: bool = False
    enum_def: EnumDef | None = None


@dataclass
class IR:
    """The intermediate representation of one output module."""

    root_name: str = ""  # Output group name, which is also the module name

    # All class definitions (in generation order)
    classes: list[ClassDef] = field(default_factory=list)

    # Generation comment
    generation_comment: str = ""
