"""
Schema analyzer that turns folded types into IR.

Decides the declaration kind of every type (class, enum, or nothing),
orders its fields and resolves each field's type.
"""

from __future__ import annotations

import structlog

from ...utils import class_name, unique_identifier
from ..config import CodeGeneratorConfig
from ..errors import UnknownTypeShapeError
from .grouping import TypeGroup
from .ir_nodes import IR, ClassDef, EnumDef, FieldDef, TypeKind, TypeRef
from .reference_resolver import TypeResolver, open_object, provided_by_support
from .type_model import AliasTable, PropertyType, Type, TypeModel

logger = structlog.get_logger(__name__)

ODATA_ID = "@odata.id"
ODATA_TYPE = "@odata.type"
ODATA_CONTEXT = "@odata.context"


def _string() -> TypeRef:
    return TypeRef(kind=TypeKind.PRIMITIVE, name="str")


def _shared(name: str) -> TypeRef:
    return TypeRef(kind=TypeKind.SHARED, name=name)


class SchemaAnalyzer:
    """Analyzes folded types and builds IR."""

    def __init__(self, model: TypeModel, aliases: AliasTable | None = None, config: CodeGeneratorConfig | None = None):
        """
        Initialize the analyzer.

        Args:
            model: The folded type model
            aliases: Alias table for property type substitution
            config: Code generation configuration
        """
        self.model = model
        self.config = config or CodeGeneratorConfig()
        self.resolver = TypeResolver(model, aliases, self.config.ignore_classes)

    def analyze(self, group: TypeGroup, generation_comment: str = "") -> IR:
        """
        Build the IR for one output group.

        Raises:
            UnknownTypeShapeError: If a type in the group has no emittable shape
        """
        ir = IR(root_name=group.name, generation_comment=generation_comment)
        emitted: set[str] = set()
        for type_ in group.sorted_types():
            if self._is_ignored(type_):
                continue
            class_def = self.analyze_type(type_)
            if class_def is None or class_def.name in emitted:
                continue
            emitted.add(class_def.name)
            ir.classes.append(class_def)
        ir.classes.sort(key=lambda c: c.name)
        return ir

    def analyze_type(self, type_: Type) -> ClassDef | None:
        """
        Build the class definition for a single type.

        Returns:
            The ClassDef, or None for intentionally empty types (wildcards, OEM actions)

        Raises:
            UnknownTypeShapeError: If the type is empty for no known reason
        """
        if type_.is_struct:
            return self._analyze_struct(type_)
        if type_.is_enum:
            return self._analyze_enum(type_)
        if type_.is_benign_empty:
            logger.debug("type_skipped", type=type_.qualified_name)
            return None
        populated = self.model.populated_version(type_)
        if populated is not None:
            return self._analyze_struct(populated)
        raise UnknownTypeShapeError(type_.qualified_name)

    def _is_ignored(self, type_: Type) -> bool:
        return provided_by_support(type_.qualified_name) or self.resolver.is_ignored(type_)

    def _analyze_struct(self, type_: Type) -> ClassDef:
        # Work on a copy; the folded record stays untouched
        properties = {name: prop for name, prop in type_.properties.items() if name not in self.config.global_ignore_fields}
        fields: list[FieldDef] = []
        taken: set[str] = set()

        def add_header(name: str, json_name: str, is_optional: bool) -> None:
            # Properties serialized under the same key are represented by the header field
            for prop_name in [n for n, p in properties.items() if p.json_name == json_name]:
                del properties[prop_name]
            fields.append(FieldDef(name=name, original_name=name, type_ref=_string(), json_name=json_name, is_optional=is_optional))
            taken.add(name)

        def add_declared(name: str, force_optional: bool = False) -> None:
            prop = properties.pop(name, None)
            if prop is not None:
                field_def = self._analyze_field(name, prop, taken)
                if force_optional:
                    field_def.is_optional = True
                fields.append(field_def)

        if not type_.is_complex:
            # Complex types are not individually addressable and carry no @odata.id
            add_header("ID", ODATA_ID, False)
            add_declared("Id")
        add_header("Type", ODATA_TYPE, True)
        add_header("Context", ODATA_CONTEXT, True)
        add_declared("Name")
        add_declared("Description", force_optional=True)

        for name in sorted(properties):
            fields.append(self._analyze_field(name, properties[name], taken))

        return ClassDef(
            name=class_name(type_.namespace, type_.name),
            original_name=type_.qualified_name,
            fields=fields,
            is_complex=type_.is_complex,
        )

    def _analyze_field(self, name: str, prop: PropertyType, taken: set[str]) -> FieldDef:
        attribute = unique_identifier(name, taken)
        taken.add(attribute)
        field_def = FieldDef(
            name=attribute,
            original_name=name,
            json_name=prop.json_name or (name if attribute != name else ""),
            is_navigation=prop.is_navigation,
        )

        if name == "Actions":
            field_def.type_ref = TypeRef(kind=TypeKind.DICT, type_args=[_shared("Action")])
            field_def.is_optional = True
        elif name == "Oem":
            field_def.type_ref = open_object()
            field_def.is_optional = True
        elif prop.is_navigation:
            field_def.type_ref = _shared("OdataID")
            if prop.is_collection:
                field_def.type_ref = TypeRef(kind=TypeKind.ARRAY, type_args=[field_def.type_ref])
            field_def.is_optional = True
        else:
            field_def.type_ref = self.resolver.resolve(prop.declared_type)
            field_def.is_optional = prop.is_nullable or field_def.type_ref.kind is TypeKind.ANY

        return field_def

    def _analyze_enum(self, type_: Type) -> ClassDef:
        name = class_name(type_.namespace, type_.name)
        members: dict[str, str] = {}
        for member in type_.members.values():
            member_name = unique_identifier(member.name, set(members))
            members[member_name] = member.value if member.value is not None else member.name
        return ClassDef(
            name=name,
            original_name=type_.qualified_name,
            is_enum=True,
            enum_def=EnumDef(name=name, original_name=type_.qualified_name, members=members),
        )
