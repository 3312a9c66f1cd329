"""
Python AST-based code generation backend.

Generates one Python module of dataclasses from the IR of an output
group using the built-in ast module.
"""

from __future__ import annotations

import ast
import collections

from ..analyzer.ir_nodes import IR, ClassDef, FieldDef, TypeKind, TypeRef
from ..config import CodeGeneratorConfig
from .base import AstBackend

# Support types serialized through an explicit encoder/decoder pair
SUPPORT_CODECS: dict[str, tuple[str, str]] = {
    "Date": ("format_date", "parse_date"),
    "DateTimeOffset": ("format_datetime", "parse_datetime"),
    "Duration": ("format_duration", "parse_duration"),
}


class PythonAstBackend(AstBackend):
    """Python code generation backend using AST."""

    FILE_EXTENSION = "py"

    TYPE_MAP = {
        "bool": "bool",
        "int": "int",
        "float": "float",
        "str": "str",
    }

    def __init__(self, config: CodeGeneratorConfig):
        super().__init__(config)
        self.python_imports: set[tuple[str, str]] = set()
        self.support_imports: set[str] = set()
        self.module_imports: set[str] = set()
        self.current_module = ""
        self.local_names: set[str] = set()
        self.refers_to_class = False

    def generate(self, ir: IR) -> str:
        """Generate the Python module for one output group."""
        # Reset import tracking
        self.python_imports = set()
        self.support_imports = set()
        self.module_imports = set()
        self.current_module = ir.root_name
        self.local_names = {c.name for c in ir.classes}

        # Always include base imports
        self.python_imports.add(("dataclasses", "dataclass"))
        self.python_imports.add(("dataclasses_json", "dataclass_json"))

        if self.config.use_future_annotations:
            self.python_imports.add(("__future__", "annotations"))

        if any(c.is_enum for c in ir.classes):
            self.python_imports.add(("enum", "Enum"))

        # Generate class definitions first so that they register their imports
        class_nodes = [self._generate_class(class_def) for class_def in ir.classes]

        body: list[ast.stmt] = []
        body.extend(self._generate_imports())
        if body:
            body.append(ast.Pass())  # Placeholder for blank line
        body.extend(class_nodes)

        module = ast.Module(body=body, type_ignores=[])
        ast.fix_missing_locations(module)

        code = ast.unparse(module)
        return self._post_process_code(code, ir.generation_comment)

    def _local_alias(self, name: str) -> str:
        """Name under which an imported ``name`` is bound, avoiding classes defined in this module."""
        return f"_{name}" if name in self.local_names else name

    def _generate_imports(self) -> list[ast.stmt]:
        """Generate import statements as AST nodes."""
        import_groups: dict[str, set[str]] = collections.defaultdict(set)
        for module, name in self.python_imports:
            import_groups[module].add(name)

        STDLIB_MODULES = {"dataclasses", "enum", "typing"}

        stdlib_groups = {m: import_groups[m] for m in import_groups if m in STDLIB_MODULES}
        third_party_groups = {m: import_groups[m] for m in import_groups if m not in STDLIB_MODULES and m != "__future__"}

        nodes: list[ast.stmt] = []

        # __future__ imports first
        if "__future__" in import_groups:
            nodes.append(self._import_from("__future__", sorted(import_groups["__future__"])))

        # Standard library
        for module in sorted(stdlib_groups):
            nodes.append(self._import_from(module, sorted(stdlib_groups[module])))

        # Third party
        for module in sorted(third_party_groups):
            nodes.append(self._import_from(module, sorted(third_party_groups[module])))

        # Runtime support module
        if self.support_imports:
            nodes.append(self._import_from(self.config.support_module, sorted(self.support_imports), level=1))

        # Sibling group modules
        if self.module_imports:
            nodes.append(self._import_from(None, sorted(self.module_imports), level=1))

        return nodes

    def _import_from(self, module: str | None, names: list[str], level: int = 0) -> ast.ImportFrom:
        aliases = []
        for name in names:
            alias = self._local_alias(name) if level else name
            aliases.append(ast.alias(name=name, asname=alias if alias != name else None))
        return ast.ImportFrom(module=module, names=aliases, level=level)

    def _generate_class(self, class_def: ClassDef) -> ast.ClassDef:
        """Generate a class definition as AST node."""
        if class_def.is_enum:
            return self._generate_enum_class(class_def)

        decorators = [
            ast.Name(id="dataclass_json", ctx=ast.Load()),
            ast.Call(
                func=ast.Name(id="dataclass", ctx=ast.Load()),
                args=[],
                keywords=[ast.keyword(arg="kw_only", value=ast.Constant(value=True))],
            ),
        ]

        body: list[ast.stmt] = [self._generate_field(field_def) for field_def in class_def.fields]
        if not body:
            body.append(ast.Pass())

        return ast.ClassDef(
            name=class_def.name,
            bases=[],
            keywords=[],
            body=body,
            decorator_list=decorators,
        )

    def _generate_enum_class(self, class_def: ClassDef) -> ast.ClassDef:
        """Generate an enum class definition."""
        if not class_def.enum_def:
            raise ValueError(f"Enum class {class_def.name} has no enum_def")

        bases = [ast.Name(id="str", ctx=ast.Load()), ast.Name(id="Enum", ctx=ast.Load())]

        body: list[ast.stmt] = []
        for member_name, member_value in class_def.enum_def.members.items():
            body.append(
                ast.Assign(
                    targets=[ast.Name(id=member_name, ctx=ast.Store())],
                    value=ast.Constant(value=member_value),
                )
            )

        if not body:
            body.append(ast.Pass())

        return ast.ClassDef(
            name=class_def.name,
            bases=bases,
            keywords=[],
            body=body,
            decorator_list=[],
        )

    def _generate_field(self, field_def: FieldDef) -> ast.AnnAssign:
        """Generate a field definition as annotated assignment."""
        type_ref = field_def.type_ref or TypeRef(kind=TypeKind.ANY)
        self.refers_to_class = False
        type_str = self.translate_type(type_ref)

        metadata: list[str] = []
        if field_def.json_name and field_def.json_name != field_def.name:
            metadata.append(f"field_name={field_def.json_name!r}")
        codec = self._codec(type_ref)
        if codec:
            metadata.append(f"encoder={codec[0]}")
            metadata.append(f"decoder={codec[1]}")

        if field_def.is_optional and type_ref.is_container:
            factory = "list" if type_ref.kind is TypeKind.ARRAY else "dict"
            metadata.append("exclude=lambda x: not x")
            value = self._field_expr(f"default_factory={factory}", metadata)
        elif field_def.is_optional:
            if type_ref.kind is not TypeKind.ANY:
                type_str = f"{type_str} | None"
            metadata.append("exclude=lambda x: x is None")
            value = self._field_expr("default=None", metadata)
        elif metadata:
            value = self._field_expr("", metadata)
        else:
            value = None

        # Without postponed evaluation, class names may not be bound yet when the class body runs
        if self.refers_to_class and not self.config.use_future_annotations:
            annotation: ast.expr = ast.Constant(value=type_str)
        else:
            annotation = self._parse_expr(type_str)

        return ast.AnnAssign(
            target=ast.Name(id=field_def.name, ctx=ast.Store()),
            annotation=annotation,
            value=value,
            simple=1,
        )

    def _field_expr(self, default: str, metadata: list[str]) -> ast.expr:
        self.python_imports.add(("dataclasses", "field"))
        args = [default] if default else []
        if metadata:
            self.python_imports.add(("dataclasses_json", "config"))
            args.append(f"metadata=config({', '.join(metadata)})")
        return self._parse_expr(f"field({', '.join(args)})")

    def _codec(self, type_ref: TypeRef) -> tuple[str, str] | None:
        """Encoder/decoder expressions for support types without native JSON support."""
        if type_ref.kind is TypeKind.SHARED and type_ref.name in SUPPORT_CODECS:
            encoder, decoder = SUPPORT_CODECS[type_ref.name]
            self.support_imports.update((encoder, decoder))
            return self._local_alias(encoder), self._local_alias(decoder)
        if type_ref.kind is TypeKind.ARRAY and type_ref.item is not None:
            inner = self._codec(type_ref.item)
            if inner:
                self.support_imports.add("many")
                many = self._local_alias("many")
                return f"{many}({inner[0]})", f"{many}({inner[1]})"
        return None

    def translate_type(self, type_ref: TypeRef) -> str:
        """Translate IR type to Python type string."""
        if type_ref.kind == TypeKind.PRIMITIVE:
            return self.TYPE_MAP.get(type_ref.name, type_ref.name)

        if type_ref.kind == TypeKind.SHARED:
            self.support_imports.add(type_ref.name)
            return self._local_alias(type_ref.name)

        if type_ref.kind == TypeKind.CLASS:
            self.refers_to_class = True
            if not type_ref.module or type_ref.module == self.current_module:
                return type_ref.name
            self.module_imports.add(type_ref.module)
            return f"{self._local_alias(type_ref.module)}.{type_ref.name}"

        if type_ref.kind == TypeKind.ARRAY:
            item_type = self.translate_type(type_ref.item) if type_ref.item else self._any()
            return f"list[{item_type}]"

        if type_ref.kind == TypeKind.DICT:
            value_type = self.translate_type(type_ref.item) if type_ref.item else self._any()
            return f"dict[str, {value_type}]"

        return self._any()

    def _any(self) -> str:
        self.python_imports.add(("typing", "Any"))
        return "Any"

    def _parse_expr(self, expr_str: str) -> ast.expr:
        """Parse an expression string into an AST expression."""
        return ast.parse(expr_str, mode="eval").body

    def _post_process_code(self, code: str, generation_comment: str) -> str:
        """Post-process the generated code for formatting."""
        lines = code.split("\n")
        result = []

        # Add generation comment at the top
        if generation_comment:
            result.append(generation_comment)
            result.append("")

        for i, line in enumerate(lines):
            # Skip placeholder pass statements (used for blank lines)
            if line.strip() == "pass" and i > 0 and not lines[i - 1].strip().startswith("class"):
                result.append("")
                continue

            # Two blank lines before each top-level class (decorators included)
            starts_class = line.startswith("@dataclass_json") or (line.startswith("class ") and not (result and result[-1].startswith("@")))
            if starts_class and result:
                while result[-2:] != ["", ""]:
                    result.append("")

            result.append(line)

        # Ensure file ends with newline
        if result and result[-1] != "":
            result.append("")

        return "\n".join(result)
