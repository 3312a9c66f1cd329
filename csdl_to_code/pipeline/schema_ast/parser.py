"""
CSDL document loader.

Phase 1 of the pipeline: read CSDL XML documents (single files,
directories or zip archives) into a RecordSet without resolving
inheritance, aliases or cross-namespace references.
"""

from __future__ import annotations

import zipfile
from collections.abc import Callable
from pathlib import Path
from xml.etree.ElementTree import Element

import defusedxml.ElementTree as ET
import structlog
from defusedxml import DefusedXmlException

from ..errors import SchemaLoadError
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

logger = structlog.get_logger(__name__)


def _local_name(tag: str) -> str:
    """Strip the XML namespace from an element tag."""
    return tag.rsplit("}", 1)[-1]


def _children(element: Element, name: str) -> list[Element]:
    return [child for child in element if _local_name(child.tag) == name]


def _child(element: Element, name: str) -> Element | None:
    for child in element:
        if _local_name(child.tag) == name:
            return child
    return None


class CsdlParser:
    """Parses CSDL documents into a RecordSet."""

    XML_SUFFIX = ".xml"
    ARCHIVE_SUFFIX = ".zip"

    # Schema children that are kept only as counts
    OPAQUE_ELEMENTS = ("Action", "Function", "Term", "EntityContainer", "Annotations")

    def __init__(self):
        self.record_set = RecordSet()

    def add_path(self, path: str | Path) -> None:
        """
        Add a file, archive or directory of documents.

        Args:
            path: An .xml file, a .zip archive or a directory containing .xml files

        Raises:
            SchemaLoadError: If the path is of an unsupported kind or a document is invalid
        """
        path = Path(path)
        if path.is_dir():
            for child in sorted(path.glob(f"*{self.XML_SUFFIX}")):
                self.add_file(child)
        elif path.suffix == self.XML_SUFFIX:
            self.add_file(path)
        elif path.suffix == self.ARCHIVE_SUFFIX:
            self.add_archive(path)
        else:
            raise SchemaLoadError(str(path), "unsupported file type")

    def add_file(self, path: str | Path) -> list[SchemaNode]:
        path = Path(path)
        try:
            data = path.read_bytes()
        except OSError as e:
            raise SchemaLoadError(str(path), str(e)) from e
        return self.add_document(path.name, data)

    def add_archive(self, path: str | Path) -> list[SchemaNode]:
        """Add every .xml member of a zip archive, in name order."""
        path = Path(path)
        schemas: list[SchemaNode] = []
        try:
            with zipfile.ZipFile(path) as archive:
                names = sorted(info.filename for info in archive.infolist() if not info.is_dir() and info.filename.endswith(self.XML_SUFFIX))
                for name in names:
                    schemas.extend(self.add_document(f"{path.name}:{name}", archive.read(name)))
        except (zipfile.BadZipFile, OSError) as e:
            raise SchemaLoadError(str(path), str(e)) from e
        return schemas

    def add_document(self, document: str, data: bytes | str) -> list[SchemaNode]:
        """
        Parse one CSDL document and add its schemas to the record set.

        Args:
            document: Name of the document (used in error messages)
            data: Raw XML content

        Returns:
            The schemas found in the document
        """
        try:
            root = ET.fromstring(data)
        except (ET.ParseError, DefusedXmlException) as e:
            raise SchemaLoadError(document, f"malformed XML: {e}") from e

        if _local_name(root.tag) != "Edmx":
            raise SchemaLoadError(document, f"root element is <{_local_name(root.tag)}>, expected <Edmx>")

        schemas = []
        data_services = _child(root, "DataServices")
        if data_services is not None:
            for schema_element in _children(data_services, "Schema"):
                schemas.append(self._parse_schema(schema_element, document))

        self.record_set.extend(schemas)
        logger.debug("document_loaded", document=document, schemas=len(schemas))
        return schemas

    def parse(self) -> RecordSet:
        """Return the record set built from every document added so far."""
        return self.record_set

    def _parse_schema(self, element: Element, document: str) -> SchemaNode:
        namespace = element.get("Namespace", "")
        if not namespace:
            raise SchemaLoadError(document, "<Schema> is missing the Namespace attribute")

        schema = SchemaNode(
            namespace=namespace,
            alias=element.get("Alias", ""),
            source=document,
        )
        reader = _AttributeReader(document)

        for child in element:
            tag = _local_name(child.tag)
            if tag == "EntityType":
                schema.entity_types.append(self._parse_entity_type(child, reader))
            elif tag == "ComplexType":
                schema.complex_types.append(self._parse_complex_type(child, reader))
            elif tag == "EnumType":
                schema.enum_types.append(self._parse_enum_type(child, reader))
            elif tag == "TypeDefinition":
                schema.type_definitions.append(
                    TypeDefinitionNode(
                        name=reader.required(child, "Name"),
                        underlying_type=reader.required(child, "UnderlyingType"),
                        annotations=self._parse_annotations(child, reader),
                    )
                )
            elif tag == "Annotation":
                schema.annotations.append(self._parse_annotation(child, reader))
            elif tag in self.OPAQUE_ELEMENTS:
                schema.opaque[tag] = schema.opaque.get(tag, 0) + 1

        return schema

    def _parse_entity_type(self, element: Element, reader: _AttributeReader) -> EntityTypeNode:
        node = EntityTypeNode(
            name=reader.required(element, "Name"),
            base_type=element.get("BaseType", ""),
            abstract=reader.boolean(element, "Abstract", False),
            open_type=reader.boolean(element, "OpenType", False),
            has_stream=reader.boolean(element, "HasStream", False),
        )
        key = _child(element, "Key")
        if key is not None:
            node.key = [ref.get("Name", "") for ref in _children(key, "PropertyRef")]
        self._parse_structure(element, node, reader)
        return node

    def _parse_complex_type(self, element: Element, reader: _AttributeReader) -> ComplexTypeNode:
        node = ComplexTypeNode(
            name=reader.required(element, "Name"),
            base_type=element.get("BaseType", ""),
            abstract=reader.boolean(element, "Abstract", False),
            open_type=reader.boolean(element, "OpenType", False),
        )
        self._parse_structure(element, node, reader)
        return node

    def _parse_structure(self, element: Element, node: EntityTypeNode | ComplexTypeNode, reader: _AttributeReader) -> None:
        """Parse properties, navigation properties and annotations shared by entity and complex types."""
        for child in element:
            tag = _local_name(child.tag)
            if tag == "Property":
                node.properties.append(
                    PropertyNode(
                        name=reader.required(child, "Name"),
                        type=reader.required(child, "Type"),
                        nullable=reader.boolean(child, "Nullable", None),
                        annotations=self._parse_annotations(child, reader),
                    )
                )
            elif tag == "NavigationProperty":
                node.navigation_properties.append(
                    NavigationPropertyNode(
                        name=reader.required(child, "Name"),
                        type=reader.required(child, "Type"),
                        nullable=reader.boolean(child, "Nullable", None),
                        partner=child.get("Partner", ""),
                        contains_target=reader.boolean(child, "ContainsTarget", False),
                        annotations=self._parse_annotations(child, reader),
                    )
                )
            elif tag == "Annotation":
                node.annotations.append(self._parse_annotation(child, reader))

    def _parse_enum_type(self, element: Element, reader: _AttributeReader) -> EnumTypeNode:
        node = EnumTypeNode(
            name=reader.required(element, "Name"),
            underlying_type=element.get("UnderlyingType", ""),
            is_flags=reader.boolean(element, "IsFlags", False),
            annotations=self._parse_annotations(element, reader),
        )
        for member in _children(element, "Member"):
            node.members.append(
                MemberNode(
                    name=reader.required(member, "Name"),
                    value=member.get("Value"),
                    annotations=self._parse_annotations(member, reader),
                )
            )
        return node

    def _parse_annotations(self, element: Element, reader: _AttributeReader) -> list[AnnotationNode]:
        return [self._parse_annotation(child, reader) for child in _children(element, "Annotation")]

    def _parse_annotation(self, element: Element, reader: _AttributeReader) -> AnnotationNode:
        return AnnotationNode(
            term=reader.required(element, "Term"),
            qualifier=element.get("Qualifier", ""),
            string=element.get("String"),
            bool_value=reader.boolean(element, "Bool", None),
            int_value=reader.number(element, "Int", int),
            decimal=reader.number(element, "Decimal", float),
            enum_member=element.get("EnumMember"),
        )


class _AttributeReader:
    """Typed attribute access that reports failures against the owning document."""

    def __init__(self, document: str):
        self.document = document

    def required(self, element: Element, name: str) -> str:
        value = element.get(name)
        if not value:
            raise SchemaLoadError(self.document, f"<{_local_name(element.tag)}> is missing the {name} attribute")
        return value

    def boolean(self, element: Element, name: str, default: bool | None) -> bool | None:
        value = element.get(name)
        if value is None:
            return default
        lowered = value.strip().lower()
        if lowered in ("true", "1"):
            return True
        if lowered in ("false", "0"):
            return False
        raise SchemaLoadError(self.document, f"invalid boolean {value!r} for {name} on <{_local_name(element.tag)}>")

    def number(self, element: Element, name: str, convert: Callable[[str], int | float]) -> int | float | None:
        value = element.get(name)
        if value is None:
            return None
        try:
            return convert(value)
        except ValueError as e:
            raise SchemaLoadError(self.document, f"invalid number {value!r} for {name} on <{_local_name(element.tag)}>") from e
