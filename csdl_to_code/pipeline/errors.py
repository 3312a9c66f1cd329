"""
Fatal errors raised by the pipeline.

Recoverable conditions (unknown base types, unresolved property types,
duplicate declarations) never raise; they are absorbed into the output
and logged.
"""

from __future__ import annotations


class CsdlError(Exception):
    """Base class for errors that abort a generation run."""


class SchemaLoadError(CsdlError):
    """Raised when a schema document cannot be read or is not valid CSDL."""

    def __init__(self, document: str, reason: str):
        self.document = document
        self.reason = reason
        super().__init__(f"Failed to load {document}: {reason}")


class FoldCycleError(CsdlError):
    """Raised when a chain of base types loops back on itself."""

    def __init__(self, chain: list[str]):
        self.chain = chain
        super().__init__("Base type cycle detected: " + " -> ".join(chain))


class UnknownTypeShapeError(CsdlError):
    """Raised when a type has neither properties nor members and is not a known empty shape."""

    def __init__(self, qualified_name: str):
        self.qualified_name = qualified_name
        super().__init__(f"Type {qualified_name} has no properties or members and cannot be emitted")


class OutputWriteError(CsdlError):
    """Raised when generated code fails validation or cannot be written."""
