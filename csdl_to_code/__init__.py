"""CSDL to Code Generator

Generates Python dataclasses from OData CSDL (Redfish) schema documents,
resolving versioned namespaces, inheritance and type aliases.
"""

__version__ = "1.0.1"

from .pipeline import (
    AtomicWriter,
    CodeGeneratorConfig,
    CsdlError,
    FormatterConfig,
    OutputConfig,
    OutputMode,
    PipelineGenerator,
)

__all__ = [
    "PipelineGenerator",
    "CodeGeneratorConfig",
    "FormatterConfig",
    "OutputConfig",
    "OutputMode",
    "AtomicWriter",
    "CsdlError",
]
