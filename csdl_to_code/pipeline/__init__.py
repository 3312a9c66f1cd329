"""
Pipeline - CSDL to Python code generator.

1. Phase 1 (Parser): Load CSDL documents into raw schema records
2. Phase 2 (Analyzer): Build the type model, fold inheritance, resolve types, build IR
3. Phase 3 (AST Backend): Generate Python AST from IR and unparse it
4. Phase 4 (Formatter): Optional post-processing with ruff
5. Phase 5 (Output): Validated atomic writes
"""

from __future__ import annotations

from .config import CodeGeneratorConfig, FormatterConfig, OutputConfig, OutputMode
from .errors import CsdlError, FoldCycleError, OutputWriteError, SchemaLoadError, UnknownTypeShapeError
from .generator import PipelineGenerator
from .output import AtomicWriter

__all__ = [
    "PipelineGenerator",
    "CodeGeneratorConfig",
    "FormatterConfig",
    "OutputConfig",
    "OutputMode",
    "AtomicWriter",
    "CsdlError",
    "SchemaLoadError",
    "FoldCycleError",
    "UnknownTypeShapeError",
    "OutputWriteError",
]
