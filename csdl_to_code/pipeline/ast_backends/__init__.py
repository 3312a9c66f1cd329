"""
AST-based code generation backends.
"""

from __future__ import annotations

from .base import AstBackend
from .python_ast_backend import PythonAstBackend
from .support import SupportModuleRenderer

__all__ = [
    "AstBackend",
    "PythonAstBackend",
    "SupportModuleRenderer",
]
