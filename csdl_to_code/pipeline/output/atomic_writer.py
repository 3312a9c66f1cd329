"""
Atomic file writer for generated modules.

A write goes to a temporary file in the target directory, is validated,
and then replaces the target, so an interrupted run never leaves a
truncated module behind.
"""

from __future__ import annotations

import ast
import tempfile
from collections.abc import Callable, Iterable
from pathlib import Path

from ..config import OutputConfig, OutputMode
from ..errors import OutputWriteError


def validate_python(content: str) -> None:
    """
    Check that ``content`` parses as Python.

    Raises:
        OutputWriteError: If it does not
    """
    try:
        ast.parse(content)
    except SyntaxError as e:
        raise OutputWriteError(f"Generated Python code is not valid: {e}") from e


class AtomicWriter:
    """Handles atomic file writes with validation."""

    def __init__(self, config: OutputConfig | None = None, validate: Callable[[str], None] | None = None):
        """
        Initialize the atomic writer.

        Args:
            config: Output handling configuration
            validate: Validation function, defaults to a Python syntax check
        """
        self.config = config or OutputConfig()
        self._validate = validate or validate_python

    def check_targets(self, paths: Iterable[Path]) -> None:
        """
        Refuse a batch of writes up front if any target already exists in error mode.

        Raises:
            OutputWriteError: Naming every existing target
        """
        if self.config.mode is not OutputMode.ERROR_IF_EXISTS:
            return
        existing = [str(path) for path in paths if path.exists()]
        if existing:
            raise OutputWriteError(f"Output files already exist: {', '.join(existing)}. Use force mode to overwrite.")

    def write(self, path: Path, content: str) -> None:
        """
        Write ``content`` to ``path`` honouring the configured output mode.

        Raises:
            OutputWriteError: If the file exists in error mode, validation fails, or the write fails
        """
        if self.config.mode is OutputMode.ERROR_IF_EXISTS and path.exists():
            raise OutputWriteError(f"Output file already exists: {path}. Use force mode to overwrite.")

        if self.config.validate_before_write:
            self._validate(content)

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            if self.config.atomic_write:
                self._replace(path, content)
            else:
                path.write_text(content, encoding="utf-8")
        except OSError as e:
            raise OutputWriteError(f"Cannot write {path}: {e}") from e

    def _replace(self, path: Path, content: str) -> None:
        # Same directory keeps the final rename on one filesystem
        temp_fd, temp_path_str = tempfile.mkstemp(
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            text=True,
        )
        temp_path = Path(temp_path_str)
        try:
            with open(temp_fd, "w", encoding="utf-8") as f:
                f.write(content)
            temp_path.replace(path)
        except Exception:
            temp_path.unlink(missing_ok=True)
            raise
