"""
Ruff formatter for generated modules.
"""

from __future__ import annotations

import subprocess

import structlog

from ..config import FormatterConfig
from .base import Formatter

logger = structlog.get_logger(__name__)


class RuffFormatter(Formatter):
    """Formats Python code by piping it through ``ruff format``."""

    def __init__(self, executable: str = "ruff"):
        self.executable = executable
        self._available: bool | None = None

    def is_available(self) -> bool:
        """Check if ruff is installed."""
        if self._available is None:
            try:
                result = subprocess.run(
                    [self.executable, "--version"],
                    capture_output=True,
                    text=True,
                    timeout=5,
                )
                self._available = result.returncode == 0
            except (subprocess.SubprocessError, FileNotFoundError):
                self._available = False
            if not self._available:
                logger.warning("formatter_unavailable", formatter=self.executable)
        return self._available

    def format(self, code: str, config: FormatterConfig) -> str:
        """
        Format Python code using ruff.

        Args:
            code: Python source code to format
            config: Formatter configuration

        Returns:
            Formatted code, or the original code when ruff is missing or fails
        """
        if not self.is_available():
            return code

        cmd = [self.executable, "format", "--stdin-filename", "generated.py"]
        if config.line_length:
            cmd.extend(["--line-length", str(config.line_length)])
        if config.target_version:
            cmd.extend(["--target-version", config.target_version])

        try:
            result = subprocess.run(
                cmd,
                input=code,
                capture_output=True,
                text=True,
                timeout=30,
            )
        except subprocess.SubprocessError as e:
            logger.warning("format_failed", error=str(e))
            return code

        if result.returncode != 0:
            logger.warning("format_failed", error=result.stderr.strip())
            return code
        return result.stdout
