"""
Base class for code formatters.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from ..config import FormatterConfig


class Formatter(ABC):
    """Abstract base class for code formatters."""

    @abstractmethod
    def format(self, code: str, config: FormatterConfig) -> str:
        """
        Format the given code.

        Implementations return the input unchanged when formatting is
        impossible; generated code stays valid either way.
        """

    @abstractmethod
    def is_available(self) -> bool:
        """Whether the formatter can run in this environment."""
