#!/usr/bin/env python3

from pathlib import Path

import click
import pytest

from csdl_to_code.cli_utils import reconstruct_command_line
from csdl_to_code.csdl_to_code import csdl_to_code

TEST_DATA = Path(__file__).parent / "test_data"


class TestCliUtils:
    """Test cases for CLI utilities"""

    def test_reconstruct_command_line_without_context(self):
        """Without an active Click context the program name is returned"""
        assert reconstruct_command_line(csdl_to_code) == "csdl_to_code"

    def test_reconstruct_command_line_with_context(self):
        """Defaults are skipped, paths are shown by name and negative flags use their secondary form"""
        with click.Context(csdl_to_code) as ctx:
            ctx.params = {
                "output_dir": "/nonexistent/out",
                "config": None,
                "mode": "force",
                "support": False,
                "format_": False,
                "verbose": False,
                "paths": (str(TEST_DATA / "Resource_v1.xml"), str(TEST_DATA / "Widget_v1.xml")),
            }
            result = reconstruct_command_line(csdl_to_code)

        assert result == "csdl_to_code Resource_v1.xml Widget_v1.xml --output-dir /nonexistent/out --mode force --no-support"

    def test_reconstruct_command_line_positive_flags(self):
        with click.Context(csdl_to_code) as ctx:
            ctx.params = {"verbose": True, "format_": True, "paths": ("schemas",)}
            result = reconstruct_command_line(csdl_to_code)

        assert result == "csdl_to_code schemas --format --verbose"


if __name__ == "__main__":
    pytest.main([__file__])
