from __future__ import annotations

from pathlib import Path

import pytest
import structlog

from csdl_to_code.pipeline.schema_ast import CsdlParser

TEST_DATA = Path(__file__).parent / "test_data"


@pytest.fixture(autouse=True)
def reset_structlog():
    """Undo logging configuration done by CLI tests."""
    yield
    structlog.reset_defaults()


@pytest.fixture
def fixture_record_set():
    """Record set of the Resource and Widget fixture schemas."""
    parser = CsdlParser()
    parser.add_path(TEST_DATA / "Resource_v1.xml")
    parser.add_path(TEST_DATA / "Widget_v1.xml")
    return parser.parse()
