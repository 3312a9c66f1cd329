from __future__ import annotations

import pytest

from csdl_to_code.pipeline import AtomicWriter, OutputConfig, OutputMode, OutputWriteError
from csdl_to_code.pipeline.output import validate_python


def test_write_creates_directories(tmp_path):
    path = tmp_path / "pkg" / "sub" / "module.py"
    AtomicWriter().write(path, "x = 1\n")
    assert path.read_text() == "x = 1\n"


def test_no_temporary_files_left(tmp_path):
    AtomicWriter().write(tmp_path / "module.py", "x = 1\n")
    assert [p.name for p in tmp_path.iterdir()] == ["module.py"]


def test_error_if_exists(tmp_path):
    path = tmp_path / "module.py"
    path.write_text("old = 1\n")
    with pytest.raises(OutputWriteError, match="already exists"):
        AtomicWriter().write(path, "x = 1\n")
    assert path.read_text() == "old = 1\n"


@pytest.mark.parametrize("atomic_write", [True, False])
def test_force_overwrites(tmp_path, atomic_write):
    path = tmp_path / "module.py"
    path.write_text("old = 1\n")
    AtomicWriter(OutputConfig(mode=OutputMode.FORCE, atomic_write=atomic_write)).write(path, "x = 1\n")
    assert path.read_text() == "x = 1\n"


def test_invalid_code_is_rejected(tmp_path):
    path = tmp_path / "module.py"
    with pytest.raises(OutputWriteError, match="not valid"):
        AtomicWriter().write(path, "class :\n")
    assert not path.exists()


def test_validation_can_be_disabled(tmp_path):
    path = tmp_path / "notes.txt"
    AtomicWriter(OutputConfig(validate_before_write=False)).write(path, "class :\n")
    assert path.read_text() == "class :\n"


def test_custom_validator(tmp_path):
    seen = []
    AtomicWriter(validate=seen.append).write(tmp_path / "module.py", "x = 1\n")
    assert seen == ["x = 1\n"]


def test_validate_python():
    validate_python("x: int = 1\n")
    with pytest.raises(OutputWriteError):
        validate_python("def (:\n")


def test_check_targets_names_every_existing_file(tmp_path):
    first, second, fresh = tmp_path / "a.py", tmp_path / "b.py", tmp_path / "c.py"
    first.write_text("a = 1\n")
    second.write_text("b = 1\n")

    with pytest.raises(OutputWriteError) as exc_info:
        AtomicWriter().check_targets([first, fresh, second])

    assert str(first) in str(exc_info.value)
    assert str(second) in str(exc_info.value)
    assert str(fresh) not in str(exc_info.value)


def test_check_targets_in_force_mode(tmp_path):
    existing = tmp_path / "a.py"
    existing.write_text("a = 1\n")
    AtomicWriter(OutputConfig(mode=OutputMode.FORCE)).check_targets([existing])
