import io
import os

import pytest

from tighterror.compiler.writer import write_output
from tighterror.internals.errors import TighterrorError


def test_write_to_stream():
    out = io.StringIO()
    assert write_output(None, "text\n", stream=out)
    assert out.getvalue() == "text\n"


def test_write_to_file(tmp_path):
    path = tmp_path / "out.py"
    assert write_output(path, "a = 1\n")
    assert path.read_text(encoding="utf-8") == "a = 1\n"
    assert write_output(path, "a = 2\n")
    assert path.read_text(encoding="utf-8") == "a = 2\n"


def test_update_keeps_unchanged_file(tmp_path):
    path = tmp_path / "out.py"
    path.write_text("a = 1\n", encoding="utf-8")
    os.utime(path, (1, 1))
    assert not write_output(path, "a = 1\n", update=True)
    assert path.stat().st_mtime == 1


def test_update_replaces_changed_file(tmp_path):
    path = tmp_path / "out.py"
    path.write_text("a = 1\n", encoding="utf-8")
    assert write_output(path, "a = 2\n", update=True)
    assert path.read_text(encoding="utf-8") == "a = 2\n"
    assert sorted(p.name for p in tmp_path.iterdir()) == ["out.py"]


def test_update_writes_missing_file(tmp_path):
    path = tmp_path / "out.py"
    assert write_output(path, "a = 1\n", update=True)
    assert path.read_text(encoding="utf-8") == "a = 1\n"


def test_unwritable_path(tmp_path):
    with pytest.raises(TighterrorError) as ei:
        write_output(tmp_path / "missing" / "out.py", "a = 1\n")
    assert ei.value.kind == "FAILED_TO_WRITE_OUTPUT_FILE"


def test_unreadable_output_in_update_mode(tmp_path):
    with pytest.raises(TighterrorError) as ei:
        write_output(tmp_path, "a = 1\n", update=True)
    assert ei.value.kind == "FAILED_TO_READ_OUTPUT_FILE"
