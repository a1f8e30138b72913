"""Writing generated code to files or standard output."""
from __future__ import annotations
import os
import sys
import tempfile
from pathlib import Path
from typing import Optional, TextIO

from tighterror.internals.errors import ERR, fail


def write_output(path: Optional[Path], text: str, update: bool = False,
                 stream: Optional[TextIO] = None) -> bool:
    """Write `text` to `path`, or to `stream` (default stdout) if `path` is None.

    In update mode an existing file is only replaced when its content
    differs; the new content goes through a temporary file in the same
    directory that is then renamed over the target.

    Returns:
        True if anything was written.
    """
    if path is None:
        (stream or sys.stdout).write(text)
        return True

    if update and path.exists():
        try:
            current = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            fail(ERR.FAILED_TO_READ_OUTPUT_FILE, path=path, reason=e)
        if current == text:
            return False
        _replace(path, text)
        return True

    try:
        with open(path, "w", encoding="utf-8", newline="\n") as f:
            f.write(text)
    except OSError as e:
        fail(ERR.FAILED_TO_WRITE_OUTPUT_FILE, path=path, reason=e)
    return True


def _replace(path: Path, text: str) -> None:
    tmp_name = None
    try:
        with tempfile.NamedTemporaryFile("w", encoding="utf-8", newline="\n",
                                         dir=path.parent, prefix=f".{path.name}.",
                                         suffix=".tmp", delete=False) as tmp:
            tmp_name = tmp.name
            tmp.write(text)
        os.replace(tmp_name, path)
        tmp_name = None
    except OSError as e:
        fail(ERR.FAILED_TO_WRITE_OUTPUT_FILE, path=path, reason=e)
    finally:
        if tmp_name is not None and os.path.exists(tmp_name):
            os.unlink(tmp_name)
