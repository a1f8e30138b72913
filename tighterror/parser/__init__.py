"""Specification file parsers.

`parse` picks the front-end by file extension. Without an explicit path it
looks for ``tighterror.yaml`` and then ``tighterror.toml`` in the current
directory.
"""
from __future__ import annotations
from pathlib import Path
from typing import Optional, Union

from tighterror.internals.errors import ERR, TighterrorError, fail
from tighterror.parser.toml_loader import parse_toml_str
from tighterror.parser.yaml_loader import parse_yaml_str
from tighterror.spec import definitions as defs
from tighterror.spec.model import Spec

__all__ = ["parse", "find_spec_file", "parse_toml_str", "parse_yaml_str"]


def find_spec_file(path: Optional[Union[str, Path]] = None) -> Path:
    """Return the spec file to read, applying the default search order."""
    if path is not None:
        return Path(path)
    for candidate in defs.DEFAULT_SPEC_PATHS:
        p = Path(candidate)
        if p.exists():
            return p
    fail(ERR.SPEC_FILE_NOT_FOUND, path=" or ".join(defs.DEFAULT_SPEC_PATHS))


def parse(path: Optional[Union[str, Path]] = None) -> Spec:
    """Read and parse a specification file.

    Args:
        path: Spec file; ``None`` searches the default spec files.

    Returns:
        The parsed, not yet validated, specification.

    Raises:
        TighterrorError: The file is missing, unreadable or malformed.
    """
    spec_path = find_spec_file(path)
    suffix = spec_path.suffix.lower()
    if suffix in defs.YAML_EXTENSIONS:
        parse_str = parse_yaml_str
    elif suffix in defs.TOML_EXTENSIONS:
        parse_str = parse_toml_str
    else:
        fail(ERR.BAD_SPEC_FILE_EXTENSION, path=spec_path)

    try:
        text = spec_path.read_text(encoding="utf-8")
    except FileNotFoundError:
        fail(ERR.SPEC_FILE_NOT_FOUND, path=spec_path)
    except (OSError, UnicodeDecodeError) as e:
        fail(ERR.FAILED_TO_OPEN_SPEC_FILE, path=spec_path, reason=e)

    try:
        spec = parse_str(text)
    except TighterrorError as e:
        e.filename = str(spec_path)
        raise
    spec.path = spec_path
    return spec
