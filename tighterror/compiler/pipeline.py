"""Code generation pipeline: parse, validate, build, render, write."""
from __future__ import annotations
from pathlib import Path
from typing import List, Optional, TextIO, Tuple, Union

from tighterror.backend.emit_python import render_unit
from tighterror.backend.modules import build_units
from tighterror.compiler.options import CodegenOptions, FrozenOptions
from tighterror.compiler.writer import write_output
from tighterror.internals.errors import TighterrorError
from tighterror.internals.report import Reporter
from tighterror.parser import parse
from tighterror.semantics.validator import validate
from tighterror.spec.model import Spec


def load_spec(path: Optional[Union[str, Path]] = None) -> Spec:
    """Parse and validate a specification file.

    Raises:
        TighterrorError: The file cannot be read, is malformed or invalid.
    """
    spec = parse(path)
    try:
        validate(spec)
    except TighterrorError as e:
        e.filename = spec.filename
        raise
    return spec


def render(spec: Spec, frozen: FrozenOptions) -> List[Tuple[Optional[Path], str]]:
    """Render every output unit of a validated spec.

    Returns:
        ``(destination, source text)`` pairs in emission order; a ``None``
        destination is standard output.
    """
    try:
        units = build_units(spec, test=frozen.test, separate_files=frozen.separate_files)
    except TighterrorError as e:
        e.filename = spec.filename
        raise
    return [(frozen.unit_path(u.name), render_unit(u)) for u in units]


def codegen(opts: CodegenOptions, stream: Optional[TextIO] = None,
            reporter: Optional[Reporter] = None) -> None:
    """Generate code for the specification named by `opts`.

    Nothing is written unless every unit rendered successfully.

    Args:
        opts: User options.
        stream: Destination of standard-output units (default sys.stdout).
        reporter: Receives informational notes when given.

    Raises:
        TighterrorError: On the first failure.
    """
    spec = load_spec(opts.spec)
    frozen = FrozenOptions.new(opts, spec)
    outputs = render(spec, frozen)

    if reporter is not None:
        reporter.note(f"read specification {spec.filename}")
    for path, text in outputs:
        written = write_output(path, text, update=frozen.update, stream=stream)
        if reporter is not None and path is not None:
            if written:
                reporter.note(f"wrote {path}")
            else:
                reporter.note(f"{path} is up to date")
