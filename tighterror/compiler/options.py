"""Code generation options."""
from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from tighterror.internals.errors import ERR, fail
from tighterror.spec import definitions as defs
from tighterror.spec.model import Spec

PathLike = Union[str, Path]


@dataclass
class CodegenOptions:
    """User options of a code generation run.

    Attributes left as ``None`` fall back to the specification file and
    then to the defaults.

    Attributes:
        spec: Specification file; default ``tighterror.yaml`` or ``tighterror.toml``.
        output: Output file or directory, ``-`` for standard output.
            Overrides ``main.output`` of the specification.
        test: Embed unit tests into the generated modules.
        update: Rewrite the output file only if its content changes.
        separate_files: Write one file per module. Overrides
            ``main.separate_files`` of the specification.
    """
    spec: Optional[PathLike] = None
    output: Optional[PathLike] = None
    test: Optional[bool] = None
    update: Optional[bool] = None
    separate_files: Optional[bool] = None

    def codegen(self) -> None:
        """Run the code generation with these options."""
        from tighterror.compiler.pipeline import codegen
        codegen(self)


@dataclass(frozen=True)
class FrozenOptions:
    """Options resolved against a parsed specification.

    `output` is ``None`` for standard output. In separate-files mode it is
    the directory receiving one file per module.
    """
    output: Optional[Path]
    test: bool
    update: bool
    separate_files: bool

    @classmethod
    def new(cls, opts: CodegenOptions, spec: Spec) -> "FrozenOptions":
        separate_files = (opts.separate_files if opts.separate_files is not None
                          else spec.main.resolved_separate_files)
        return cls(
            output=resolve_output(opts, spec, separate_files),
            test=opts.test if opts.test is not None else defs.DEFAULT_TEST,
            update=opts.update if opts.update is not None else defs.DEFAULT_UPDATE,
            separate_files=separate_files,
        )

    def unit_path(self, unit_name: str) -> Optional[Path]:
        """Destination file of the output unit `unit_name`."""
        if self.output is None:
            return None
        if self.separate_files:
            return self.output / f"{unit_name}{defs.OUTPUT_SUFFIX}"
        return self.output


def resolve_output(opts: CodegenOptions, spec: Spec, separate_files: bool) -> Optional[Path]:
    """Resolve the output path; ``None`` means standard output.

    The command-line path is taken as given. A path from the specification
    is relative to the directory of the specification file.
    """
    if opts.output is not None:
        raw = str(opts.output)
        base = None
    elif spec.main.output is not None:
        raw = spec.main.output
        base = spec.path.parent if spec.path is not None else None
    else:
        return None

    if raw == defs.STDOUT_PATH:
        return None
    if not raw:
        fail(ERR.BAD_PATH, path=repr(raw))

    path = Path(raw)
    if base is not None and not path.is_absolute():
        path = base / path

    if separate_files:
        if not path.is_dir():
            fail(ERR.OUTPUT_PATH_NOT_DIRECTORY, path=path)
        return path

    if path.is_dir():
        return path / defs.IMPLICIT_FILENAME
    if path.name in ("", ".", ".."):
        fail(ERR.BAD_PATH, path=path)
    return path
