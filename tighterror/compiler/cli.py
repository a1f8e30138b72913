"""CLI entry point and argument parsing."""
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Optional

from tighterror.internals.version import print_banner


def _read_source(filename: Optional[str]) -> Optional[str]:
    """Best-effort read of a spec file for diagnostic snippets."""
    if not filename:
        return None
    try:
        return Path(filename).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        return None


def run_lint(spec: Optional[str]) -> int:
    """Lint the specification and print the findings.

    Returns:
        0 if no error was found, 1 otherwise.
    """
    from tighterror.compiler.linter import lint

    report = lint(spec)
    report.to_reporter(_read_source(report.filename)).print()
    return 1 if report.has_errors() else 0


def run_codegen(args: argparse.Namespace) -> int:
    """Generate code as requested on the command line.

    Returns:
        0 on success, 1 on any failure.
    """
    from tighterror.compiler.options import CodegenOptions
    from tighterror.compiler.pipeline import codegen
    from tighterror.internals.errors import TighterrorError, emit
    from tighterror.internals.report import Reporter

    opts = CodegenOptions(
        spec=args.spec,
        output=args.output,
        test=args.test,
        update=args.update,
        separate_files=args.separate_files,
    )
    notes = Reporter(filename=args.spec or "<spec>")
    try:
        codegen(opts, reporter=notes if args.verbose else None)
    except TighterrorError as e:
        r = Reporter(_read_source(e.filename), e.filename or "<input>")
        emit(r, e)
        r.print()
        return 1

    if args.verbose:
        notes.print()
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    ap = argparse.ArgumentParser(
        prog="tighterror",
        description="Generate compact error kinds from a YAML or TOML specification",
    )
    ap.add_argument("-s", "--spec", metavar="FILE",
                    help="Specification file (default: tighterror.yaml, then tighterror.toml)")
    ap.add_argument("-o", "--output", "--dst", dest="output", metavar="OUT",
                    help="Output file or directory, '-' for stdout "
                         "(default: 'main.output' of the specification, else stdout)")
    ap.add_argument("-t", "--test", action="store_true", default=None,
                    help="Embed unit tests into the generated modules")
    ap.add_argument("-u", "--update", action="store_true", default=None,
                    help="Rewrite the output file only if its content changes")
    ap.add_argument("--separate-files", action="store_true", default=None,
                    help="Write one file per module into the output directory")
    ap.add_argument("-l", "--lint", action="store_true",
                    help="Check the specification without generating code")
    ap.add_argument("-v", "--verbose", action="store_true",
                    help="Print what is read and written")
    ap.add_argument("--version", action="store_true", help="Show version and exit")

    try:
        args = ap.parse_args(argv)
    except SystemExit as e:
        # --help exits with 0; usage errors are failures like any other
        return 0 if e.code == 0 else 1

    if args.version:
        print_banner()
        return 0

    if args.lint:
        return run_lint(args.spec)

    return run_codegen(args)


if __name__ == "__main__":
    raise SystemExit(main())
