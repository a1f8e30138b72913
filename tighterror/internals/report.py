from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional
import os
import sys


class C:
    """ANSI color/style escape codes."""
    RESET = "\x1b[0m"
    BOLD  = "\x1b[1m"
    DIM   = "\x1b[2m"
    RED   = "\x1b[31m"
    YELLOW = "\x1b[33m"
    CYAN  = "\x1b[36m"
    GRAY  = "\x1b[90m"


@dataclass(frozen=True)
class Span:
    """1-based source position of a specification node."""
    line: int
    col: int
    end_line: int
    end_col: int

    def __str__(self) -> str:
        return f"{self.line}:{self.col}"


@dataclass
class Diagnostic:
    kind: str
    code: str
    message: str
    span: Optional[Span] = None
    filename: Optional[str] = None


_KIND_COLORS = {
    "error": C.RED,
    "warning": C.YELLOW,
    "note": C.CYAN,
}


def _display_path(filename: str) -> str:
    """Render `filename` relative to the working directory when possible."""
    if filename.startswith("<"):
        return filename
    try:
        rel_path = Path(filename).resolve().relative_to(Path.cwd())
        return f"./{rel_path}"
    except (ValueError, OSError):
        return filename


class Reporter:
    def __init__(self, source: Optional[str] = None, filename: str = "<input>") -> None:
        self.source = source
        self.filename = filename
        self.items: List[Diagnostic] = []

    def error(self, code: str, msg: str, span: Optional[Span] = None):
        self.items.append(Diagnostic("error", code, msg, span, filename=self.filename))

    def warn(self, code: str, msg: str, span: Optional[Span] = None):
        self.items.append(Diagnostic("warning", code, msg, span, filename=self.filename))

    def note(self, msg: str, span: Optional[Span] = None):
        self.items.append(Diagnostic("note", "", msg, span, filename=self.filename))

    @property
    def has_errors(self) -> bool:
        return any(d.kind == "error" for d in self.items)

    @property
    def has_warnings(self) -> bool:
        return any(d.kind == "warning" for d in self.items)

    def format(self, use_color: bool = True) -> str:
        """Render all diagnostics.

        use_color → ANSI colorize location/kind/code/markers
        """
        out: List[str] = []
        src_lines = self.source.splitlines() if self.source else None

        for d in self.items:
            filename = _display_path(d.filename or self.filename)
            loc = f"{filename}:{d.span.line}:{d.span.col}" if d.span else filename

            # Ensure message ends with period
            message = d.message if d.message.endswith('.') else f"{d.message}."
            code = f" [{d.code}]" if d.code else ""

            if use_color:
                color = _KIND_COLORS.get(d.kind, C.RED)
                kind = f"{C.BOLD}{color}{d.kind}{C.RESET}"
                if d.code:
                    code = f" [{C.DIM}{d.code}{C.RESET}]"
                head = f"{C.CYAN}{loc}{C.RESET}: {kind}{code}: {message}"
            else:
                head = f"{loc}: {d.kind}{code}: {message}"
            out.append(head)

            # ----- snippet block -----
            if d.span and src_lines is not None and 0 < d.span.line <= len(src_lines):
                line_text = src_lines[d.span.line - 1]
                start = max(1, d.span.col)
                caret = " " * (start - 1) + "^"
                if use_color:
                    caret = f"{_KIND_COLORS.get(d.kind, C.RED)}{caret}{C.RESET}"
                    out.append(f"{C.GRAY}  | {C.RESET}{line_text}")
                    out.append(f"{C.GRAY}  ` {C.RESET}{caret}")
                else:
                    out.append(f"  | {line_text}")
                    out.append(f"  ` {caret}")

        return "\n".join(out)

    def print(self, stream=None, use_color: Optional[bool] = None) -> None:
        """Print diagnostics to `stream` (default: sys.stderr).

        Color is auto-enabled for TTY unless NO_COLOR or TERM=dumb.
        """
        stream = stream or sys.stderr

        if use_color is None:
            is_tty = getattr(stream, "isatty", lambda: False)()
            no_color = os.getenv("NO_COLOR") is not None
            dumb = os.getenv("TERM") == "dumb"
            use_color = bool(is_tty and not no_color and not dumb)

        text = self.format(use_color=use_color)
        if text:
            print(text, file=stream)
