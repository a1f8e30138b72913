"""Specification linter."""
from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional, Union

from tighterror.internals.errors import TighterrorError
from tighterror.internals.report import Reporter, Span
from tighterror.compiler.pipeline import load_spec
from tighterror.spec.model import Spec


class LintLevel(str, Enum):
    ERROR = "error"
    WARNING = "warning"
    NOTICE = "notice"


@dataclass(frozen=True)
class LintMsg:
    level: LintLevel
    msg: str
    code: str = ""
    span: Optional[Span] = None


@dataclass
class LintReport:
    """Messages produced while checking a specification file."""
    messages: List[LintMsg] = field(default_factory=list)
    filename: str = "<input>"

    def add(self, level: LintLevel, msg: str, span: Optional[Span] = None, code: str = "") -> None:
        self.messages.append(LintMsg(level, msg, code, span))

    def has_errors(self) -> bool:
        return any(m.level == LintLevel.ERROR for m in self.messages)

    def is_empty(self) -> bool:
        return not self.messages

    def to_reporter(self, source: Optional[str] = None) -> Reporter:
        r = Reporter(source, self.filename)
        for m in self.messages:
            if m.level == LintLevel.ERROR:
                r.error(m.code, m.msg, m.span)
            elif m.level == LintLevel.WARNING:
                r.warn(m.code, m.msg, m.span)
            else:
                r.note(m.msg, m.span)
        return r


def lint(path: Optional[Union[str, Path]] = None) -> LintReport:
    """Check a specification file without generating code.

    A parse or validation failure is reported as a single error. A valid
    specification is additionally checked for undocumented kinds.
    """
    report = LintReport(filename=str(path) if path is not None else "<input>")
    try:
        spec = load_spec(path)
    except TighterrorError as e:
        if e.filename:
            report.filename = e.filename
        report.add(LintLevel.ERROR, e.text, e.span, e.code)
        return report

    report.filename = spec.filename
    _lint_docs(spec, report)
    return report


def _lint_docs(spec: Spec, report: LintReport) -> None:
    for module in spec.modules:
        for cat, err in module.iter_errors():
            if err.doc is not None:
                continue
            where = f"error '{err.name}' of category '{cat.name}' in module '{module.name}'"
            if err.display is None:
                report.add(LintLevel.WARNING, f"{where} has neither a doc nor a display string",
                           err.span)
            elif not module.resolve_doc_from_display(cat, err):
                report.add(LintLevel.NOTICE,
                           f"{where} has a display string but no doc; "
                           f"set 'doc_from_display' to document it", err.span)
