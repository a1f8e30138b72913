import io

from tighterror.internals.report import Reporter, Span


def test_format_with_snippet():
    r = Reporter("a: 1\nb: 2\n", "<input>")
    r.error("TE0001", "bad", Span(2, 1, 2, 2))
    assert r.format(use_color=False) == "<input>:2:1: error [TE0001]: bad.\n  | b: 2\n  ` ^"


def test_format_without_span_or_code():
    r = Reporter(None, "<spec>")
    r.note("read specification.")
    r.warn("TE0001", "careful")
    assert r.format(use_color=False).splitlines() == [
        "<spec>: note: read specification.",
        "<spec>: warning [TE0001]: careful.",
    ]
    assert r.has_warnings
    assert not r.has_errors


def test_span_outside_source_has_no_snippet():
    r = Reporter("a: 1\n", "<input>")
    r.error("TE0001", "bad.", Span(7, 3, 7, 4))
    assert r.format(use_color=False) == "<input>:7:3: error [TE0001]: bad."


def test_print_without_tty_is_plain():
    r = Reporter("x\n", "<input>")
    r.error("TE0101", "empty", Span(1, 1, 1, 2))
    out = io.StringIO()
    r.print(out)
    assert "\x1b[" not in out.getvalue()
    assert out.getvalue().startswith("<input>:1:1: error [TE0101]: empty.")


def test_print_nothing():
    out = io.StringIO()
    Reporter().print(out)
    assert out.getvalue() == ""
