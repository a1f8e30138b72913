"""Python rendering of symbolic output units.

The emitter only translates nodes into syntax; it keeps the item order of
the symbolic tree and the table indices computed by the module builder.
"""
from __future__ import annotations
from contextlib import contextmanager
from typing import Iterator, List

from tighterror.backend.symbolic import (
    CategoryCheck, CategoryConst, CategoryType, DisplayCheck, ErrorDisplayCheck,
    ErrorType, FromValueCheck, InvalidValueCheck, KindConst, KindDisplayCheck,
    KindType, LayoutConstants, LookupTables, NameCheck, Namespace, OutputUnit,
    SymbolicModule, TestSuite, UniquenessCheck, ValueCheck, VariantType,
    VariantTypeCheck,
)
from tighterror.internals import casing
from tighterror.internals.errors import raise_internal_error
from tighterror.spec import definitions as defs

HEADER = "# Code generated by tighterror. DO NOT EDIT."
RT = "_rt"
UNITTEST = "_unittest"


class _Writer:
    """Line buffer with indentation."""

    def __init__(self) -> None:
        self.lines: List[str] = []
        self.depth = 0

    def line(self, text: str = "") -> None:
        self.lines.append("    " * self.depth + text if text else "")

    def blank(self, n: int = 1) -> None:
        for _ in range(n):
            self.line()

    @contextmanager
    def indent(self) -> Iterator[None]:
        self.depth += 1
        try:
            yield
        finally:
            self.depth -= 1

    @contextmanager
    def block(self, header: str) -> Iterator[None]:
        self.line(header)
        with self.indent():
            yield

    def docstring(self, text: str) -> None:
        if not text:
            return
        body = "".join(_escape_char(c) for c in text).replace('"""', '\\"\\"\\"')
        if body.endswith('"'):
            body = body[:-1] + '\\"'
        lines = body.split("\n")
        if len(lines) == 1:
            self.line(f'"""{lines[0]}"""')
            return
        self.line(f'"""{lines[0]}')
        for ln in lines[1:]:
            self.line(ln)
        self.line('"""')

    def text(self) -> str:
        while self.lines and not self.lines[-1]:
            self.lines.pop()
        return "\n".join(self.lines) + "\n"


def _escape_char(c: str) -> str:
    # docstrings keep line breaks and tabs; other unprintables become escapes
    if c == "\\":
        return "\\\\"
    if c in "\n\t" or c.isprintable():
        return c
    code = ord(c)
    if code < 0x100:
        return f"\\x{code:02x}"
    if code < 0x10000:
        return f"\\u{code:04x}"
    return f"\\U{code:08x}"


def render_unit(unit: OutputUnit) -> str:
    """Render `unit` into the source text of one Python file."""
    w = _Writer()
    has_tests = any(m.tests is not None for m in unit.modules)

    w.line(HEADER)
    w.docstring(unit.doc or defs.DEFAULT_MODULE_DOC)
    if has_tests:
        w.line(f"import unittest as {UNITTEST}")
        w.blank()
    w.line(f"from tighterror import runtime as {RT}")

    if unit.nested:
        _nested_modules(w, unit)
    else:
        for mod in unit.modules:
            _module_body(w, mod)

    if has_tests:
        w.blank(2)
        with w.block('if __name__ == "__main__":'):
            w.line(f"{UNITTEST}.main()")
    return w.text()


def _nested_modules(w: _Writer, unit: OutputUnit) -> None:
    for mod in unit.modules:
        w.blank(2)
        with w.block(f"def _build_{mod.name}():"):
            w.docstring(f"Definitions of the `{mod.name}` module.")
            _module_body(w, mod)
            w.blank()
            w.line(f"return {RT}.namespace_module(__name__ + {'.' + mod.name!r}, {mod.doc!r}, locals())")

    w.blank(2)
    for mod in unit.modules:
        w.line(f"{mod.name} = _build_{mod.name}()")
        if mod.tests is not None:
            w.line(f"{mod.tests.name}{casing.to_upper_camel(mod.name)} = {mod.name}.{mod.tests.name}")


def _module_body(w: _Writer, mod: SymbolicModule) -> None:
    _sep(w)
    _layout(w, mod.layout)
    w.blank()
    _tables(w, mod.tables)
    _category_type(w, mod.category_type)
    _kind_type(w, mod.kind_type)
    _error_type(w, mod.error_type)
    _namespace(w, mod.categories, mod.category_type.name)
    _namespace(w, mod.kinds, mod.kind_type.name)
    for vt in mod.variant_types:
        _variant_type(w, vt)
    if mod.tests is not None:
        _tests(w, mod, mod.tests)


def _sep(w: _Writer) -> None:
    w.blank(2 if w.depth == 0 else 1)


# ---- Private constants ----

def _layout(w: _Writer, c: LayoutConstants) -> None:
    w.line(f"_REPR_BITS = {c.repr_bits}")
    w.line(f"_KIND_BITS = {c.kind_bits}")
    w.line(f"_CAT_BITS = {c.cat_bits}")
    w.line(f"_VAR_BITS = {c.var_bits}")
    w.line(f"_CAT_MASK = {c.cat_mask:#x}")
    w.line(f"_VAR_MASK = {c.var_mask:#x}")
    w.line(f"_KIND_MASK = {c.kind_mask:#x}")
    w.line(f"_CAT_MAX = {c.cat_max}")
    w.line(f"_VAR_MAXES = {_tuple_literal(c.var_maxes)}")


def _tables(w: _Writer, t: LookupTables) -> None:
    w.line("# indexed by category index")
    with w.block("_CAT_NAMES = ("):
        for name in t.category_names:
            w.line(f"{name!r},")
    w.line(")")
    w.blank()
    w.line("# indexed by category index, then variant index")
    _nested_table(w, "_KIND_NAMES", t.kind_names)
    w.blank()
    _nested_table(w, "_KIND_DISPLAYS", t.kind_displays)


def _nested_table(w: _Writer, ident: str, rows: tuple[tuple[str, ...], ...]) -> None:
    with w.block(f"{ident} = ("):
        for row in rows:
            with w.block("("):
                for item in row:
                    w.line(f"{item!r},")
            w.line("),")
    w.line(")")


def _tuple_literal(values) -> str:
    if len(values) == 1:
        return f"({values[0]},)"
    return "(" + ", ".join(str(v) for v in values) + ")"


# ---- Types ----

def _category_type(w: _Writer, t: CategoryType) -> None:
    _sep(w)
    with w.block(f"class {t.name}({RT}.TightErrorCategory):"):
        w.docstring(t.doc)
        w.blank()
        w.line("__slots__ = ()")
        w.blank()
        w.line("BITS = _CAT_BITS")
        w.line("REPR_BITS = _REPR_BITS")
        w.blank()
        with w.block("def name(self) -> str:"):
            w.docstring("Returns the name of the category.")
            w.line("return _CAT_NAMES[self._v]")


def _kind_type(w: _Writer, t: KindType) -> None:
    if t.checks_category:
        cat_expr = "(self._v & _CAT_MASK) >> _VAR_BITS"
    else:
        cat_expr = "0"

    _sep(w)
    with w.block(f"class {t.name}({RT}.TightErrorKind):"):
        w.docstring(t.doc)
        w.blank()
        w.line("__slots__ = ()")
        w.blank()
        w.line("BITS = _KIND_BITS")
        w.line("REPR_BITS = _REPR_BITS")
        w.blank()
        with w.block(f"def category(self) -> {t.category_type}:"):
            w.docstring("Returns the category of the kind.")
            w.line(f"return {t.category_type}._new({cat_expr})")
        w.blank()
        with w.block("def name(self) -> str:"):
            w.docstring("Returns the name of the kind.")
            w.line(f"return _KIND_NAMES[{cat_expr}][self._v & _VAR_MASK]")
        w.blank()
        with w.block("def _display(self) -> str:"):
            w.line(f"return _KIND_DISPLAYS[{cat_expr}][self._v & _VAR_MASK]")
        w.blank()
        with w.block("def value(self) -> int:"):
            w.docstring(
                "Returns the integer value of the kind.\n\n"
                "Values follow the declaration order of categories and errors in\n"
                "the specification and change when those are reordered."
            )
            w.line("return self._v")
        w.blank()
        w.line("@classmethod")
        with w.block(f'def from_value(cls, value: int) -> "{t.name} | None":'):
            w.docstring("Returns the kind encoded by `value`, or None if there is none.")
            with w.block("if value < 0 or value > _KIND_MASK:"):
                w.line("return None")
            w.line("cat = (value & _CAT_MASK) >> _VAR_BITS")
            w.line("var = value & _VAR_MASK")
            cmp = "<=" if t.checks_category else "=="
            with w.block(f"if cat {cmp} _CAT_MAX and var <= _VAR_MAXES[cat]:"):
                w.line("return cls._new(value)")
            w.line("return None")
        w.blank()
        with w.block(f'def into_error(self, location: "{RT}.Location | None" = None) -> "{t.error_type}":'):
            w.docstring("Converts the kind into an error.")
            w.line(f"return {t.error_type}(self, location)")
        if t.result_from_kind:
            w.blank()
            with w.block(f"def into_result(self) -> {RT}.Err:"):
                w.docstring(f"Converts the kind into an `Err` result holding a `{t.error_type}`.")
                w.line(f"return {RT}.Err({t.error_type}(self))")


def _error_type(w: _Writer, t: ErrorType) -> None:
    bases = f"{RT}.TightError, Exception" if t.error_trait else f"{RT}.TightError"
    _sep(w)
    with w.block(f"class {t.name}({bases}):"):
        w.docstring(t.doc)
        w.blank()
        w.line(f"_KIND_TYPE = {t.kind_type}")
        w.blank()
        with w.block(f"def kind(self) -> {t.kind_type}:"):
            w.docstring("Returns the error kind.")
            w.line("return self._kind")
        w.blank()
        with w.block(f"def category(self) -> {t.category_type}:"):
            w.docstring("Returns the error category.")
            w.line("return self._kind.category()")
        if t.result_from_err:
            w.blank()
            with w.block(f"def into_result(self) -> {RT}.Err:"):
                w.docstring("Converts the error into an `Err` result.")
                w.line(f"return {RT}.Err(self)")


# ---- Constants ----

def _namespace(w: _Writer, ns: Namespace, type_name: str) -> None:
    _sep(w)
    _namespace_class(w, ns, type_name)


def _namespace_class(w: _Writer, ns: Namespace, type_name: str) -> None:
    with w.block(f"class {ns.ident}:"):
        w.docstring(ns.doc or f"`{ns.ident}` constants.")
        for const in ns.consts:
            w.blank()
            _const(w, const, type_name)
        for child in ns.children:
            w.blank()
            _namespace_class(w, child, type_name)


def _const(w: _Writer, const, type_name: str) -> None:
    if isinstance(const, CategoryConst):
        value = const.index
    elif isinstance(const, KindConst):
        value = const.value
    else:
        raise_internal_error("INTERNAL_UNKNOWN_ITEM", item=type(const).__name__)
    w.line(f"{const.ident} = {type_name}._new({value})")
    w.docstring(const.doc)


def _variant_type(w: _Writer, vt: VariantType) -> None:
    bases = f"{RT}.VariantType, Exception" if vt.error_trait else f"{RT}.VariantType"
    _sep(w)
    with w.block(f"class {vt.ident}({bases}):"):
        w.docstring(vt.doc)
        w.blank()
        w.line(f"CATEGORY = {vt.category.path}")
        w.line(f"KIND = {vt.kind.path}")
        w.line(f"NAME = {vt.name!r}")
        w.line(f"_ERROR_TYPE = {vt.error_type}")


# ---- Tests ----

def _tests(w: _Writer, mod: SymbolicModule, suite: TestSuite) -> None:
    _sep(w)
    with w.block(f"class {suite.name}({UNITTEST}.TestCase):"):
        w.docstring(f"Consistency tests of the `{mod.name}` error kinds.")
        for case in suite.cases:
            w.blank()
            with w.block(f"def {case.name}(self):"):
                for check in case.checks:
                    _check(w, mod, check)


def _check(w: _Writer, mod: SymbolicModule, check) -> None:
    kind_t = mod.kind_type.name
    err_t = mod.error_type.name

    if isinstance(check, NameCheck):
        w.line(f"self.assertEqual({check.target.path}.name(), {check.expected!r})")
    elif isinstance(check, DisplayCheck):
        w.line(f"self.assertEqual(str({check.target.path}), {check.expected!r})")
    elif isinstance(check, KindDisplayCheck):
        w.line(f"self.assertEqual({check.target.path}._display(), {check.expected!r})")
    elif isinstance(check, ValueCheck):
        w.line(f"self.assertEqual({check.target.path}.value(), {check.expected})")
    elif isinstance(check, UniquenessCheck):
        suffix = ".value()" if check.by_value else ""
        with w.block("items = ["):
            for ref in check.targets:
                w.line(f"{ref.path}{suffix},")
        w.line("]")
        w.line("self.assertEqual(len(set(items)), len(items))")
    elif isinstance(check, CategoryCheck):
        w.line(f"self.assertEqual({check.kind.path}.category(), {check.category.path})")
    elif isinstance(check, FromValueCheck):
        w.line(f"self.assertEqual({kind_t}.from_value({check.kind.path}.value()), {check.kind.path})")
    elif isinstance(check, InvalidValueCheck):
        with w.block(f"for value in {_tuple_literal(check.values)}:"):
            w.line(f"self.assertIsNone({kind_t}.from_value(value))")
    elif isinstance(check, ErrorDisplayCheck):
        w.line(f"self.assertEqual(str({err_t}({check.kind.path})), {check.expected!r})")
    elif isinstance(check, VariantTypeCheck):
        w.line(f"v = {check.variant}()")
        w.line(f"self.assertEqual(v.kind(), {check.kind.path})")
        w.line(f"self.assertEqual(v.category(), {check.category.path})")
        w.line(f"self.assertEqual(v.name(), {check.name!r})")
        w.line(f"self.assertEqual(v.into_error(), {err_t}({check.kind.path}))")
        w.line(f"self.assertEqual(v.into_result(), {RT}.Err({err_t}({check.kind.path})))")
    else:
        raise_internal_error("INTERNAL_UNKNOWN_ITEM", item=type(check).__name__)
