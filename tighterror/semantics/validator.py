"""Validation of parsed specifications.

`validate` rejects any specification that would produce a malformed
module. Checks run per module in a fixed order: list shapes, identifier
emptiness and characters, identifier case, reserved words, type-name
overrides and collisions, and finally name uniqueness, ending with the
module name against the modules before it. The first violation raises
`TighterrorError`.
"""
from __future__ import annotations
import builtins
import keyword
import re
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional

from tighterror.internals import casing
from tighterror.internals.errors import ERR, fail
from tighterror.internals.report import Span
from tighterror.spec import definitions as defs
from tighterror.spec import kws
from tighterror.spec.model import ModuleSpec, Spec

UPPER_CAMEL = "UpperCamelCase"
LOWER_SNAKE = "lower_snake_case"

_CHARSETS = {
    UPPER_CAMEL: (re.compile(r"^[A-Za-z][A-Za-z0-9]*$"), "ASCII letters and digits, starting with a letter"),
    LOWER_SNAKE: (re.compile(r"^[A-Za-z][A-Za-z0-9_]*$"), "ASCII letters, digits and '_', starting with a letter"),
}

_CASE_CHECKS: dict[str, Callable[[str], bool]] = {
    UPPER_CAMEL: casing.is_upper_camel,
    LOWER_SNAKE: casing.is_lower_snake,
}

# Name of the unittest.TestCase class embedded into generated modules
TESTS_CLASS_NAME = "TighterrorTests"

# UpperCamel identifiers defined at the top level of a generated module
TOP_LEVEL_IDENTS = frozenset({
    defs.DEFAULT_ERR_NAME,
    defs.DEFAULT_ERR_KIND_NAME,
    defs.DEFAULT_ERR_CAT_NAME,
    TESTS_CLASS_NAME,
})

# Top-level classes and nested modules must not shadow these
_BUILTIN_NAMES = frozenset(dir(builtins))

_CANONICAL = {
    kws.ERR_NAME: defs.DEFAULT_ERR_NAME,
    kws.ERR_KIND_NAME: defs.DEFAULT_ERR_KIND_NAME,
    kws.ERR_CAT_NAME: defs.DEFAULT_ERR_CAT_NAME,
}


@dataclass(frozen=True)
class _Name:
    what: str
    name: str
    case: str
    span: Optional[Span]
    module: bool = False
    top_level: bool = False


def validate(spec: Spec) -> None:
    """Validate `spec` in place.

    Raises:
        TighterrorError: On the first violated rule.
    """
    if not spec.modules:
        fail(ERR.EMPTY_LIST, kw=kws.MODULES, obj="the specification")

    seen: dict[str, str] = {}
    for module in spec.modules:
        validate_module(module)
        _check_module_name(module, seen)


def validate_module(module: ModuleSpec) -> None:
    _check_shape(module)

    names = _module_names(module)
    for check in (_check_empty, _check_chars, _check_case, _check_reserved):
        for n in names:
            check(n)

    _check_overrides(module)
    _check_collisions(module)
    _check_uniqueness(module)


# ---- Step 1: shape ----

def _check_shape(module: ModuleSpec) -> None:
    if not module.categories:
        fail(ERR.EMPTY_LIST, module.span, kw=kws.CATEGORIES, obj=f"module '{module.name}'")
    for cat in module.categories:
        if not cat.errors:
            fail(ERR.EMPTY_LIST, cat.span, kw=kws.ERRORS, obj=f"category '{cat.name}'")


def _module_names(module: ModuleSpec) -> List[_Name]:
    names = [_Name("module", module.name, LOWER_SNAKE, module.span, module=True, top_level=True)]
    for kw in (kws.ERR_NAME, kws.ERR_KIND_NAME, kws.ERR_CAT_NAME):
        value = getattr(module, kw)
        if value is not None:
            names.append(_Name(kw, value, UPPER_CAMEL, module.span, top_level=True))
    for cat in module.categories:
        names.append(_Name("category", cat.name, UPPER_CAMEL, cat.span))
        for err in cat.errors:
            names.append(_Name("error", err.name, UPPER_CAMEL, err.span,
                               top_level=err.has_variant_type and err.variant_type_name is None))
            if err.variant_type_name is not None:
                names.append(_Name("variant type", err.variant_type_name, UPPER_CAMEL, err.span,
                                   top_level=err.has_variant_type))
    return names


# ---- Steps 2-4: identifiers ----

def _check_empty(n: _Name) -> None:
    if not n.name:
        fail(ERR.EMPTY_IDENTIFIER, n.span, what=n.what)


def _check_chars(n: _Name) -> None:
    rx, allowed = _CHARSETS[n.case]
    if not rx.match(n.name):
        fail(ERR.BAD_IDENTIFIER_CHARACTERS, n.span, what=n.what, name=n.name, allowed=allowed)


def _check_case(n: _Name) -> None:
    if not _CASE_CHECKS[n.case](n.name):
        fail(ERR.BAD_IDENTIFIER_CASE, n.span, what=n.what, name=n.name, case=n.case)


def _check_reserved(n: _Name) -> None:
    # the implicit module name `errors` is a keyword; modules skip that set
    if keyword.iskeyword(n.name) or (not n.module and kws.is_any_kw(n.name)):
        fail(ERR.BAD_NAME, n.span, what=n.what, name=n.name)
    if n.top_level and n.name in _BUILTIN_NAMES:
        fail(ERR.BAD_NAME, n.span, what=n.what, name=n.name)


# ---- Step 5: generated identifiers ----

def _check_overrides(module: ModuleSpec) -> None:
    for kw, canonical in _CANONICAL.items():
        value = getattr(module, kw)
        if value is None or value == canonical:
            continue
        if value in TOP_LEVEL_IDENTS:
            fail(ERR.BAD_MODULE_IDENTIFIER, module.span, what=kw, name=value)


def _check_collisions(module: ModuleSpec) -> None:
    types = [
        (kws.ERR_NAME, module.resolved_err_name),
        (kws.ERR_KIND_NAME, module.resolved_err_kind_name),
        (kws.ERR_CAT_NAME, module.resolved_err_cat_name),
    ]
    for i, (kw, name) in enumerate(types):
        for other_kw, other in types[i + 1:]:
            if name == other:
                fail(ERR.NAME_COLLISION, module.span, what=kw, name=name,
                     other=f"the '{other_kw}' of module '{module.name}'")

    for _, err in module.iter_errors():
        if not err.has_variant_type:
            continue
        vt_name = err.resolved_variant_type_name
        for kw, name in types:
            if vt_name == name:
                fail(ERR.NAME_COLLISION, err.span, what="variant type", name=vt_name,
                     other=f"the '{kw}' of module '{module.name}'")
        if vt_name == TESTS_CLASS_NAME:
            fail(ERR.NAME_COLLISION, err.span, what="variant type", name=vt_name,
                 other="the generated test case class")


# ---- Step 6: uniqueness ----

def _check_uniqueness(module: ModuleSpec) -> None:
    mod = f"module '{module.name}'"
    _check_unique(((c.name, c.span) for c in module.categories), "category", mod)
    for cat in module.categories:
        _check_unique(((e.name, e.span) for e in cat.errors), "error", f"category '{cat.name}'")
    if module.resolved_flat_kinds:
        _check_unique(((e.name, e.span) for _, e in module.iter_errors()), "error", mod)
    _check_unique(
        ((e.resolved_variant_type_name, e.span) for _, e in module.iter_errors() if e.has_variant_type),
        "variant type", mod)


def _check_unique(items: Iterable[tuple[str, Optional[Span]]], what: str, scope: str) -> None:
    seen: set[str] = set()
    for name, span in items:
        lower = name.lower()
        if lower in seen:
            fail(ERR.NON_UNIQUE_NAME, span, what=what, name=name, scope=scope)
        seen.add(lower)


def _check_module_name(module: ModuleSpec, seen: dict[str, str]) -> None:
    """Check `module` against the names of the modules before it.

    Nested output re-exports each test class under the UpperCamel form of
    its module name, so `a1` and `a_1` collide as well.
    """
    name = module.name
    key = casing.to_upper_camel(name).lower()
    prev = seen.get(key)
    if prev is not None:
        if prev.lower() == name.lower():
            fail(ERR.NON_UNIQUE_NAME, module.span, what="module", name=name, scope="the specification")
        fail(ERR.NAME_COLLISION, module.span, what="module", name=name,
             other=f"module '{prev}' in generated test class names")
    seen[key] = name
