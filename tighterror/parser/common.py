"""Markup-independent construction of the specification tree.

Both front-ends decode their documents into plain Python values (``dict``,
``list``, ``str``, ``bool``, ...) and hand them to `SpecBuilder`. The YAML
front-end additionally attaches source spans to mappings and sequences via
`LocatedDict` and `LocatedList`; TOML documents carry none.

The builder enforces the document structure only. Naming rules are checked
later by the validator.
"""
from __future__ import annotations
from typing import Any, Dict, List, Optional

from tighterror.internals.errors import ERR, fail
from tighterror.internals.report import Span
from tighterror.spec import definitions as defs
from tighterror.spec import kws
from tighterror.spec.model import CategorySpec, ErrorSpec, MainSpec, ModuleSpec, Spec


class LocatedDict(dict):
    """A mapping that remembers where it and its keys were defined."""

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.span: Optional[Span] = None
        self.key_spans: Dict[Any, Span] = {}


class LocatedList(list):
    """A sequence that remembers where it and its items were defined."""

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.span: Optional[Span] = None
        self.item_spans: List[Optional[Span]] = []


def type_name(v: Any) -> str:
    if v is None:
        return "null"
    if isinstance(v, bool):
        return "a boolean"
    if isinstance(v, int):
        return "an integer"
    if isinstance(v, float):
        return "a float"
    if isinstance(v, str):
        return "a string"
    if isinstance(v, list):
        return "a list"
    if isinstance(v, dict):
        return "a mapping"
    return type(v).__name__


def span_of(obj: Any) -> Optional[Span]:
    return getattr(obj, "span", None)


def key_span(obj: Any, key: Any) -> Optional[Span]:
    spans = getattr(obj, "key_spans", None)
    if spans and key in spans:
        return spans[key]
    return span_of(obj)


def item_span(seq: Any, index: int) -> Optional[Span]:
    spans = getattr(seq, "item_spans", None)
    if spans and index < len(spans) and spans[index] is not None:
        return spans[index]
    return span_of(seq)


class SpecBuilder:
    """Builds a `Spec` out of a decoded markup document."""

    def build(self, doc: Any) -> Spec:
        if not isinstance(doc, dict):
            fail(ERR.BAD_VALUE_TYPE, span_of(doc), kw="<document>",
                 expected="a mapping", got=type_name(doc))

        for key in doc:
            self._check_key_type(doc, key)
            if not kws.is_root_kw(key):
                fail(ERR.BAD_ROOT_LEVEL_KEYWORD, key_span(doc, key), kw=key)

        obj = "the root object"
        self._check_exclusive(doc, kws.MODULE, kws.MODULES, obj)
        self._check_exclusive(doc, kws.CATEGORY, kws.CATEGORIES, obj)
        self._check_exclusive(doc, kws.ERRORS, kws.CATEGORIES, obj)

        main = self._main(doc[kws.MAIN]) if kws.MAIN in doc else MainSpec()

        if kws.MODULES in doc:
            for kw in (kws.CATEGORY, kws.CATEGORIES, kws.ERRORS):
                self._check_exclusive(doc, kws.MODULES, kw, obj)
            items = self._list(doc, kws.MODULES, obj)
            modules = [self._module(items, i, list_item=True) for i in range(len(items))]
        else:
            if kws.MODULE in doc:
                module = self._module_object(doc[kws.MODULE], key_span(doc, kws.MODULE),
                                             list_item=False)
            else:
                module = ModuleSpec(span=span_of(doc))
            self._fill_categories(module, doc, obj)
            modules = [module]

        return Spec(main=main, modules=modules)

    # ---- Objects ----

    def _main(self, v: Any) -> MainSpec:
        m = self._mapping(v, kws.MAIN)
        self._check_attributes(m, kws.MAIN_KWS, "MainObject")
        return MainSpec(
            output=self._opt_str(m, kws.OUTPUT),
            no_std=self._opt_bool(m, kws.NO_STD),
            separate_files=self._opt_bool(m, kws.SEPARATE_FILES),
            span=span_of(m),
        )

    def _module(self, items: list, index: int, list_item: bool) -> ModuleSpec:
        return self._module_object(items[index], item_span(items, index), list_item)

    def _module_object(self, v: Any, span: Optional[Span], list_item: bool) -> ModuleSpec:
        m = self._mapping(v, kws.MODULE, span)
        obj = "ModuleObject"
        if list_item:
            allowed = kws.MODULE_KWS
        else:
            allowed = tuple(k for k in kws.MODULE_KWS if k not in (kws.CATEGORIES, kws.ERRORS))
        self._check_attributes(m, allowed, obj)

        module = ModuleSpec(
            doc=self._opt_str(m, kws.DOC),
            err_doc=self._opt_str(m, kws.ERR_DOC),
            err_kind_doc=self._opt_str(m, kws.ERR_KIND_DOC),
            err_cat_doc=self._opt_str(m, kws.ERR_CAT_DOC),
            err_name=self._opt_str(m, kws.ERR_NAME),
            err_kind_name=self._opt_str(m, kws.ERR_KIND_NAME),
            err_cat_name=self._opt_str(m, kws.ERR_CAT_NAME),
            result_from_err=self._opt_bool(m, kws.RESULT_FROM_ERR),
            result_from_err_kind=self._opt_bool(m, kws.RESULT_FROM_ERR_KIND),
            error_trait=self._opt_bool(m, kws.ERROR_TRAIT),
            flat_kinds=self._opt_bool(m, kws.FLAT_KINDS),
            doc_from_display=self._opt_bool(m, kws.DOC_FROM_DISPLAY),
            span=span_of(m) or span,
        )

        name = self._opt_str(m, kws.NAME)
        if list_item:
            if name is None:
                fail(ERR.MISSING_ATTRIBUTE, module.span, obj=obj, attr=kws.NAME)
            self._check_exclusive(m, kws.ERRORS, kws.CATEGORIES, obj)
            module.name = name
            self._fill_categories(module, m, f"module '{name}'")
        elif name is not None:
            module.name = name

        return module

    def _fill_categories(self, module: ModuleSpec, m: dict, obj: str) -> None:
        """Fill `module.categories` from `categories` or `category`/`errors` of `m`."""
        if kws.CATEGORIES in m:
            items = self._list(m, kws.CATEGORIES, obj)
            module.categories = [self._category(items, i) for i in range(len(items))]
            return

        if kws.ERRORS not in m:
            fail(ERR.MISSING_ATTRIBUTE, span_of(m), obj=obj, attr=kws.ERRORS)

        if kws.CATEGORY in m:
            cat = self._implicit_category(m[kws.CATEGORY], key_span(m, kws.CATEGORY))
        else:
            cat = CategorySpec(name=defs.IMPLICIT_CATEGORY_NAME, span=key_span(m, kws.ERRORS))
        cat.errors = self._errors(m, f"category '{cat.name}'")
        module.categories = [cat]

    def _implicit_category(self, v: Any, span: Optional[Span]) -> CategorySpec:
        c = self._mapping(v, kws.CATEGORY, span)
        obj = "CategoryObject"
        if kws.ERRORS in c:
            fail(ERR.BAD_OBJECT_ATTRIBUTE, key_span(c, kws.ERRORS), attr=kws.ERRORS,
                 obj=f"the root-level '{kws.CATEGORY}' object")
        self._check_attributes(c, kws.CATEGORY_KWS, obj)
        name = self._opt_str(c, kws.NAME)
        return CategorySpec(
            name=defs.IMPLICIT_CATEGORY_NAME if name is None else name,
            doc=self._opt_str(c, kws.DOC),
            doc_from_display=self._opt_bool(c, kws.DOC_FROM_DISPLAY),
            span=span_of(c) or span,
        )

    def _category(self, items: list, index: int) -> CategorySpec:
        c = self._mapping(items[index], kws.CATEGORIES, item_span(items, index))
        obj = "CategoryObject"
        self._check_attributes(c, kws.CATEGORY_KWS, obj)
        span = span_of(c) or item_span(items, index)
        name = self._opt_str(c, kws.NAME)
        if name is None:
            fail(ERR.MISSING_ATTRIBUTE, span, obj=obj, attr=kws.NAME)
        if kws.ERRORS not in c:
            fail(ERR.MISSING_ATTRIBUTE, span, obj=f"category '{name}'", attr=kws.ERRORS)
        return CategorySpec(
            name=name,
            doc=self._opt_str(c, kws.DOC),
            doc_from_display=self._opt_bool(c, kws.DOC_FROM_DISPLAY),
            errors=self._errors(c, f"category '{name}'"),
            span=span,
        )

    def _errors(self, m: dict, obj: str) -> List[ErrorSpec]:
        items = self._list(m, kws.ERRORS, obj)
        return [self._error(items, i) for i in range(len(items))]

    def _error(self, items: list, index: int) -> ErrorSpec:
        v = items[index]
        span = item_span(items, index)
        if isinstance(v, str):
            return ErrorSpec(name=v, span=span)
        if not isinstance(v, dict):
            fail(ERR.BAD_VALUE_TYPE, span, kw=kws.ERRORS,
                 expected="a list of strings or mappings", got=f"an item of {type_name(v)}")
        if not v:
            fail(ERR.MISSING_ATTRIBUTE, span, obj="ErrorObject", attr=kws.NAME)
        if self._is_short_mapping(v):
            return self._short_error(v, span)
        return self._long_error(v, span)

    @staticmethod
    def _is_short_mapping(m: dict) -> bool:
        if len(m) != 1:
            return False
        key = next(iter(m))
        return isinstance(key, str) and not kws.is_any_kw(key)

    def _short_error(self, m: dict, span: Optional[Span]) -> ErrorSpec:
        name, display = next(iter(m.items()))
        if not isinstance(display, str):
            fail(ERR.BAD_VALUE_TYPE, key_span(m, name), kw=name,
                 expected="a display string", got=type_name(display))
        return ErrorSpec(name=name, display=display, span=key_span(m, name) or span)

    def _long_error(self, m: dict, span: Optional[Span]) -> ErrorSpec:
        obj = "ErrorObject"
        self._check_attributes(m, kws.ERROR_KWS, obj)
        span = span_of(m) or span
        name = self._opt_str(m, kws.NAME)
        if name is None:
            fail(ERR.MISSING_ATTRIBUTE, span, obj=obj, attr=kws.NAME)
        return ErrorSpec(
            name=name,
            display=self._opt_str(m, kws.DISPLAY),
            doc=self._opt_str(m, kws.DOC),
            doc_from_display=self._opt_bool(m, kws.DOC_FROM_DISPLAY),
            variant_type=self._opt_bool(m, kws.VARIANT_TYPE),
            variant_type_name=self._opt_str(m, kws.VARIANT_TYPE_NAME),
            span=span,
        )

    # ---- Values ----

    @staticmethod
    def _check_key_type(m: dict, key: Any) -> None:
        if not isinstance(key, str):
            fail(ERR.BAD_KEYWORD_TYPE, key_span(m, key), kw=key)

    def _check_attributes(self, m: dict, allowed: tuple, obj: str) -> None:
        for key in m:
            self._check_key_type(m, key)
            if key not in allowed:
                fail(ERR.BAD_OBJECT_ATTRIBUTE, key_span(m, key), attr=key, obj=obj)

    @staticmethod
    def _check_exclusive(m: dict, a: str, b: str, obj: str) -> None:
        if a in m and b in m:
            fail(ERR.MUTUALLY_EXCLUSIVE_KEYWORDS, key_span(m, b), a=a, b=b, obj=obj)

    @staticmethod
    def _mapping(v: Any, kw: str, span: Optional[Span] = None) -> dict:
        if not isinstance(v, dict):
            fail(ERR.BAD_VALUE_TYPE, span_of(v) or span, kw=kw,
                 expected="a mapping", got=type_name(v))
        return v

    @staticmethod
    def _list(m: dict, kw: str, obj: str) -> list:
        v = m[kw]
        if not isinstance(v, list):
            fail(ERR.BAD_VALUE_TYPE, key_span(m, kw), kw=kw,
                 expected="a list", got=type_name(v))
        if not v:
            fail(ERR.EMPTY_LIST, key_span(m, kw), kw=kw, obj=obj)
        return v

    @staticmethod
    def _opt_str(m: dict, kw: str) -> Optional[str]:
        if kw not in m:
            return None
        v = m[kw]
        if not isinstance(v, str):
            fail(ERR.BAD_VALUE_TYPE, key_span(m, kw), kw=kw,
                 expected="a string", got=type_name(v))
        return v

    @staticmethod
    def _opt_bool(m: dict, kw: str) -> Optional[bool]:
        if kw not in m:
            return None
        v = m[kw]
        if not isinstance(v, bool):
            fail(ERR.BAD_VALUE_TYPE, key_span(m, kw), kw=kw,
                 expected="a boolean", got=type_name(v))
        return v
