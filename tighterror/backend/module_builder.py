"""Construction of the symbolic output module."""
from __future__ import annotations
from typing import List

from tighterror.backend.bits import BitPlan
from tighterror.backend.refs import (
    CATEGORIES_NS, KINDS_NS, category_ref, item_doc, kind_display, kind_ref,
)
from tighterror.backend.symbolic import (
    CategoryConst, CategoryType, ErrorType, KindConst, KindType,
    LayoutConstants, LookupTables, Namespace, SymbolicModule, VariantType,
)
from tighterror.backend.unit_tests import build_test_suite
from tighterror.internals.errors import raise_internal_error
from tighterror.semantics.symbols import CategorySymbol, ErrorSymbol, SymbolTable
from tighterror.spec import definitions as defs
from tighterror.spec.model import MainSpec, ModuleSpec


def build_module(main: MainSpec, module: ModuleSpec, bits: BitPlan,
                 symbols: SymbolTable, test: bool) -> SymbolicModule:
    """Build the symbolic module of a validated module.

    Args:
        main: Global options of the specification.
        module: The validated module.
        bits: Bit layout computed for `module`.
        symbols: Symbol table built for `module`.
        test: Whether to include the canned unit tests.

    Returns:
        The symbolic module. The function is pure; equal inputs give equal
        trees.
    """
    _check_preconditions(module, bits, symbols)

    error_trait = module.error_trait_enabled(main)
    err_name = module.resolved_err_name
    kind_name = module.resolved_err_kind_name
    cat_name = module.resolved_err_cat_name

    category_type = CategoryType(
        name=cat_name,
        doc=module.err_cat_doc if module.err_cat_doc is not None else defs.DEFAULT_ERR_CAT_DOC,
        repr_type=bits.repr_type,
    )
    kind_type = KindType(
        name=kind_name,
        doc=module.err_kind_doc if module.err_kind_doc is not None else defs.DEFAULT_ERR_KIND_DOC,
        repr_type=bits.repr_type,
        category_type=cat_name,
        error_type=err_name,
        checks_category=bits.category_bits > 0,
        result_from_kind=module.resolved_result_from_err_kind,
    )
    error_type = ErrorType(
        name=err_name,
        doc=module.err_doc if module.err_doc is not None else defs.DEFAULT_ERR_DOC,
        kind_type=kind_name,
        category_type=cat_name,
        error_trait=error_trait,
        result_from_err=module.resolved_result_from_err,
    )

    tests = None
    if test:
        tests = build_test_suite(main, module, bits, symbols)

    return SymbolicModule(
        name=module.name,
        doc=module.doc if module.doc is not None else "",
        bits=bits,
        layout=_layout(bits),
        tables=_tables(symbols),
        category_type=category_type,
        kind_type=kind_type,
        error_type=error_type,
        categories=_categories_namespace(symbols),
        kinds=_kinds_namespace(module, bits, symbols),
        variant_types=_variant_types(module, symbols, err_name, error_trait),
        tests=tests,
    )


def _check_preconditions(module: ModuleSpec, bits: BitPlan, symbols: SymbolTable) -> None:
    if len(symbols.categories) != len(module.categories):
        raise_internal_error("INTERNAL_INVARIANT",
                             message=f"symbol table of module '{module.name}' is out of date")
    if len(bits.variant_maxes) != len(module.categories):
        raise_internal_error("INTERNAL_INVARIANT",
                             message=f"bit plan of module '{module.name}' is out of date")
    for cat in symbols.categories:
        if len(cat.errors) - 1 != bits.variant_maxes[cat.index]:
            raise_internal_error("INTERNAL_INVARIANT",
                                 message=f"category '{cat.name}' does not match the bit plan")


def _layout(bits: BitPlan) -> LayoutConstants:
    return LayoutConstants(
        repr_bits=bits.repr_width,
        kind_bits=bits.kind_bits,
        cat_bits=bits.category_bits,
        var_bits=bits.variant_bits,
        cat_mask=bits.category_mask,
        var_mask=bits.variant_mask,
        kind_mask=bits.kind_mask,
        cat_max=bits.category_max,
        var_maxes=bits.variant_maxes,
    )


def _tables(symbols: SymbolTable) -> LookupTables:
    return LookupTables(
        category_names=tuple(c.name for c in symbols.categories),
        kind_names=tuple(tuple(e.name for e in c.errors) for c in symbols.categories),
        kind_displays=tuple(tuple(kind_display(e) for e in c.errors) for c in symbols.categories),
    )


def _categories_namespace(symbols: SymbolTable) -> Namespace:
    consts = tuple(
        CategoryConst(
            ident=c.const_ident,
            name=c.name,
            index=c.index,
            doc=c.spec.doc if c.spec.doc is not None else "",
        )
        for c in symbols.categories
    )
    return Namespace(CATEGORIES_NS, defs.DEFAULT_CATEGORIES_DOC, consts=consts)


def _kind_const(module: ModuleSpec, bits: BitPlan, cat: CategorySymbol, err: ErrorSymbol) -> KindConst:
    return KindConst(
        ident=err.const_ident,
        name=err.name,
        cat_index=err.cat_index,
        var_index=err.var_index,
        value=bits.encode(err.cat_index, err.var_index),
        doc=item_doc(err.spec.doc, err.spec.display,
                     module.resolve_doc_from_display(cat.spec, err.spec)),
    )


def _kinds_namespace(module: ModuleSpec, bits: BitPlan, symbols: SymbolTable) -> Namespace:
    if module.resolved_flat_kinds:
        consts = tuple(
            _kind_const(module, bits, cat, err)
            for cat in symbols.categories
            for err in cat.errors
        )
        return Namespace(KINDS_NS, defs.DEFAULT_KINDS_DOC, consts=consts)

    children: List[Namespace] = []
    for cat in symbols.categories:
        doc = cat.spec.doc if cat.spec.doc is not None else f"Error kinds of category {cat.name}."
        consts = tuple(_kind_const(module, bits, cat, err) for err in cat.errors)
        children.append(Namespace(cat.namespace_ident, doc, consts=consts))
    return Namespace(KINDS_NS, defs.DEFAULT_KINDS_DOC, children=tuple(children))


def _variant_types(module: ModuleSpec, symbols: SymbolTable,
                   err_name: str, error_trait: bool) -> tuple[VariantType, ...]:
    out: List[VariantType] = []
    for err in symbols.variant_types():
        cat = symbols.categories[err.cat_index]
        out.append(VariantType(
            ident=err.variant_type_ident,
            name=err.name,
            doc=item_doc(err.spec.doc, err.spec.display,
                         module.resolve_doc_from_display(cat.spec, err.spec)),
            kind=kind_ref(module, symbols, err),
            category=category_ref(cat),
            error_type=err_name,
            error_trait=error_trait,
        ))
    return tuple(out)
