"""Names and references shared by the module and test builders."""
from __future__ import annotations
from typing import Optional

from tighterror.backend.symbolic import ConstRef
from tighterror.semantics.symbols import CategorySymbol, ErrorSymbol, SymbolTable
from tighterror.spec.model import ModuleSpec

CATEGORIES_NS = "categories"
KINDS_NS = "kinds"


def item_doc(doc: Optional[str], display: Optional[str], doc_from_display: bool) -> str:
    """Pick an item's doc: explicit doc, then display if enabled, then nothing."""
    if doc is not None:
        return doc
    if doc_from_display and display is not None:
        return display
    return ""


def kind_display(err: ErrorSymbol) -> str:
    return err.spec.display if err.spec.display is not None else err.name


def category_ref(cat: CategorySymbol) -> ConstRef:
    return ConstRef((CATEGORIES_NS,), cat.const_ident)


def kind_ref(module: ModuleSpec, symbols: SymbolTable, err: ErrorSymbol) -> ConstRef:
    if module.resolved_flat_kinds:
        return ConstRef((KINDS_NS,), err.const_ident)
    cat = symbols.categories[err.cat_index]
    return ConstRef((KINDS_NS, cat.namespace_ident), err.const_ident)
