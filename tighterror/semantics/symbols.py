"""Canonical identifiers and indices of categories and errors."""
from __future__ import annotations
import keyword
from dataclasses import dataclass
from typing import List, Optional

from tighterror.internals import casing
from tighterror.spec.model import CategorySpec, ErrorSpec, ModuleSpec


def namespace_ident(name: str) -> str:
    """lower_snake identifier of a category namespace, safe as an attribute."""
    ident = casing.to_lower_snake(name)
    if keyword.iskeyword(ident) or keyword.issoftkeyword(ident):
        ident += "_"
    return ident


@dataclass(frozen=True)
class ErrorSymbol:
    spec: ErrorSpec
    cat_index: int
    var_index: int
    const_ident: str
    variant_type_ident: Optional[str]

    @property
    def name(self) -> str:
        return self.spec.name


@dataclass(frozen=True)
class CategorySymbol:
    spec: CategorySpec
    index: int
    const_ident: str
    namespace_ident: str
    errors: tuple[ErrorSymbol, ...]

    @property
    def name(self) -> str:
        return self.spec.name


@dataclass(frozen=True)
class SymbolTable:
    categories: tuple[CategorySymbol, ...]

    @classmethod
    def build(cls, module: ModuleSpec) -> "SymbolTable":
        """Assign indices by declaration order and derive identifiers."""
        cats: List[CategorySymbol] = []
        for i, cat in enumerate(module.categories):
            errors = tuple(
                ErrorSymbol(
                    spec=err,
                    cat_index=i,
                    var_index=j,
                    const_ident=casing.to_upper_snake(err.name),
                    variant_type_ident=err.resolved_variant_type_name if err.has_variant_type else None,
                )
                for j, err in enumerate(cat.errors)
            )
            cats.append(CategorySymbol(
                spec=cat,
                index=i,
                const_ident=casing.to_upper_snake(cat.name),
                namespace_ident=namespace_ident(cat.name),
                errors=errors,
            ))
        return cls(tuple(cats))

    def iter_errors(self):
        for cat in self.categories:
            yield from cat.errors

    def variant_types(self) -> List[ErrorSymbol]:
        return [e for e in self.iter_errors() if e.variant_type_ident is not None]
