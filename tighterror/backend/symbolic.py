"""Symbolic description of a generated module.

Nodes here describe *what* a generated module contains without any target
syntax. `module_builder` produces them, `emit_python` renders them. Item
order in tuples is emission order.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Union

from tighterror.backend.bits import BitPlan
from tighterror.backend.repr_type import ReprType


# ---- References ----

@dataclass(frozen=True)
class ConstRef:
    """Path to a constant inside the generated module, e.g. ``kinds.parsing.BAD_TOKEN``."""
    namespace: tuple[str, ...]
    ident: str

    @property
    def path(self) -> str:
        return ".".join(self.namespace + (self.ident,))


# ---- Private constants and tables ----

@dataclass(frozen=True)
class LayoutConstants:
    repr_bits: int
    kind_bits: int
    cat_bits: int
    var_bits: int
    cat_mask: int
    var_mask: int
    kind_mask: int
    cat_max: int
    var_maxes: tuple[int, ...]


@dataclass(frozen=True)
class LookupTables:
    """Tables indexed by category index and then variant index."""
    category_names: tuple[str, ...]
    kind_names: tuple[tuple[str, ...], ...]
    kind_displays: tuple[tuple[str, ...], ...]


# ---- Types ----

@dataclass(frozen=True)
class CategoryType:
    name: str
    doc: str
    repr_type: ReprType


@dataclass(frozen=True)
class KindType:
    name: str
    doc: str
    repr_type: ReprType
    category_type: str
    error_type: str
    # False when the module has a single category (category bits are empty)
    checks_category: bool
    result_from_kind: bool


@dataclass(frozen=True)
class ErrorType:
    name: str
    doc: str
    kind_type: str
    category_type: str
    error_trait: bool
    result_from_err: bool


# ---- Constants ----

@dataclass(frozen=True)
class CategoryConst:
    ident: str
    name: str
    index: int
    doc: str


@dataclass(frozen=True)
class KindConst:
    ident: str
    name: str
    cat_index: int
    var_index: int
    value: int
    doc: str


@dataclass(frozen=True)
class Namespace:
    ident: str
    doc: str
    consts: tuple[Union[CategoryConst, KindConst], ...] = ()
    children: tuple["Namespace", ...] = ()


@dataclass(frozen=True)
class VariantType:
    """Empty type standing for a single error kind."""
    ident: str
    name: str
    doc: str
    kind: ConstRef
    category: ConstRef
    error_type: str
    error_trait: bool


# ---- Tests ----

@dataclass(frozen=True)
class NameCheck:
    """``target.name()`` equals `expected`."""
    target: ConstRef
    expected: str


@dataclass(frozen=True)
class DisplayCheck:
    """``str(target)`` equals `expected`."""
    target: ConstRef
    expected: str


@dataclass(frozen=True)
class KindDisplayCheck:
    """The hidden display accessor of kind `target` returns `expected`."""
    target: ConstRef
    expected: str


@dataclass(frozen=True)
class ValueCheck:
    """``target.value()`` equals `expected`."""
    target: ConstRef
    expected: int


@dataclass(frozen=True)
class UniquenessCheck:
    """No two `targets` are equal; by value when `by_value` is set."""
    targets: tuple[ConstRef, ...]
    by_value: bool


@dataclass(frozen=True)
class CategoryCheck:
    """``kind.category()`` equals `category`."""
    kind: ConstRef
    category: ConstRef


@dataclass(frozen=True)
class FromValueCheck:
    """``Kind.from_value(kind.value())`` equals `kind`."""
    kind: ConstRef


@dataclass(frozen=True)
class InvalidValueCheck:
    """``Kind.from_value(v)`` is absent for every value in `values`."""
    values: tuple[int, ...]


@dataclass(frozen=True)
class ErrorDisplayCheck:
    """``str(Error(kind))`` equals `expected`."""
    kind: ConstRef
    expected: str


@dataclass(frozen=True)
class VariantTypeCheck:
    """Variant type `variant` converts into `kind`, its error and result."""
    variant: str
    kind: ConstRef
    category: ConstRef
    name: str


Check = Union[
    NameCheck, DisplayCheck, KindDisplayCheck, ValueCheck, UniquenessCheck,
    CategoryCheck, FromValueCheck, InvalidValueCheck, ErrorDisplayCheck,
    VariantTypeCheck,
]


@dataclass(frozen=True)
class TestCase:
    __test__ = False

    name: str
    checks: tuple[Check, ...]


@dataclass(frozen=True)
class TestSuite:
    __test__ = False

    name: str
    cases: tuple[TestCase, ...]


# ---- Module ----

@dataclass(frozen=True)
class SymbolicModule:
    name: str
    doc: str
    bits: BitPlan
    layout: LayoutConstants
    tables: LookupTables
    category_type: CategoryType
    kind_type: KindType
    error_type: ErrorType
    categories: Namespace
    kinds: Namespace
    variant_types: tuple[VariantType, ...]
    tests: Optional[TestSuite]

    def iter_kind_consts(self):
        yield from self.kinds.consts
        for child in self.kinds.children:
            yield from child.consts


@dataclass(frozen=True)
class OutputUnit:
    """One generated source file.

    A unit holds a single module, or several modules nested as inner
    namespaces when `nested` is set.
    """
    name: str
    doc: str
    modules: tuple[SymbolicModule, ...]
    nested: bool
