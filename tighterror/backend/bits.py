"""Bit layout of kind values.

A kind value packs the category index into the high bits and the variant
index (position of the error inside its category) into the low bits::

    value = (category_index << variant_bits) | variant_index

The width of both parts is the smallest that fits the module's largest
index. The category part is empty when the module has a single category;
the variant part is at least one bit wide.
"""
from __future__ import annotations
from dataclasses import dataclass

from tighterror.backend.repr_type import ReprType
from tighterror.internals.errors import ERR, fail, raise_internal_error
from tighterror.spec import definitions as defs
from tighterror.spec.model import ModuleSpec


def _ceil_log2(n: int) -> int:
    return (n - 1).bit_length() if n > 1 else 0


def _mask(n_bits: int) -> int:
    return (1 << n_bits) - 1


@dataclass(frozen=True)
class BitPlan:
    category_bits: int
    variant_bits: int
    kind_bits: int
    category_mask: int
    variant_mask: int
    repr_type: ReprType
    variant_maxes: tuple[int, ...]

    @property
    def repr_width(self) -> int:
        return self.repr_type.bits

    @property
    def kind_mask(self) -> int:
        return self.category_mask | self.variant_mask

    @property
    def category_max(self) -> int:
        return len(self.variant_maxes) - 1

    def encode(self, cat_index: int, var_index: int) -> int:
        return (cat_index << self.variant_bits) | var_index

    def decode(self, value: int) -> tuple[int, int]:
        return (value & self.category_mask) >> self.variant_bits, value & self.variant_mask

    def is_valid(self, value: int) -> bool:
        """True if `value` encodes a declared kind."""
        if value < 0 or value > self.kind_mask:
            return False
        cat, var = self.decode(value)
        return cat <= self.category_max and var <= self.variant_maxes[cat]

    @classmethod
    def calculate(cls, module: ModuleSpec) -> "BitPlan":
        """Compute the layout of a validated module.

        Raises:
            TighterrorError: TOO_MANY_BITS if kinds do not fit 64 bits.
        """
        n_categories = len(module.categories)
        max_errors = max((len(c.errors) for c in module.categories), default=0)
        if n_categories == 0 or max_errors == 0:
            raise_internal_error("INTERNAL_INVARIANT",
                                 message=f"module '{module.name}' has an empty category list")

        category_bits = 0 if n_categories == 1 else _ceil_log2(n_categories)
        variant_bits = max(1, _ceil_log2(max_errors))
        kind_bits = category_bits + variant_bits
        if kind_bits > defs.MAX_KIND_BITS:
            fail(ERR.TOO_MANY_BITS, module.span, module=module.name, bits=kind_bits)

        plan = cls(
            category_bits=category_bits,
            variant_bits=variant_bits,
            kind_bits=kind_bits,
            category_mask=_mask(category_bits) << variant_bits,
            variant_mask=_mask(variant_bits),
            repr_type=ReprType.from_n_bits(kind_bits),
            variant_maxes=tuple(len(c.errors) - 1 for c in module.categories),
        )
        plan._check()
        return plan

    def _check(self) -> None:
        if self.category_mask & self.variant_mask:
            raise_internal_error("INTERNAL_INVARIANT", message="category and variant masks overlap")
        if self.kind_mask != _mask(self.kind_bits):
            raise_internal_error("INTERNAL_INVARIANT", message="masks do not cover the kind bits")
        if self.kind_bits > self.repr_width:
            raise_internal_error("INTERNAL_INVARIANT", message="kind bits exceed the repr width")
