"""Unsigned integer widths available for kind values."""
from __future__ import annotations
from enum import Enum


class ReprType(Enum):
    U8 = 8
    U16 = 16
    U32 = 32
    U64 = 64

    @property
    def bits(self) -> int:
        return self.value

    @property
    def max_value(self) -> int:
        return (1 << self.value) - 1

    @classmethod
    def from_n_bits(cls, n_bits: int) -> "ReprType":
        """Smallest width holding `n_bits` bits."""
        for rt in cls:
            if n_bits <= rt.bits:
                return rt
        raise ValueError(f"no representation type holds {n_bits} bits")

    def __str__(self) -> str:
        return f"u{self.value}"
