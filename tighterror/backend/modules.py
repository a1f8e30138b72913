"""Grouping of symbolic modules into output units."""
from __future__ import annotations
from typing import List

from tighterror.backend.bits import BitPlan
from tighterror.backend.module_builder import build_module
from tighterror.backend.symbolic import OutputUnit, SymbolicModule
from tighterror.semantics.symbols import SymbolTable
from tighterror.spec import definitions as defs
from tighterror.spec.model import Spec


def build_modules(spec: Spec, test: bool) -> List[SymbolicModule]:
    """Build the symbolic module of every module in `spec`, in order."""
    out: List[SymbolicModule] = []
    for module in spec.modules:
        bits = BitPlan.calculate(module)
        symbols = SymbolTable.build(module)
        out.append(build_module(spec.main, module, bits, symbols, test))
    return out


def group_units(modules: List[SymbolicModule], separate_files: bool) -> List[OutputUnit]:
    """Decide how modules map onto output files.

    A single module, or any number of modules in separate-files mode, gives
    one unit per module named after it. Otherwise all modules are nested
    into one unit.
    """
    if len(modules) == 1 or separate_files:
        return [OutputUnit(m.name, m.doc, (m,), nested=False) for m in modules]
    return [OutputUnit(
        name=defs.IMPLICIT_FILENAME[: -len(defs.OUTPUT_SUFFIX)],
        doc="",
        modules=tuple(modules),
        nested=True,
    )]


def build_units(spec: Spec, test: bool, separate_files: bool) -> List[OutputUnit]:
    """Build the output units of a validated specification.

    Args:
        spec: The validated specification.
        test: Include the canned unit tests in every module.
        separate_files: Emit one unit per module.

    Returns:
        Output units in emission order.
    """
    return group_units(build_modules(spec, test), separate_files)
