"""Support library imported by generated error modules."""
from __future__ import annotations
import types
from typing import Any, Mapping

from tighterror.runtime.bases import TightError, TightErrorCategory, TightErrorKind, VariantType
from tighterror.runtime.location import UNDEFINED_LOCATION, Location
from tighterror.runtime.result import Err, Ok, Result

__all__ = [
    "Err", "Location", "Ok", "Result", "TightError", "TightErrorCategory",
    "TightErrorKind", "UNDEFINED_LOCATION", "VariantType", "namespace_module",
]


def namespace_module(name: str, doc: str, namespace: Mapping[str, Any]) -> types.ModuleType:
    """Wrap the definitions of a nested generated module into a module object."""
    module = types.ModuleType(name, doc)
    for key, value in namespace.items():
        if not (key.startswith("__") and key.endswith("__")):
            setattr(module, key, value)
    return module
