from tighterror.spec.model import CategorySpec, ErrorSpec, MainSpec, ModuleSpec, Spec

__all__ = ["CategorySpec", "ErrorSpec", "MainSpec", "ModuleSpec", "Spec"]
