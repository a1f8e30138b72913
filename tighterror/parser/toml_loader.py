"""TOML front-end."""
from __future__ import annotations
import tomllib

from tighterror.internals.errors import ERR, fail
from tighterror.parser.common import SpecBuilder
from tighterror.spec.model import Spec


def load_toml(text: str) -> dict:
    try:
        return tomllib.loads(text)
    except tomllib.TOMLDecodeError as e:
        fail(ERR.BAD_TOML, reason=str(e))


def parse_toml_str(text: str) -> Spec:
    spec = SpecBuilder().build(load_toml(text))
    spec.source = text
    return spec
