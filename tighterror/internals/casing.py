"""Case conversions between UpperCamel, UPPER_SNAKE and lower_snake.

Words are split at lower-to-upper transitions, before the last capital of an
acronym followed by a lowercase letter, at letter/digit transitions and at
underscores. A name is "in" a case when converting it to that case yields
the name itself.
"""
from __future__ import annotations
import re

_CAMEL_BOUNDARY = re.compile(
    r"(?<=[a-z])(?=[A-Z])"
    r"|(?<=[A-Z])(?=[A-Z][a-z])"
    r"|(?<=[A-Za-z])(?=[0-9])"
    r"|(?<=[0-9])(?=[A-Za-z])"
)


def camel_words(name: str) -> list[str]:
    return [w for w in _CAMEL_BOUNDARY.split(name) if w]


def snake_words(name: str) -> list[str]:
    return [w for w in name.split("_") if w]


def _capitalize(word: str) -> str:
    return word[:1].upper() + word[1:].lower()


def to_upper_snake(name: str) -> str:
    """`BadFile` -> `BAD_FILE`, `Err1` -> `ERR_1`."""
    return "_".join(w.upper() for w in camel_words(name))


def to_lower_snake(name: str) -> str:
    """`BadFile` -> `bad_file`."""
    return "_".join(w.lower() for w in camel_words(name))


def to_upper_camel(name: str) -> str:
    """`bad_file` or `BAD_FILE` -> `BadFile`."""
    return "".join(_capitalize(w) for w in snake_words(name))


def is_upper_camel(name: str) -> bool:
    return "".join(_capitalize(w) for w in camel_words(name)) == name


def is_lower_snake(name: str) -> bool:
    return "_".join(w.lower() for w in snake_words(name)) == name
