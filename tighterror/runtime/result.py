"""Minimal result values returned by the generated ``into_result`` conversions."""
from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Generic, TypeVar, Union

T = TypeVar("T")
E = TypeVar("E")


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        return self.value

    def unwrap_err(self) -> Any:
        raise ValueError(f"called unwrap_err() on {self!r}")


@dataclass(frozen=True)
class Err(Generic[E]):
    error: E

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def unwrap(self) -> Any:
        """Raise the held error if it is an exception, ValueError otherwise."""
        if isinstance(self.error, BaseException):
            raise self.error
        raise ValueError(f"called unwrap() on {self!r}")

    def unwrap_err(self) -> E:
        return self.error


Result = Union[Ok[T], Err[E]]
