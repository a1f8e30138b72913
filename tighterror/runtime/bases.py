"""Base classes of generated categories, kinds, errors and variant types.

Generated modules subclass these and supply the lookups that depend on the
module's bit layout. Categories and kinds are immutable wrappers of an
integer; they are ordered and hashed by that integer and can only be
created through the generated constants or ``from_value``.
"""
from __future__ import annotations
import functools
from abc import ABC, abstractmethod
from typing import Any, Optional

from tighterror.runtime.location import Location
from tighterror.runtime.result import Err


@functools.total_ordering
class _IntWrapper:
    __slots__ = ("_v",)

    def __init__(self, *args, **kwargs) -> None:
        raise TypeError(f"{type(self).__name__} values are only available as generated constants")

    @classmethod
    def _new(cls, v: int):
        obj = object.__new__(cls)
        object.__setattr__(obj, "_v", v)
        return obj

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __reduce__(self):
        return (type(self)._new, (self._v,))

    def value(self) -> int:
        return self._v

    def __eq__(self, other: object) -> bool:
        if type(other) is type(self):
            return self._v == other._v
        return NotImplemented

    def __lt__(self, other: object) -> bool:
        if type(other) is type(self):
            return self._v < other._v
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._v)


class TightErrorCategory(_IntWrapper, ABC):
    __slots__ = ()

    @abstractmethod
    def name(self) -> str:
        ...

    def __str__(self) -> str:
        return self.name()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name()})"


class TightErrorKind(_IntWrapper, ABC):
    __slots__ = ()

    @abstractmethod
    def category(self) -> TightErrorCategory:
        ...

    @abstractmethod
    def name(self) -> str:
        ...

    @abstractmethod
    def _display(self) -> str:
        ...

    @classmethod
    @abstractmethod
    def from_value(cls, value: int) -> Optional["TightErrorKind"]:
        ...

    def __str__(self) -> str:
        return self.name()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.category().name()}:{self.name()})"


class TightError(ABC):
    """An error value wrapping a kind and the location it was created at.

    Errors compare equal when their kinds are equal; the location is not
    part of the comparison.
    """

    # set by the generated subclass
    _KIND_TYPE: type = TightErrorKind

    def __init__(self, kind: TightErrorKind, location: Optional[Location] = None) -> None:
        if not isinstance(kind, self._KIND_TYPE):
            raise TypeError(f"expected {self._KIND_TYPE.__name__}, got {type(kind).__name__}")
        self._kind = kind
        self._location = location if location is not None else Location.undefined()
        if isinstance(self, BaseException):
            BaseException.__init__(self, kind._display())

    def kind(self) -> TightErrorKind:
        return self._kind

    def category(self) -> TightErrorCategory:
        return self._kind.category()

    def location(self) -> Location:
        return self._location

    def __str__(self) -> str:
        return self._kind._display()

    def __repr__(self) -> str:
        if self._location.is_undefined():
            return f"{type(self).__name__}({self._kind!r})"
        return f"{type(self).__name__}({self._kind!r}, {self._location})"

    def __eq__(self, other: object) -> bool:
        if type(other) is type(self):
            return self._kind == other._kind
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._kind)


class VariantType(ABC):
    """An empty type standing for a single error kind.

    Generated subclasses set `CATEGORY`, `KIND` and `NAME` and the error
    type the kind converts into.
    """

    CATEGORY: TightErrorCategory
    KIND: TightErrorKind
    NAME: str
    _ERROR_TYPE: type

    def __init__(self) -> None:
        if isinstance(self, BaseException):
            BaseException.__init__(self, self.KIND._display())

    def category(self) -> TightErrorCategory:
        return self.CATEGORY

    def kind(self) -> TightErrorKind:
        return self.KIND

    def name(self) -> str:
        return self.NAME

    def into_error(self, location: Optional[Location] = None) -> TightError:
        return self._ERROR_TYPE(self.KIND, location)

    def into_result(self) -> Err:
        return Err(self.into_error())

    def __str__(self) -> str:
        return self.KIND._display()

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, VariantType):
            return type(other) is type(self)
        return NotImplemented

    def __hash__(self) -> int:
        return hash(type(self))
