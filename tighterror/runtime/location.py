from __future__ import annotations
import sys
from dataclasses import dataclass

UNDEFINED_LOCATION = "<undefined location>"


@dataclass(frozen=True, order=True)
class Location:
    """Source location where an error was created."""
    file: str
    line: int

    @classmethod
    def undefined(cls) -> "Location":
        return cls("", 0)

    @classmethod
    def caller(cls, depth: int = 1) -> "Location":
        """Location of the caller of the function calling `caller()`.

        Args:
            depth: Frames to skip above the direct caller of this method.
        """
        frame = sys._getframe(depth + 1)
        return cls(frame.f_code.co_filename, frame.f_lineno)

    def is_undefined(self) -> bool:
        return not self.file

    def __str__(self) -> str:
        if self.is_undefined():
            return UNDEFINED_LOCATION
        return f"{self.file}:{self.line}"
