from __future__ import annotations

from dataclasses import dataclass


@dataclass(eq=False)
class IndexOutOfBoundsError(IndexError):
    length: int
    index: object
    index_repr: str | None = None
    # Where the failure was detected; not part of the message.
    label: str | None = None

    def __str__(self) -> str:
        shown = self.index_repr if self.index_repr is not None else repr(self.index)
        return f"index out of bounds: the len is {self.length} but the index is {shown}"


@dataclass(eq=False)
class IndexTypeError(TypeError):
    index_type: str
    context: str | None = None

    def __str__(self) -> str:
        if self.context:
            return f"unsupported index type {self.index_type} ({self.context})"
        return f"unsupported index type {self.index_type}"


@dataclass(eq=False)
class LengthError(ValueError):
    length: object
    max_length: int

    def __str__(self) -> str:
        return f"sequence length {self.length!r} outside [0, {self.max_length}]"


@dataclass(eq=False)
class BoundsModeError(ValueError):
    mode: object
    allowed: tuple[str, ...] = ("checked", "unchecked")
    context: str | None = None

    def __str__(self) -> str:
        return f"unknown bounds_mode={self.mode!r}"


@dataclass(eq=False)
class BorrowError(TypeError):
    sequence_type: str

    def __str__(self) -> str:
        return f"{self.sequence_type} does not support mutable element access"


__all__ = [
    "IndexOutOfBoundsError",
    "IndexTypeError",
    "LengthError",
    "BoundsModeError",
    "BorrowError",
]
