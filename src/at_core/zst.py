"""Sequences of zero-sized elements.

A sequence whose elements carry no data can be as long as USIZE_MAX, which is
past what ``len()`` can report. ``sequence_len`` is the length the accessors
resolve against; it reads ``ZeroSizedSequence.length`` directly.
"""

from __future__ import annotations

import operator
from collections.abc import Sequence
from functools import singledispatch

from at_core.widths import check_length

UNIT = ()


class ZeroSizedSequence(Sequence):
    __slots__ = ("_length",)

    def __init__(self, length) -> None:
        self._length = check_length(length)

    @property
    def length(self) -> int:
        return self._length

    def __len__(self) -> int:
        # Raises OverflowError past sys.maxsize; use sequence_len().
        return self._length

    def __getitem__(self, idx):
        if isinstance(idx, slice):
            raise TypeError("ZeroSizedSequence does not support slicing")
        i = operator.index(idx)
        if i < 0:
            i += self._length
        if not 0 <= i < self._length:
            raise IndexError("ZeroSizedSequence index out of range")
        return UNIT

    def __repr__(self) -> str:
        return f"ZeroSizedSequence(length={self._length})"


@singledispatch
def sequence_len(seq) -> int:
    return check_length(len(seq))


@sequence_len.register(ZeroSizedSequence)
def _zst_len(seq: ZeroSizedSequence) -> int:
    return seq.length


__all__ = [
    "UNIT",
    "ZeroSizedSequence",
    "sequence_len",
]
