from __future__ import annotations

import copy
from collections.abc import MutableSequence
from dataclasses import dataclass
from functools import lru_cache

import jax
import numpy as np

from at_core.config import DEFAULT_CONFIG
from at_core.errors import BorrowError
from at_core.modes import BoundsMode, coerce_bounds_mode
from at_core.policy import FailurePolicy, policy_for_mode
from at_core.resolve import check_index
from at_core.zst import sequence_len


class Slot:
    """Mutable reference to one element: a (sequence, offset) pair.

    Two slots are equal when they name the same storage location.
    """

    __slots__ = ("_seq", "_offset")

    def __init__(self, seq, offset: int) -> None:
        self._seq = seq
        self._offset = offset

    @property
    def sequence(self):
        return self._seq

    @property
    def offset(self) -> int:
        return self._offset

    def get(self):
        return self._seq[self._offset]

    def set(self, value) -> None:
        self._seq[self._offset] = value

    value = property(get, set)

    def replace(self, value):
        """Store ``value`` and return the previous element."""
        old = self._seq[self._offset]
        self._seq[self._offset] = value
        return old

    def __eq__(self, other):
        if not isinstance(other, Slot):
            return NotImplemented
        return self._seq is other._seq and self._offset == other._offset

    def __hash__(self) -> int:
        return hash((id(self._seq), self._offset))

    def __repr__(self) -> str:
        return f"Slot(offset={self._offset}, value={self.get()!r})"


def _value_of(seq, offset: int):
    value = seq[offset]
    if isinstance(value, jax.Array):
        return value
    return copy.copy(value)


def _ref_of(seq, offset: int):
    if isinstance(seq, np.ndarray):
        view = seq[offset, ...]
        view.flags.writeable = False
        return view
    return seq[offset]


def _require_mutable(seq) -> None:
    if isinstance(seq, np.ndarray):
        if seq.flags.writeable:
            return
    elif isinstance(seq, MutableSequence):
        return
    raise BorrowError(sequence_type=type(seq).__name__)


@dataclass(frozen=True)
class Accessors:
    """The three accessors bound to one failure policy."""

    policy: FailurePolicy

    @property
    def mode(self) -> BoundsMode:
        return self.policy.mode

    def at(self, seq, idx):
        """Element at ``idx`` by value (a shallow copy)."""
        offset = self.policy.offset(idx, sequence_len(seq))
        return _value_of(seq, offset)

    def ref_at(self, seq, idx):
        """Element at ``idx`` by reference; read-only view for ndarrays."""
        offset = self.policy.offset(idx, sequence_len(seq))
        return _ref_of(seq, offset)

    def mut_at(self, seq, idx) -> Slot:
        """Mutable reference to the element at ``idx``."""
        _require_mutable(seq)
        offset = self.policy.offset(idx, sequence_len(seq))
        return Slot(seq, offset)


@lru_cache(maxsize=None)
def _accessors_for(mode: BoundsMode) -> Accessors:
    return Accessors(policy=policy_for_mode(mode))


def make_accessors(mode: BoundsMode | str | None = None) -> Accessors:
    """Accessor bundle for ``mode`` (checked when None); one bundle per mode."""
    return _accessors_for(coerce_bounds_mode(mode, context="make_accessors"))


def try_at(seq, idx):
    offset = check_index(idx, sequence_len(seq))
    if offset is None:
        return None
    return _value_of(seq, offset)


def try_ref_at(seq, idx):
    offset = check_index(idx, sequence_len(seq))
    if offset is None:
        return None
    return _ref_of(seq, offset)


def try_mut_at(seq, idx) -> Slot | None:
    _require_mutable(seq)
    offset = check_index(idx, sequence_len(seq))
    if offset is None:
        return None
    return Slot(seq, offset)


DEFAULT_ACCESSORS = make_accessors(DEFAULT_CONFIG.bounds_mode)

at = DEFAULT_ACCESSORS.at
ref_at = DEFAULT_ACCESSORS.ref_at
mut_at = DEFAULT_ACCESSORS.mut_at


class At:
    """Mixin adding ``at``/``ref_at``/``mut_at`` methods to a sequence type."""

    __slots__ = ()

    def at(self, idx):
        return DEFAULT_ACCESSORS.at(self, idx)

    def ref_at(self, idx):
        return DEFAULT_ACCESSORS.ref_at(self, idx)

    def mut_at(self, idx) -> Slot:
        return DEFAULT_ACCESSORS.mut_at(self, idx)

    def try_at(self, idx):
        return try_at(self, idx)

    def try_ref_at(self, idx):
        return try_ref_at(self, idx)

    def try_mut_at(self, idx) -> Slot | None:
        return try_mut_at(self, idx)


class AtList(At, list):
    pass


__all__ = [
    "Slot",
    "Accessors",
    "make_accessors",
    "DEFAULT_ACCESSORS",
    "at",
    "ref_at",
    "mut_at",
    "try_at",
    "try_ref_at",
    "try_mut_at",
    "At",
    "AtList",
]
