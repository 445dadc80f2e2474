from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import NoReturn, Protocol, runtime_checkable

from at_core.errors import IndexOutOfBoundsError
from at_core.modes import BoundsMode, coerce_bounds_mode
from at_core.resolve import check_index, resolve_unchecked
from at_core.widths import index_repr

logger = logging.getLogger(__name__)


@runtime_checkable
class FailurePolicy(Protocol):
    mode: BoundsMode

    def offset(self, idx, length: int) -> int:
        ...


def raise_out_of_bounds(idx, length: int) -> NoReturn:
    raise IndexOutOfBoundsError(length=length, index=idx, index_repr=index_repr(idx))


@dataclass(frozen=True, slots=True)
class CheckedPolicy:
    """Resolve with a bounds check; out-of-bounds raises IndexOutOfBoundsError."""

    mode: BoundsMode = BoundsMode.CHECKED

    def offset(self, idx, length: int) -> int:
        resolved = check_index(idx, length)
        if resolved is None:
            raise_out_of_bounds(idx, length)
        return resolved


@dataclass(frozen=True, slots=True)
class UncheckedPolicy:
    """Resolve without comparing against the length.

    The caller guarantees the index is in bounds. When it is not, the offset
    is whatever the wrapping arithmetic produced and the sequence's own
    indexing decides what happens next.
    """

    mode: BoundsMode = BoundsMode.UNCHECKED

    def offset(self, idx, length: int) -> int:
        return resolve_unchecked(idx, length)


CHECKED_POLICY = CheckedPolicy()
UNCHECKED_POLICY = UncheckedPolicy()


def policy_for_mode(mode: BoundsMode | str | None) -> FailurePolicy:
    mode = coerce_bounds_mode(mode, context="policy_for_mode")
    if mode == BoundsMode.UNCHECKED:
        logger.warning(
            "unchecked bounds mode bound: out-of-bounds indices are not detected"
        )
        return UNCHECKED_POLICY
    return CHECKED_POLICY


__all__ = [
    "FailurePolicy",
    "CheckedPolicy",
    "UncheckedPolicy",
    "CHECKED_POLICY",
    "UNCHECKED_POLICY",
    "raise_out_of_bounds",
    "policy_for_mode",
]
