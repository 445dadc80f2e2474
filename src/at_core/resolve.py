from __future__ import annotations

from at_core.widths import (
    USIZE_MAX,
    try_into_isize,
    try_into_usize,
    index_value,
    wrapping_add_signed,
)


def check_index(idx, length: int) -> int | None:
    """Resolve ``idx`` against ``length``; return the offset or None if out of bounds.

    Non-negative indices take the usize conversion directly. A negative index
    is added to ``length`` with wrapping arithmetic: for ``-length <= idx < 0``
    the sum lands in ``[0, length)``, otherwise it wraps to
    ``[length, USIZE_MAX]``. The single ``< length`` test below rejects the
    wrapped case as well, including when ``length`` exceeds ISIZE_MAX.
    """
    resolved = try_into_usize(idx)
    if resolved is None:
        signed = try_into_isize(idx)
        if signed is None:
            return None
        resolved = wrapping_add_signed(length, signed)
    if resolved < length:
        return resolved
    return None


def resolve_unchecked(idx, length: int) -> int:
    """Offset for ``idx`` with no bounds comparison.

    Callers must already know ``idx`` is in bounds; an out-of-bounds index
    yields an arbitrary wrapped offset.
    """
    value = index_value(idx)
    if value < 0:
        return wrapping_add_signed(length, value)
    return value & USIZE_MAX


__all__ = [
    "check_index",
    "resolve_unchecked",
]
