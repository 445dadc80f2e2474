"""Native integer widths and the index conversion capability.

The host resolver works on exact Python integers and emulates the machine's
pointer-sized integers: ``usize`` is as wide as ``numpy.uintp`` and ``isize``
is its signed counterpart. Arithmetic that must wrap does so explicitly with
``USIZE_MAX`` as the mask.

An index type is usable when it has been registered here. Registration goes
through ``_register_index_type``, which is module-private: the set of
supported types is closed to this package.
"""

from __future__ import annotations

import operator
from functools import singledispatch

import jax
import jax.numpy as jnp
import numpy as np

from at_core.errors import IndexTypeError, LengthError

USIZE_BITS = np.dtype(np.uintp).itemsize * 8
USIZE_MAX = (1 << USIZE_BITS) - 1
ISIZE_MAX = (1 << (USIZE_BITS - 1)) - 1
ISIZE_MIN = -(1 << (USIZE_BITS - 1))


def wrapping_add_signed(lhs: int, rhs: int) -> int:
    """Add a signed value to a usize, modulo 2**USIZE_BITS."""
    return (lhs + rhs) & USIZE_MAX


def check_length(length) -> int:
    if type(length) is not int:
        try:
            length = operator.index(length)
        except TypeError:
            raise LengthError(length=length, max_length=USIZE_MAX) from None
    if length < 0 or length > USIZE_MAX:
        raise LengthError(length=length, max_length=USIZE_MAX)
    return length


@singledispatch
def _to_int(idx) -> int:
    raise IndexTypeError(index_type=type(idx).__name__)


def _register_index_type(cls):
    """Register ``cls`` as an index type; the decorated function maps it to int."""
    return _to_int.register(cls)


@_register_index_type(int)
def _int_to_int(idx: int) -> int:
    return int(idx)


@_register_index_type(bool)
def _bool_to_int(idx: bool) -> int:
    raise IndexTypeError(index_type="bool", context="booleans are not indices")


@_register_index_type(np.integer)
def _np_integer_to_int(idx: np.integer) -> int:
    return int(idx)


@_register_index_type(jax.Array)
def _jax_array_to_int(idx) -> int:
    if idx.ndim != 0 or not jnp.issubdtype(idx.dtype, jnp.integer):
        raise IndexTypeError(
            index_type=f"jax.Array[{idx.dtype}, shape={tuple(idx.shape)}]",
            context="expected a 0-d integer array",
        )
    try:
        return int(jax.device_get(idx))
    except TypeError:
        # Tracers refuse concrete conversion.
        raise IndexTypeError(
            index_type=type(idx).__name__,
            context="traced value; use at_core.jax_safe inside jit",
        ) from None


def index_value(idx) -> int:
    """Exact integer value of a registered index type."""
    if type(idx) is int:
        return idx
    return _to_int(idx)


def try_into_usize(idx) -> int | None:
    value = index_value(idx)
    if 0 <= value <= USIZE_MAX:
        return value
    return None


def try_into_isize(idx) -> int | None:
    value = index_value(idx)
    if ISIZE_MIN <= value <= ISIZE_MAX:
        return value
    return None


def index_repr(idx) -> str:
    """Debug rendering of an index: its decimal value for every width."""
    return str(index_value(idx))


def is_index(idx) -> bool:
    try:
        index_value(idx)
    except IndexTypeError:
        return False
    return True


__all__ = [
    "USIZE_BITS",
    "USIZE_MAX",
    "ISIZE_MAX",
    "ISIZE_MIN",
    "wrapping_add_signed",
    "check_length",
    "index_value",
    "try_into_usize",
    "try_into_isize",
    "index_repr",
    "is_index",
]
