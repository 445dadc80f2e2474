import jax
import jax.numpy as jnp
import numpy as np
from jax import lax

from at_core.config import DEFAULT_CONFIG
from at_core.errors import IndexOutOfBoundsError, IndexTypeError
from at_core.modes import BoundsMode, coerce_bounds_mode
from at_core.policy import raise_out_of_bounds
from at_core.widths import index_value

# Device rendition of the resolver. Offsets live in the native unsigned dtype
# (uint64 under jax_enable_x64, uint32 otherwise) so the negative-index add
# wraps in hardware and a single comparison decides validity.

GUARD_ENABLED = not DEFAULT_CONFIG.unchecked
HAS_DEBUG_CALLBACK = hasattr(jax, "debug") and hasattr(jax.debug, "callback")


def device_uint():
    return jnp.uint64 if jax.config.jax_enable_x64 else jnp.uint32


def device_int():
    return jnp.int64 if jax.config.jax_enable_x64 else jnp.int32


def _bounds_mode(mode):
    if mode is None:
        return DEFAULT_CONFIG.bounds_mode
    return coerce_bounds_mode(mode, context="jax_safe")


def _is_host_scalar(idx):
    return isinstance(idx, (int, np.integer)) and not isinstance(idx, bool)


def _device_index(idx):
    """Move ``idx`` to the device without narrowing any value.

    Returns ``(device_idx, fits, first_unfit)``. ``fits`` is None when every
    value is representable at the device width. Otherwise it is a host mask,
    the unrepresentable entries of ``device_idx`` are zero and
    ``first_unfit`` is the first such value. Such an index can never be in
    bounds of a device array.
    """
    if isinstance(idx, jax.Array):
        return idx, None, None
    sdt, udt = device_int(), device_uint()
    if _is_host_scalar(idx):
        value = index_value(idx)
        if jnp.iinfo(sdt).min <= value <= jnp.iinfo(udt).max:
            target = jnp.dtype(sdt if value < 0 else udt)
            return jnp.asarray(np.asarray(value, dtype=target)), None, None
        return jnp.asarray(0, dtype=udt), np.bool_(False), value
    host = np.asarray(idx)
    if not np.issubdtype(host.dtype, np.integer):
        raise IndexTypeError(index_type=str(host.dtype), context="resolve_index")
    target = jnp.dtype(udt if np.issubdtype(host.dtype, np.unsignedinteger) else sdt)
    if host.dtype.itemsize <= target.itemsize:
        return jnp.asarray(host), None, None
    info = np.iinfo(target)
    fits = (host >= info.min) & (host <= info.max)
    if fits.all():
        return jnp.asarray(host.astype(target)), None, None
    first_unfit = int(host[~fits][0])
    narrowed = np.where(fits, host, 0).astype(target)
    return jnp.asarray(narrowed), fits, first_unfit


def _resolve_device(idx, size):
    if not jnp.issubdtype(idx.dtype, jnp.integer):
        raise IndexTypeError(index_type=str(idx.dtype), context="resolve_index")
    udt = device_uint()
    size_u = jnp.asarray(size, dtype=udt)
    if jnp.issubdtype(idx.dtype, jnp.unsignedinteger):
        offset = idx.astype(udt)
    else:
        signed = idx.astype(device_int())
        bits = lax.bitcast_convert_type(signed, udt)
        offset = jnp.where(signed < 0, size_u + bits, bits)
    ok = offset < size_u
    return offset, ok


def resolve_index(idx, size):
    """Return (offset, ok) for ``idx`` against ``size``, element-wise.

    ``offset`` has the native unsigned dtype; ``ok`` is False where the index
    is out of bounds, including host indices too wide for the device.
    """
    idx, fits, _ = _device_index(idx)
    offset, ok = _resolve_device(idx, size)
    if fits is not None:
        ok = ok & jnp.asarray(fits)
    return offset, ok


def guard_index(idx, ok, size, label, guard=None):
    """Raise from the host when any index failed to resolve."""
    if guard is None:
        guard = GUARD_ENABLED
    if not guard or not HAS_DEBUG_CALLBACK:
        return
    if idx.size == 0:
        return
    ok_flat = jnp.ravel(ok)
    bad = ~jnp.all(ok_flat)
    # argmin picks the first False.
    first_bad = jnp.ravel(idx)[jnp.argmin(ok_flat.astype(jnp.int32))]

    def _raise(bad_val, idx_val, size_val):
        if bad_val:
            raise IndexOutOfBoundsError(
                length=int(size_val), index=int(idx_val), label=label
            )

    jax.debug.callback(_raise, bad, first_bad, size)


def _expand_mask(ok, ndim):
    return ok.reshape(ok.shape + (1,) * (ndim - 1))


def _empty_gather(arr, idx):
    return jnp.zeros(idx.shape + arr.shape[1:], dtype=arr.dtype)


def at_jnp(arr, idx, label="at_jnp", *, mode=None):
    """Gather ``arr[idx]`` with negative-index support; ``idx`` may be an array."""
    mode = _bounds_mode(mode)
    size = arr.shape[0]
    idx, fits, first_unfit = _device_index(idx)
    if fits is not None:
        raise_out_of_bounds(first_unfit, size)
    offset, ok = _resolve_device(idx, size)
    sdt = device_int()
    if mode == BoundsMode.UNCHECKED:
        if size == 0:
            return _empty_gather(arr, idx)
        return arr.at[offset.astype(sdt)].get(mode="promise_in_bounds")
    guard_index(idx, ok, size, label, guard=True)
    if size == 0:
        return _empty_gather(arr, idx)
    safe = jnp.where(ok, offset, jnp.zeros_like(offset)).astype(sdt)
    return arr[safe]


def try_at_jnp(arr, idx):
    """Gather without raising; returns (values, ok) with zeros where not ok."""
    size = arr.shape[0]
    offset, ok = resolve_index(idx, size)
    if size == 0:
        return _empty_gather(arr, ok), ok
    safe = jnp.where(ok, offset, jnp.zeros_like(offset)).astype(device_int())
    values = arr[safe]
    values = jnp.where(_expand_mask(ok, arr.ndim), values, jnp.zeros_like(values))
    return values, ok


def set_at_jnp(arr, idx, value, label="set_at_jnp", *, mode=None):
    """Return ``arr`` with the element at ``idx`` replaced by ``value``."""
    mode = _bounds_mode(mode)
    size = arr.shape[0]
    idx, fits, first_unfit = _device_index(idx)
    if fits is not None:
        raise_out_of_bounds(first_unfit, size)
    offset, ok = _resolve_device(idx, size)
    sdt = device_int()
    if mode == BoundsMode.UNCHECKED:
        if size == 0:
            return arr
        return arr.at[offset.astype(sdt)].set(value, mode="promise_in_bounds")
    guard_index(idx, ok, size, label, guard=True)
    if size == 0:
        return arr
    # Sentinel index == size is dropped by the scatter.
    sentinel = jnp.full_like(offset, size)
    safe = jnp.where(ok, offset, sentinel).astype(sdt)
    return arr.at[safe].set(value, mode="drop")


__all__ = [
    "GUARD_ENABLED",
    "HAS_DEBUG_CALLBACK",
    "device_uint",
    "device_int",
    "resolve_index",
    "guard_index",
    "at_jnp",
    "try_at_jnp",
    "set_at_jnp",
]
