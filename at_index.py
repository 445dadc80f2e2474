"""Indexing helpers for contiguous sequences.

``at``, ``ref_at`` and ``mut_at`` accept any integer index width (``int``,
NumPy integer scalars, 0-d integer JAX arrays), support negative indices
counted from the end, and make the kind of access explicit::

    >>> import at_index as ai
    >>> v = [8, 2, 1, 0]
    >>> ai.at(v, -1)
    0
    >>> ai.ref_at(v, 2)
    1
    >>> ai.mut_at(v, -3).get()
    2

Setting ``AT_UNSAFE_UNCHECKED=1`` before import removes the bounds check from
these accessors. Only do this when every index is known to be in bounds.
"""

from at_core import accessors as _accessors
from at_core import config as _config
from at_core import errors as _errors
from at_core import jax_safe as _jax_safe
from at_core import modes as _modes
from at_core import policy as _policy
from at_core import resolve as _resolve
from at_core import widths as _widths
from at_core import zst as _zst
from at_core.accessors import *
from at_core.config import *
from at_core.errors import *
from at_core.jax_safe import *
from at_core.modes import *
from at_core.policy import *
from at_core.resolve import *
from at_core.widths import *
from at_core.zst import *

__all__ = []
__all__ += _accessors.__all__
__all__ += _config.__all__
__all__ += _errors.__all__
__all__ += _jax_safe.__all__
__all__ += _modes.__all__
__all__ += _policy.__all__
__all__ += _resolve.__all__
__all__ += _widths.__all__
__all__ += _zst.__all__
