from __future__ import annotations

from enum import Enum

from at_core.errors import BoundsModeError

_TRUTHY = ("1", "true", "yes", "on")


class BoundsMode(str, Enum):
    CHECKED = "checked"
    UNCHECKED = "unchecked"


def coerce_bounds_mode(
    mode: BoundsMode | str | None, *, context: str | None = None
) -> BoundsMode:
    if mode is None:
        return BoundsMode.CHECKED
    if isinstance(mode, BoundsMode):
        return mode
    if isinstance(mode, str):
        if mode == BoundsMode.CHECKED.value:
            return BoundsMode.CHECKED
        if mode == BoundsMode.UNCHECKED.value:
            return BoundsMode.UNCHECKED
    raise BoundsModeError(
        mode=mode,
        allowed=(BoundsMode.CHECKED.value, BoundsMode.UNCHECKED.value),
        context=context,
    )


def flag_enabled(value: str | None) -> bool:
    if value is None:
        return False
    return value.strip().lower() in _TRUTHY


__all__ = [
    "BoundsMode",
    "coerce_bounds_mode",
    "flag_enabled",
]
