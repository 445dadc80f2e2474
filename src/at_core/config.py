from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping

from at_core.modes import BoundsMode, coerce_bounds_mode, flag_enabled

UNSAFE_UNCHECKED_ENV = "AT_UNSAFE_UNCHECKED"


@dataclass(frozen=True, slots=True)
class AtConfig:
    """Process-wide indexing configuration, fixed at import time.

    bounds_mode:
      - "checked": out-of-bounds access raises IndexOutOfBoundsError
      - "unchecked": no bounds comparison; out-of-bounds access is the
        caller's bug and its result is unspecified
    """

    bounds_mode: BoundsMode | str = BoundsMode.CHECKED

    def __post_init__(self):
        object.__setattr__(
            self, "bounds_mode", coerce_bounds_mode(self.bounds_mode, context="AtConfig")
        )

    @property
    def unchecked(self) -> bool:
        return self.bounds_mode == BoundsMode.UNCHECKED


def config_from_env(environ: Mapping[str, str] | None = None) -> AtConfig:
    if environ is None:
        environ = os.environ
    if flag_enabled(environ.get(UNSAFE_UNCHECKED_ENV)):
        return AtConfig(bounds_mode=BoundsMode.UNCHECKED)
    return AtConfig(bounds_mode=BoundsMode.CHECKED)


DEFAULT_CONFIG = config_from_env()


__all__ = [
    "UNSAFE_UNCHECKED_ENV",
    "AtConfig",
    "config_from_env",
    "DEFAULT_CONFIG",
]
