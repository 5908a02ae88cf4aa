"""Small shared helpers: random values and executable-relative paths."""

from __future__ import annotations

import os
import random
import sys
from typing import Optional, Union

Number = Union[int, float]

_random = random.SystemRandom()


def get_random(low: Number, high: Number) -> Number:
    """Uniform random value in [low, high]; integers stay integers."""
    if low > high:
        raise ValueError(f"low ({low}) must not exceed high ({high})")
    if isinstance(low, int) and isinstance(high, int):
        return _random.randint(low, high)
    return _random.uniform(float(low), float(high))


def remove_last_path_component(path: str) -> str:
    """Cut the path before its last directory separator, if it has one."""
    pos = max(path.rfind("\\"), path.rfind("/"))
    if pos == -1:
        return path
    return path[:pos]


def go_up_directories(path: str, levels: int) -> str:
    """Strip ``levels`` trailing components from the path."""
    for _ in range(levels):
        path = remove_last_path_component(path)
    return path


def base_path(executable: Optional[str] = None, debug: bool = False) -> str:
    """Directory where runtime files (logs, dumps) are kept.

    In debug mode this is three levels above the executable (the project
    folder above ``Build/Debug``); otherwise it is the executable's folder.
    """
    if executable is None:
        executable = os.path.abspath(sys.argv[0] or sys.executable)
    if debug:
        return go_up_directories(executable, 3)
    return remove_last_path_component(executable)