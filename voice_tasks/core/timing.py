"""
Stage timing for debug runs.

The flag is read on every call rather than at import, so `--debug` on the command line
turns timing on for the interpreters it invokes.
"""

import functools
import sys
import time
from typing import Callable, ParamSpec, TypeVar

from .config import config

P = ParamSpec("P")
R = TypeVar("R")


def timer(func: Callable[P, R]) -> Callable[P, R]:
    """
    Report how long each call to func took on stderr when VT_DEBUG=1.

    Args:
        func: Function to measure

    Returns:
        Wrapped function
    """

    @functools.wraps(func)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
        if not config.debug:
            return func(*args, **kwargs)

        started = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            elapsed_ms = (time.perf_counter() - started) * 1000
            sys.stderr.write(f"[VT_DEBUG] {func.__qualname__} took {elapsed_ms:.2f}ms\n")

    return wrapper
