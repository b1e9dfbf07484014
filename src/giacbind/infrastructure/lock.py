"""Process-wide serialization lock for the GIAC native library.

GIAC is not thread-safe. Every native call, including frees and
string conversions, runs while holding ``GIAC_LOCK``. The lock is
reentrant so locked helpers can call other locked helpers on the same
thread without deadlocking.
"""

from __future__ import annotations

import threading
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from functools import wraps
from typing import ParamSpec, TypeVar

GIAC_LOCK = threading.RLock()

P = ParamSpec("P")
R = TypeVar("R")


@contextmanager
def giac_lock() -> Iterator[None]:
    """Hold the global GIAC lock for the duration of the block."""
    with GIAC_LOCK:
        yield


def locked(fn: Callable[P, R]) -> Callable[P, R]:
    """Decorator running *fn* under the global GIAC lock."""

    @wraps(fn)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
        with GIAC_LOCK:
            return fn(*args, **kwargs)

    return wrapper
