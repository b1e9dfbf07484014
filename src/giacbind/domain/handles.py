"""OpaqueHandle — single-owner wrapper around a native pointer.

INVARIANT: A handle is either valid or the null sentinel (``None``), never
dangling while owned. The native release runs exactly once: explicit
``release()`` resets the stored handle to ``None`` before invoking the
call-once finalizer, and garbage collection drives the same finalizer.
"""

from __future__ import annotations

import weakref
from collections.abc import Callable
from typing import Any, Self

from giacbind.domain.errors import released_error

#: The agreed "no object" value on the managed side of the FFI boundary.
NULL_HANDLE = None


class OpaqueHandle:
    """Base class for managed objects owning one native handle.

    Subclasses pass a ``release_fn`` that frees the native object. The
    function receives the raw handle and is invoked at most once.
    """

    _handle_label = "handle"

    def __init__(self, handle: Any, release_fn: Callable[[Any], None]) -> None:
        self._handle = handle
        self._finalizer: weakref.finalize | None = None
        if handle is not NULL_HANDLE:
            finalizer = weakref.finalize(self, release_fn, handle)
            # Process teardown reclaims native memory; no frees during interpreter exit.
            finalizer.atexit = False
            self._finalizer = finalizer

    @property
    def released(self) -> bool:
        """Whether the native handle has been released (or never existed)."""
        return self._handle is NULL_HANDLE

    @property
    def handle(self) -> Any:
        """The live native handle.

        Raises:
            GiacError: ``resource`` kind when the handle was already released.
        """
        if self._handle is NULL_HANDLE:
            raise released_error(self._handle_label)
        return self._handle

    def release(self) -> None:
        """Release the native handle now. Safe to call any number of times."""
        if self._handle is NULL_HANDLE:
            return
        self._handle = NULL_HANDLE
        finalizer, self._finalizer = self._finalizer, None
        if finalizer is not None:
            finalizer()

    def __enter__(self) -> Self:
        return self

    def __exit__(self, *exc: object) -> None:
        self.release()
