"""GiacContext — a native evaluation context and string evaluation.

Contexts are not isolated at the native level: every context shares the
process-wide lock, so two contexts never evaluate concurrently.
"""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING

from giacbind.domain.errors import ErrorKind, GiacError
from giacbind.domain.handles import OpaqueHandle
from giacbind.infrastructure.library import ERROR_PARSE
from giacbind.infrastructure.lock import GIAC_LOCK

if TYPE_CHECKING:
    from giacbind.engine.expr import GiacExpr
    from giacbind.engine.runtime import GiacRuntime

logger = logging.getLogger(__name__)


def failure_error(kind_code: int, message: str, text: str) -> GiacError:
    """Build the GiacError for a failed evaluation of *text*."""
    kind = ErrorKind.PARSE if kind_code == ERROR_PARSE else ErrorKind.EVAL
    return GiacError(message or f"Failed to evaluate expression: {text}", kind)


class GiacContext(OpaqueHandle):
    """Native evaluation context.

    Created with :meth:`create`; the process-wide default context is
    available as ``get_runtime().default_context``.
    """

    _handle_label = "context"

    def __init__(self, handle: object, runtime: GiacRuntime) -> None:
        native = runtime.require_native()
        super().__init__(handle, native.context_free)
        self._runtime = runtime

    @classmethod
    def create(cls, runtime: GiacRuntime | None = None) -> GiacContext:
        """Allocate a new native context.

        Raises:
            GiacError: ``resource`` kind in degraded mode or when allocation fails.
        """
        if runtime is None:
            from giacbind.engine.runtime import get_runtime

            runtime = get_runtime()
        native = runtime.require_native()
        with GIAC_LOCK:
            handle = native.context_new()
        if handle is None:
            raise GiacError("Failed to create GIAC context", ErrorKind.RESOURCE)
        return cls(handle, runtime)

    @property
    def runtime(self) -> GiacRuntime:
        return self._runtime

    @property
    def lock(self) -> threading.RLock:
        """The lock guarding this context (the process-wide GIAC lock)."""
        return GIAC_LOCK

    def eval(self, text: str) -> GiacExpr:
        """Evaluate GIAC source *text* in this context.

        Raises:
            GiacError: ``parse`` for empty or malformed input, ``eval`` when
                evaluation fails, ``resource`` for a released context.
        """
        from giacbind.engine.expr import GiacExpr

        if not text or not text.strip():
            raise GiacError("Cannot evaluate an empty expression", ErrorKind.PARSE)
        native = self._runtime.require_native()
        ctx = self.handle
        failure: tuple[int, str] | None = None
        with GIAC_LOCK:
            gen = native.eval_string(ctx, text)
            if gen is None:
                failure = native.last_error()
        if failure is not None:
            logger.debug("Evaluation failed for %r: %s", text, failure[1])
            raise failure_error(failure[0], failure[1], text)
        return GiacExpr(gen, self._runtime, self)

    def __repr__(self) -> str:
        state = "released" if self.released else "live"
        return f"GiacContext({state})"
