"""Tiered command dispatch.

A command call tries, in order:

1. a typed native entry point for ``(name, arity)``;
2. the generic by-name native entry point (``giac_apply_*``);
3. textual evaluation of ``name(arg1,arg2,...)``.

Tiers 1 and 2 only run when every argument is a GiacExpr. A tier that
yields the null sentinel falls through to the next one; only the tier-3
failure is surfaced. Operators use tier 1 then infix text.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from giacbind.domain.errors import UnknownCommandError, released_error
from giacbind.domain.handles import OpaqueHandle
from giacbind.domain.serialize import build_command_string, infix_string, to_giac_string
from giacbind.domain.suggest import format_suggestions
from giacbind.infrastructure.lock import GIAC_LOCK

if TYPE_CHECKING:
    from giacbind.engine.context import GiacContext
    from giacbind.engine.expr import GiacExpr
    from giacbind.engine.runtime import GiacRuntime

logger = logging.getLogger(__name__)

TIER_TYPED = 1
TIER_BY_NAME = 2
TIER_TEXT = 3


def _check_live(args: tuple[Any, ...]) -> None:
    for arg in args:
        if isinstance(arg, OpaqueHandle) and arg.released:
            raise released_error(arg._handle_label)


class Dispatcher:
    """Routes command calls through the three dispatch tiers.

    The dispatcher is shared by every thread. Callers that need the tier of
    their own call use :meth:`call_with_tier`; :attr:`last_tier` is kept per
    thread.
    """

    def __init__(self, runtime: GiacRuntime) -> None:
        self._runtime = runtime
        self._local = threading.local()

    @property
    def last_tier(self) -> int | None:
        """Tier that answered this thread's most recent call (1, 2 or 3)."""
        return getattr(self._local, "tier", None)

    def _answered(self, result: GiacExpr, tier: int) -> tuple[GiacExpr, int]:
        self._local.tier = tier
        return result, tier

    # --- validation ---

    def unknown_command_error(self, name: str) -> UnknownCommandError:
        registry = self._runtime.registry
        suggestions = registry.suggest(name, self._runtime.suggestion_count)
        return UnknownCommandError(
            name,
            f"Unknown command: {name}.{format_suggestions(suggestions)}",
            suggestions=suggestions,
        )

    def validate(self, name: str) -> None:
        """Reject an empty *name*, or one a populated registry does not contain."""
        if not name or not self._runtime.registry.accepts(name):
            raise self.unknown_command_error(name)

    # --- calls ---

    def _wrap(self, gen: Any, ctx: GiacContext) -> GiacExpr:
        from giacbind.engine.expr import GiacExpr

        return GiacExpr(gen, self._runtime, ctx)

    @staticmethod
    def _all_exprs(args: tuple[Any, ...]) -> bool:
        from giacbind.engine.expr import GiacExpr

        return all(isinstance(arg, GiacExpr) for arg in args)

    def _try_typed(self, name: str, args: tuple[Any, ...], ctx: GiacContext) -> GiacExpr | None:
        settings = self._runtime.settings.dispatch
        native = self._runtime.native
        if native is None or not settings.tier1 or not args or not self._all_exprs(args):
            return None
        if not native.has_typed(name, len(args)):
            return None
        handles = [arg.handle for arg in args]
        with GIAC_LOCK:
            gen = native.call_typed(name, ctx.handle, *handles)
        if gen is None:
            logger.debug("Tier 1 returned null for %s/%d; falling through", name, len(args))
            return None
        return self._wrap(gen, ctx)

    def _try_by_name(self, name: str, args: tuple[Any, ...], ctx: GiacContext) -> GiacExpr | None:
        settings = self._runtime.settings.dispatch
        native = self._runtime.native
        if native is None or not settings.tier2 or not name or not self._all_exprs(args):
            return None
        if not native.has_apply(len(args)):
            return None
        handles = [arg.handle for arg in args]
        with GIAC_LOCK:
            gen = native.apply(ctx.handle, name, handles)
        if gen is None:
            logger.debug("Tier 2 returned null for %s/%d; falling through", name, len(args))
            return None
        return self._wrap(gen, ctx)

    def _first_answer(
        self, name: str, args: tuple[Any, ...], ctx: GiacContext, fallback: Callable[[], str]
    ) -> tuple[GiacExpr, int]:
        result = self._try_typed(name, args, ctx)
        if result is not None:
            return self._answered(result, TIER_TYPED)
        return self._answered(ctx.eval(fallback()), TIER_TEXT)

    def _native_tiers(
        self, name: str, args: tuple[Any, ...], ctx: GiacContext
    ) -> tuple[GiacExpr, int]:
        result = self._try_typed(name, args, ctx)
        if result is not None:
            return self._answered(result, TIER_TYPED)
        result = self._try_by_name(name, args, ctx)
        if result is not None:
            return self._answered(result, TIER_BY_NAME)
        return self._answered(ctx.eval(build_command_string(name, args)), TIER_TEXT)

    def call_with_tier(
        self, name: str, *args: Any, ctx: GiacContext | None = None
    ) -> tuple[GiacExpr, int]:
        """Invoke command *name* with *args*; also return the tier that answered.

        Raises:
            GiacError: ``eval`` for unknown commands (with suggestions) or a
                failed evaluation, ``parse`` for malformed text, ``resource``
                for released handles or a missing native library.
            TypeError: An argument has no GIAC representation.
        """
        self.validate(name)
        _check_live(args)
        if not self._all_exprs(args):
            # Unsupported argument types fail here, before any native call.
            text = build_command_string(name, args)
            ctx = ctx or self._runtime.default_context
            answer = self._answered(ctx.eval(text), TIER_TEXT)
        else:
            ctx = ctx or self._runtime.default_context
            answer = self._native_tiers(name, args, ctx)
        logger.debug("Dispatched %s/%d via tier %s", name, len(args), answer[1])
        return answer

    def call(self, name: str, *args: Any, ctx: GiacContext | None = None) -> GiacExpr:
        """Invoke command *name* with *args*. See :meth:`call_with_tier`."""
        return self.call_with_tier(name, *args, ctx=ctx)[0]

    def binary_op(
        self,
        name: str,
        symbol: str,
        left: Any,
        right: Any,
        *,
        ctx: GiacContext | None = None,
    ) -> GiacExpr:
        """Arithmetic operator: typed entry point, then ``(left)symbol(right)``."""
        args = (left, right)
        _check_live(args)
        ctx = ctx or self._runtime.default_context
        return self._first_answer(name, args, ctx, lambda: infix_string(symbol, left, right))[0]

    def unary_op(
        self,
        name: str,
        symbol: str,
        operand: Any,
        *,
        ctx: GiacContext | None = None,
    ) -> GiacExpr:
        """Prefix operator: typed entry point, then ``symbol(operand)``."""
        _check_live((operand,))
        ctx = ctx or self._runtime.default_context
        return self._first_answer(
            name, (operand,), ctx, lambda: f"{symbol}({to_giac_string(operand)})"
        )[0]
