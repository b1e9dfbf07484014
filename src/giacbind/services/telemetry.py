"""Span timing for service calls.

Disabled by default; ``--verbose`` turns it on. A traced service method
becomes the root span, ``trace_span`` blocks inside it (native evaluation,
argument evaluation, dispatch) become children, and the finished tree is
attached to ``ServiceResult.meta["telemetry"]``. Root spans slower than
``SLOW_SPAN_MS`` are logged at INFO because a single GIAC call can run for
seconds on a hard integral or factorization.
"""

from __future__ import annotations

import functools
import time
from collections.abc import Callable, Generator
from contextlib import contextmanager
from contextvars import ContextVar, Token
from dataclasses import dataclass, field
from typing import Any, ParamSpec, TypeVar

import structlog

from giacbind.services.result import ServiceResult

SLOW_SPAN_MS = 1000.0

_verbose_enabled: ContextVar[bool] = ContextVar("_verbose_enabled", default=False)
_current_span: ContextVar[Span | None] = ContextVar("_current_span", default=None)

_P = ParamSpec("_P")
_R = TypeVar("_R")


@dataclass
class Span:
    """One timed region, with annotations such as the dispatch tier."""

    name: str
    parent: Span | None = None
    children: list[Span] = field(default_factory=list)
    start_time: float = field(default_factory=time.perf_counter)
    end_time: float | None = None
    annotations: dict[str, Any] = field(default_factory=dict)

    @property
    def duration_ms(self) -> float:
        if self.end_time is None:
            return 0.0
        return (self.end_time - self.start_time) * 1000

    def end(self) -> None:
        self.end_time = time.perf_counter()

    def annotate(self, key: str, value: Any) -> None:
        self.annotations[key] = value

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"name": self.name, "duration_ms": round(self.duration_ms, 2)}
        if self.annotations:
            out["annotations"] = self.annotations
        if self.children:
            out["children"] = [child.to_dict() for child in self.children]
        return out


def enable_telemetry() -> None:
    _verbose_enabled.set(True)


def disable_telemetry() -> None:
    _verbose_enabled.set(False)


def get_current_span() -> Span | None:
    """The innermost open span, or None when telemetry is off."""
    if not _verbose_enabled.get():
        return None
    return _current_span.get()


def annotate_current(**values: Any) -> None:
    """Annotate the innermost open span; does nothing when there is none."""
    span = get_current_span()
    if span is not None:
        for key, value in values.items():
            span.annotate(key, value)


def _close(span: Span, token: Token[Span | None]) -> None:
    span.end()
    _current_span.reset(token)


@contextmanager
def trace_span(name: str) -> Generator[Span | None]:
    """Open a child of the current span.

    Yields None when telemetry is off or no traced call is running.
    """
    parent = get_current_span()
    if parent is None:
        yield None
        return

    child = Span(name=name, parent=parent)
    parent.children.append(child)
    token = _current_span.set(child)
    try:
        yield child
    finally:
        _close(child, token)


def _log_root(span: Span, *, ok: bool) -> None:
    log = structlog.get_logger("giacbind.telemetry")
    duration = round(span.duration_ms, 2)
    fields = {"span_name": span.name, "duration_ms": duration, "ok": ok}
    if span.duration_ms >= SLOW_SPAN_MS:
        log.info("span.slow", **fields)
    else:
        log.debug("span.complete", children=len(span.children), **fields)


def _with_telemetry(result: ServiceResult, span: Span) -> ServiceResult:
    if result.error is not None:
        span.annotate("error_code", result.error.code)
    meta = {**(result.meta or {}), "telemetry": span.to_dict()}
    return result.model_copy(update={"meta": meta})


def traced(func: Callable[_P, _R]) -> Callable[_P, _R]:  # noqa: UP047
    """Make *func* a root span and attach the span tree to its ServiceResult.

    A plain call when telemetry is off.
    """

    @functools.wraps(func)
    def wrapper(*args: _P.args, **kwargs: _P.kwargs) -> _R:
        if not _verbose_enabled.get():
            return func(*args, **kwargs)

        span = Span(name=func.__qualname__)
        token = _current_span.set(span)
        try:
            result = func(*args, **kwargs)
        except Exception:
            _close(span, token)
            _log_root(span, ok=False)
            raise
        _close(span, token)

        if isinstance(result, ServiceResult):
            _log_root(span, ok=result.ok)
            return _with_telemetry(result, span)  # type: ignore[return-value]
        _log_root(span, ok=True)
        return result

    return wrapper
