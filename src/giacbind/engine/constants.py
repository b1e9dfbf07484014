"""Lazily evaluated mathematical constants: ``pi``, ``e``, ``i``, ``inf``.

Each constant is evaluated on first attribute access and cached for the
lifetime of the runtime that produced it.
"""

from __future__ import annotations

from typing import Any

from giacbind.engine.runtime import GiacRuntime, get_runtime

CONSTANTS: dict[str, str] = {
    "pi": "pi",
    "e": "e",
    "i": "i",
    "inf": "inf",
}

_cache: dict[str, Any] = {}
_cache_owner: GiacRuntime | None = None


def constant(name: str) -> Any:
    """The cached expression for constant *name*.

    Raises:
        KeyError: *name* is not a known constant.
    """
    global _cache_owner
    source = CONSTANTS[name]
    runtime = get_runtime()
    if _cache_owner is not runtime:
        _cache.clear()
        _cache_owner = runtime
    value = _cache.get(name)
    if value is None:
        value = _cache[name] = runtime.default_context.eval(source)
    return value


def clear_constants_cache() -> None:
    global _cache_owner
    _cache.clear()
    _cache_owner = None


def __getattr__(name: str) -> Any:
    if name in CONSTANTS:
        return constant(name)
    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
