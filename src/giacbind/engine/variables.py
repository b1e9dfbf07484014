"""Symbolic variable helpers."""

from __future__ import annotations

import itertools
import re
from typing import Any

from giacbind.engine.expr import GiacExpr
from giacbind.engine.matrix import indexed_name, needs_separator

_NAME = r"[A-Za-z_][A-Za-z0-9_]*"
_VARIABLE_RE = re.compile(rf"^{_NAME}$")
_FUNCTION_RE = re.compile(rf"^({_NAME})\((.*)\)$")
# Function specs like u(t) or f(x, y) must not be split on their inner spaces.
_TOKEN_RE = re.compile(rf"{_NAME}\([^)]*\)|\S+")


def _validate(spec: str) -> str:
    if _VARIABLE_RE.match(spec):
        return spec
    match = _FUNCTION_RE.match(spec)
    if match is None:
        msg = f"Invalid variable specification: {spec!r}"
        raise ValueError(msg)
    name, inner = match.groups()
    params = [p.strip() for p in inner.split(",")] if inner.strip() else []
    if not params:
        msg = (
            f"Function syntax requires at least one argument: {spec!r}. "
            f"Use {name!r} for a plain variable."
        )
        raise ValueError(msg)
    for param in params:
        if not _VARIABLE_RE.match(param):
            msg = f"Function arguments must be plain names, got {param!r} in {spec!r}"
            raise ValueError(msg)
    return f"{name}({','.join(params)})"


def giac_var(*specs: str) -> Any:
    """Create symbolic variables or function applications.

    ``giac_var("x y")`` returns ``(x, y)``; ``giac_var("u(t)")`` returns
    the expression ``u(t)``. A single spec returns a single expression.

    Raises:
        ValueError: No specification given, or one is malformed.
    """
    tokens = [token for spec in specs for token in _TOKEN_RE.findall(spec)]
    if not tokens:
        raise ValueError("giac_var requires at least one variable name")
    exprs = tuple(GiacExpr.from_value(_validate(token)) for token in tokens)
    return exprs[0] if len(exprs) == 1 else exprs


def giac_several_vars(base: str, *dims: int) -> tuple[Any, ...]:
    """Indexed symbols ``base<i><j>...``, nested one tuple level per dimension.

    ``giac_several_vars("a", 2, 3)`` returns
    ``((a11, a12, a13), (a21, a22, a23))``. Any zero dimension yields ``()``.

    Raises:
        ValueError: No dimensions, a negative dimension, or an invalid base.
    """
    if not _VARIABLE_RE.match(base):
        msg = f"Invalid base name: {base!r}"
        raise ValueError(msg)
    if not dims:
        raise ValueError("At least one dimension required")
    for d in dims:
        if d < 0:
            msg = f"Dimensions must be non-negative, got {d}"
            raise ValueError(msg)
    if any(d == 0 for d in dims):
        return ()
    separated = needs_separator(dims)
    flat = [
        GiacExpr.from_value(indexed_name(base, indices, separated))
        for indices in itertools.product(*(range(1, d + 1) for d in dims))
    ]
    return _nest(flat, dims)


def _nest(flat: list[GiacExpr], dims: tuple[int, ...]) -> tuple[Any, ...]:
    if len(dims) == 1:
        return tuple(flat)
    stride = len(flat) // dims[0]
    return tuple(_nest(flat[i * stride : (i + 1) * stride], dims[1:]) for i in range(dims[0]))
