"""Argument serialization into GIAC command text.

Every value passed to a command by name is rendered as GIAC source text
before tier-3 evaluation. Wrapper objects render themselves through the
``__giac__()`` protocol so this module never imports the engine layer.

INVARIANT: Unsupported argument types raise ``TypeError`` before any
native call is attempted.
"""

from __future__ import annotations

import math
from decimal import Decimal
from fractions import Fraction
from typing import Any


def _format_complex_part(value: float) -> str:
    if math.isfinite(value) and value.is_integer():
        return str(int(value))
    return _format_real(value)


def _format_real(value: float | int | Decimal) -> str:
    if isinstance(value, float):
        if math.isnan(value):
            return "undef"
        if math.isinf(value):
            return "inf" if value > 0 else "-inf"
    if isinstance(value, Decimal):
        if value.is_nan():
            return "undef"
        if value.is_infinite():
            return "inf" if value > 0 else "-inf"
    return str(value)


def to_giac_string(value: Any) -> str:
    """Render *value* as GIAC command text.

    Raises:
        TypeError: *value* has no GIAC text representation.
    """
    render = getattr(value, "__giac__", None)
    if callable(render):
        return str(render())
    if isinstance(value, str):
        return value
    # bool before int: True is an int
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Fraction):
        return f"({value.numerator})/({value.denominator})"
    if isinstance(value, complex):
        return f"({_format_complex_part(value.real)})+({_format_complex_part(value.imag)})*i"
    if isinstance(value, (int, float, Decimal)):
        return _format_real(value)
    if isinstance(value, (list, tuple)):
        return "[" + ",".join(to_giac_string(item) for item in value) + "]"
    msg = f"Cannot convert {type(value).__name__} to a GIAC argument"
    raise TypeError(msg)


def build_command_string(name: str, args: tuple[Any, ...] | list[Any] = ()) -> str:
    """Build ``name(a1,a2,...)`` from a command name and arguments."""
    rendered = ",".join(to_giac_string(arg) for arg in args)
    return f"{name}({rendered})"


def infix_string(op: str, left: Any, right: Any) -> str:
    """Build ``(left)op(right)`` with both operands parenthesized."""
    return f"({to_giac_string(left)}){op}({to_giac_string(right)})"
