"""Simultaneous variable substitution through GIAC's ``subst`` command."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from giacbind.domain.serialize import to_giac_string
from giacbind.engine.expr import GiacExpr


def build_subst_command(expr_text: str, variables: Sequence[str], values: Sequence[str]) -> str:
    """``subst(e, v, a)`` for one variable, ``subst(e, [v1,v2], [a,b])`` for several.

    With no variables the expression text is returned unchanged.

    Raises:
        ValueError: *variables* and *values* differ in length.
    """
    if len(variables) != len(values):
        msg = (
            f"Number of variables ({len(variables)}) must match "
            f"number of values ({len(values)})"
        )
        raise ValueError(msg)
    if not variables:
        return expr_text
    if len(variables) == 1:
        return f"subst({expr_text}, {variables[0]}, {values[0]})"
    return f"subst({expr_text}, [{','.join(variables)}], [{','.join(values)}])"


def substitute(expr: GiacExpr, mapping: Mapping[Any, Any] | tuple[Any, Any]) -> GiacExpr:
    """Substitute variables in *expr* simultaneously.

    *mapping* is a dict ``{var: value}`` or a single ``(var, value)`` pair.
    An empty mapping returns *expr* itself.
    """
    if isinstance(mapping, tuple):
        if len(mapping) != 2:
            raise ValueError("A substitution pair must be (variable, value)")
        mapping = {mapping[0]: mapping[1]}
    if not mapping:
        return expr
    variables = [to_giac_string(var) for var in mapping]
    values = [to_giac_string(val) for val in mapping.values()]
    return expr.context.eval(build_subst_command(expr.text, variables, values))
