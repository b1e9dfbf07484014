"""Public engine API: evaluation, command invocation, and library introspection."""

from __future__ import annotations

import re
from typing import Any

from giacbind.domain.help import HelpResult, parse_help
from giacbind.domain.registry import CommandInfo
from giacbind.domain.serialize import to_giac_string
from giacbind.domain.suggest import format_suggestions
from giacbind.engine.commands import conflict_reason, is_exportable
from giacbind.engine.context import GiacContext
from giacbind.engine.expr import GiacExpr
from giacbind.engine.runtime import get_runtime

__all__ = [
    "available_commands",
    "command_info",
    "commands_in_category",
    "conflict_reason",
    "diff",
    "expand",
    "exportable_commands",
    "factor",
    "gcd",
    "get_suggestion_count",
    "giac_eval",
    "giac_help",
    "help",
    "help_count",
    "integrate",
    "invoke_cmd",
    "is_stub_mode",
    "is_valid_command",
    "limit",
    "list_categories",
    "list_commands",
    "search_commands",
    "search_commands_by_description",
    "series",
    "set_suggestion_count",
    "simplify",
    "solve",
    "suggest_commands",
]


# ---------------------------------------------------------------------------
# Evaluation
# ---------------------------------------------------------------------------


def giac_eval(expr: Any, ctx: GiacContext | None = None) -> GiacExpr:
    """Evaluate GIAC source text (or re-evaluate an expression).

    Raises:
        GiacError: ``parse`` for empty or malformed text, ``eval`` for a
            failed evaluation, ``resource`` in degraded mode.
    """
    context = ctx or get_runtime().default_context
    text = expr if isinstance(expr, str) else to_giac_string(expr)
    return context.eval(text)


def invoke_cmd(name: str, *args: Any) -> GiacExpr:
    """Invoke GIAC command *name* through the tiered dispatcher."""
    return get_runtime().dispatcher.call(name, *args)


# ---------------------------------------------------------------------------
# Convenience wrappers
# ---------------------------------------------------------------------------


def diff(expr: Any, var: Any, order: int = 1) -> GiacExpr:
    """Derivative of *expr* with respect to *var*, *order* times."""
    if order == 1:
        return invoke_cmd("diff", expr, var)
    return invoke_cmd("diff", expr, var, order)


def integrate(expr: Any, var: Any, lower: Any = None, upper: Any = None) -> GiacExpr:
    """Antiderivative, or the definite integral when both bounds are given."""
    if lower is None and upper is None:
        return invoke_cmd("integrate", expr, var)
    if lower is None or upper is None:
        raise ValueError("A definite integral needs both lower and upper bounds")
    return invoke_cmd("integrate", expr, var, lower, upper)


def limit(expr: Any, var: Any, point: Any) -> GiacExpr:
    return invoke_cmd("limit", expr, var, point)


def series(expr: Any, var: Any, point: Any = 0, order: int = 5) -> GiacExpr:
    """Series expansion of *expr* around ``var = point`` up to *order*."""
    return invoke_cmd("series", expr, var, point, order)


def factor(expr: Any) -> GiacExpr:
    return invoke_cmd("factor", expr)


def expand(expr: Any) -> GiacExpr:
    return invoke_cmd("expand", expr)


def simplify(expr: Any) -> GiacExpr:
    return invoke_cmd("simplify", expr)


def solve(expr: Any, var: Any = None) -> GiacExpr:
    if var is None:
        return invoke_cmd("solve", expr)
    return invoke_cmd("solve", expr, var)


def gcd(a: Any, b: Any) -> GiacExpr:
    return invoke_cmd("gcd", a, b)


# ---------------------------------------------------------------------------
# Library info
# ---------------------------------------------------------------------------


def is_stub_mode() -> bool:
    """Whether the native library is unavailable (degraded mode)."""
    return not get_runtime().available


def list_commands() -> list[str]:
    """All registered command names, sorted."""
    return list(get_runtime().registry.names)


def help_count() -> int:
    """Number of entries in the native help database (0 in degraded mode)."""
    runtime = get_runtime()
    if runtime.native is None:
        return 0
    return runtime.native.help_count()


def is_valid_command(name: str) -> bool:
    return name in get_runtime().registry


def available_commands() -> list[str]:
    """Registered commands whose names start with a letter, sorted."""
    return [name for name in get_runtime().registry.names if name[:1].isalpha()]


def exportable_commands() -> list[str]:
    """Registered commands usable as Python attribute names, sorted."""
    return [name for name in get_runtime().registry.names if is_exportable(name)]


# ---------------------------------------------------------------------------
# Discovery
# ---------------------------------------------------------------------------


def search_commands(pattern: str | re.Pattern[str], *, regex: bool = False) -> list[str]:
    """Commands starting with *pattern*, or matching it as a regular expression."""
    registry = get_runtime().registry
    if regex or isinstance(pattern, re.Pattern):
        return registry.search_regex(pattern)
    return registry.search(pattern)


def search_commands_by_description(text: str) -> list[str]:
    """Commands whose help text mentions *text* (case-insensitive)."""
    runtime = get_runtime()
    return runtime.registry.search_description(text, doc_for=runtime.help_text)


def list_categories() -> list[str]:
    return get_runtime().registry.categories()


def commands_in_category(category: str) -> list[str]:
    return get_runtime().registry.commands_in_category(category)


def command_info(name: str) -> CommandInfo | None:
    """Metadata for *name*, with help text filled in; ``None`` if unknown."""
    runtime = get_runtime()
    info = runtime.registry.info(name)
    if info is None or info.doc:
        return info
    return info.model_copy(update={"doc": runtime.help_text(name)})


def giac_help(name: str) -> str:
    """Raw help text for *name*; empty when unavailable."""
    return get_runtime().help_text(name)


def help(name: str) -> HelpResult:  # noqa: A001
    """Parsed help for *name*, with suggestions when the name is unknown."""
    runtime = get_runtime()
    registry = runtime.registry
    if not registry.accepts(name):
        return _not_found(name)
    text = runtime.help_text(name)
    if not text:
        if not runtime.available:
            return HelpResult(command=name, description="[Help not available in stub mode]")
        return _not_found(name)
    return parse_help(text, name)


def _not_found(name: str) -> HelpResult:
    suggestions = suggest_commands(name)
    return HelpResult(
        command=name,
        description=f"[No help found for: {name}.{format_suggestions(suggestions)}]",
    )


# ---------------------------------------------------------------------------
# Suggestions
# ---------------------------------------------------------------------------


def suggest_commands(name: str, n: int | None = None) -> list[str]:
    """Nearest registered command names to *name*."""
    runtime = get_runtime()
    return runtime.registry.suggest(name, runtime.suggestion_count if n is None else n)


def set_suggestion_count(n: int) -> None:
    """Set the default suggestion count; non-positive values reset to 4."""
    get_runtime().suggestion_count = n


def get_suggestion_count() -> int:
    return get_runtime().suggestion_count
