"""giacbind — Python bindings for the GIAC computer algebra system."""

from __future__ import annotations

from typing import Any

from giacbind.domain.errors import ErrorKind, GiacError
from giacbind.engine.api import (
    available_commands,
    command_info,
    commands_in_category,
    diff,
    expand,
    exportable_commands,
    factor,
    gcd,
    get_suggestion_count,
    giac_eval,
    giac_help,
    help,
    help_count,
    integrate,
    invoke_cmd,
    is_stub_mode,
    is_valid_command,
    limit,
    list_categories,
    list_commands,
    search_commands,
    search_commands_by_description,
    series,
    set_suggestion_count,
    simplify,
    solve,
    suggest_commands,
)
from giacbind.engine.commands import (
    PYTHON_CONFLICTS,
    Commands,
    GiacCommand,
    commands,
    conflict_reason,
)
from giacbind.engine.context import GiacContext
from giacbind.engine.expr import GiacExpr
from giacbind.engine.held import HeldCmd, hold_cmd, release
from giacbind.engine.matrix import GiacMatrix
from giacbind.engine.substitute import substitute
from giacbind.engine.tables import clear_commands_cache, commands_table
from giacbind.engine.variables import giac_several_vars, giac_var

__version__ = "0.4.0"

__all__ = [
    "PYTHON_CONFLICTS",
    "Commands",
    "ErrorKind",
    "GiacCommand",
    "GiacContext",
    "GiacError",
    "GiacExpr",
    "GiacMatrix",
    "HeldCmd",
    "__version__",
    "available_commands",
    "clear_commands_cache",
    "command_info",
    "commands",
    "commands_in_category",
    "commands_table",
    "conflict_reason",
    "diff",
    "expand",
    "exportable_commands",
    "factor",
    "gcd",
    "get_suggestion_count",
    "giac_eval",
    "giac_help",
    "giac_several_vars",
    "giac_var",
    "help",
    "help_count",
    "hold_cmd",
    "integrate",
    "invoke_cmd",
    "is_stub_mode",
    "is_valid_command",
    "limit",
    "list_categories",
    "list_commands",
    "release",
    "search_commands",
    "search_commands_by_description",
    "series",
    "set_suggestion_count",
    "simplify",
    "solve",
    "substitute",
    "suggest_commands",
]


def __getattr__(name: str) -> Any:
    from giacbind.engine import constants

    if name in constants.CONSTANTS:
        return constants.constant(name)
    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
