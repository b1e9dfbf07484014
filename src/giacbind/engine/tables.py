"""Tabular views of the command registry."""

from __future__ import annotations

from typing import NamedTuple

from giacbind.domain.help import parse_help
from giacbind.engine.runtime import get_runtime


class CommandRow(NamedTuple):
    name: str
    category: str
    description: str


_rows: list[CommandRow] | None = None


def commands_table() -> list[CommandRow]:
    """One row per registered command, cached until :func:`clear_commands_cache`."""
    global _rows
    if _rows is None:
        runtime = get_runtime()
        registry = runtime.registry
        _rows = [
            CommandRow(
                name,
                registry.category_of(name),
                parse_help(runtime.help_text(name), name).description,
            )
            for name in registry.names
        ]
    return list(_rows)


def clear_commands_cache() -> None:
    global _rows
    _rows = None
