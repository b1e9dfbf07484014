"""Command objects and the attribute-style command namespace.

``commands.factor(expr)`` resolves ``factor`` through a :class:`CommandTable`
built from the registry, so names are validated (with suggestions) before
any native call. GIAC names that collide with Python keywords or builtins
stay reachable through ``commands["and"]`` and :func:`invoke_cmd`, but are
left out of ``dir(commands)``.
"""

from __future__ import annotations

import builtins
import keyword
from collections.abc import Iterator, Mapping
from typing import TYPE_CHECKING, Any

from giacbind.domain.registry import CommandRegistry

if TYPE_CHECKING:
    from giacbind.engine.expr import GiacExpr

PYTHON_KEYWORDS = frozenset(keyword.kwlist) | frozenset(keyword.softkwlist)
PYTHON_BUILTINS = frozenset(name for name in dir(builtins) if not name.startswith("_"))
PYTHON_CONFLICTS = PYTHON_KEYWORDS | PYTHON_BUILTINS


def conflict_reason(name: str) -> str | None:
    """Why *name* cannot be a plain Python attribute, or ``None``."""
    if name in PYTHON_KEYWORDS:
        return "Python keyword"
    if name in PYTHON_BUILTINS:
        return "Python builtin"
    return None


def is_exportable(name: str) -> bool:
    return name.isidentifier() and name[:1].isalpha() and name not in PYTHON_CONFLICTS


class GiacCommand:
    """A callable bound to one GIAC command name."""

    __slots__ = ("name",)

    def __init__(self, name: str) -> None:
        self.name = name

    def __call__(self, *args: Any) -> GiacExpr:
        from giacbind.engine.api import invoke_cmd

        return invoke_cmd(self.name, *args)

    @property
    def doc(self) -> str:
        from giacbind.engine.runtime import get_runtime

        return get_runtime().help_text(self.name)

    def __repr__(self) -> str:
        return f"GiacCommand({self.name!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, GiacCommand):
            return NotImplemented
        return self.name == other.name

    def __hash__(self) -> int:
        return hash(self.name)


class CommandTable(Mapping[str, GiacCommand]):
    """Explicit name -> :class:`GiacCommand` table over a registry.

    An empty registry (native list unavailable) accepts any name.
    """

    def __init__(self, registry: CommandRegistry) -> None:
        self._registry = registry
        self._cache: dict[str, GiacCommand] = {}

    def __getitem__(self, name: str) -> GiacCommand:
        if not name or not self._registry.accepts(name):
            raise KeyError(name)
        command = self._cache.get(name)
        if command is None:
            command = self._cache[name] = GiacCommand(name)
        return command

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and bool(name) and self._registry.accepts(name)

    def __iter__(self) -> Iterator[str]:
        return iter(self._registry.names)

    def __len__(self) -> int:
        return len(self._registry)

    def exportable(self) -> list[str]:
        return [name for name in self._registry.names if is_exportable(name)]


class Commands:
    """Attribute-style access to every registered GIAC command."""

    def _table(self) -> CommandTable:
        from giacbind.engine.runtime import get_runtime

        return get_runtime().command_table

    def __getattr__(self, name: str) -> GiacCommand:
        if name.startswith("_"):
            raise AttributeError(name)
        try:
            return self._table()[name]
        except KeyError:
            from giacbind.engine.runtime import get_runtime

            error = get_runtime().dispatcher.unknown_command_error(name)
            raise AttributeError(error.message) from None

    def __getitem__(self, name: str) -> GiacCommand:
        return self._table()[name]

    def __contains__(self, name: object) -> bool:
        return name in self._table()

    def __dir__(self) -> list[str]:
        return self._table().exportable()

    def __repr__(self) -> str:
        return "<giacbind commands>"


commands = Commands()
