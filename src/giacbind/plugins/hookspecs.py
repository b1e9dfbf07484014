"""Pluggy hook specifications for giacbind setup extensions.

Both hooks run once, during runtime initialization, while the command
registry is being built.
"""

from __future__ import annotations

import pluggy

hookspec = pluggy.HookspecMarker("giacbind")


class GiacbindHookSpec:
    """Hook specifications for the giacbind plugin system."""

    @hookspec
    def register_command_categories(self) -> dict[str, list[str]] | None:
        """Return category -> command names to merge into the built-in categories."""

    @hookspec
    def post_registry_init(self, command_count: int) -> None:
        """Called after the command registry is populated."""
