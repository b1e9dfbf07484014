"""Subcommand modules for the giacbind CLI.

Provides register_commands(), which uses deferred imports to keep
``giacbind --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all subcommands on the root CLI group."""
    from giacbind.commands.call import call
    from giacbind.commands.catalog import categories, help_cmd, search, suggest
    from giacbind.commands.eval_cmd import eval_cmd
    from giacbind.commands.status import status

    cli.add_command(eval_cmd)
    cli.add_command(call)
    cli.add_command(help_cmd)
    cli.add_command(search)
    cli.add_command(suggest)
    cli.add_command(categories)
    cli.add_command(status)
