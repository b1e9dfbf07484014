"""Commands: help, search, suggest, and categories over the command catalog."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from giacbind.commands._base import CliCommand

if TYPE_CHECKING:
    from giacbind.commands._context import AppContext


@click.command(
    "help",
    cls=CliCommand,
    examples="""\
  giacbind help factor
  giacbind --json help integrate""",
)
@click.argument("name")
@click.pass_obj
def help_cmd(app: AppContext, name: str) -> None:
    """Show the GIAC help entry for command NAME."""
    from giacbind.services.catalog import CatalogService

    app.emit(CatalogService(app.runtime).help(name))


@click.command(
    cls=CliCommand,
    examples="""\
  giacbind search fact
  giacbind search --regex "^i.*factor$"
  giacbind search --description polynomial""",
)
@click.argument("pattern")
@click.option("--regex", "mode", flag_value="regex", help="Treat PATTERN as a regular expression.")
@click.option(
    "--description",
    "mode",
    flag_value="description",
    help="Search help descriptions instead of names.",
)
@click.pass_obj
def search(app: AppContext, pattern: str, mode: str | None) -> None:
    """Find GIAC commands whose names start with PATTERN."""
    from giacbind.services.catalog import CatalogService

    app.emit(CatalogService(app.runtime).search(pattern, mode=mode or "prefix"))


@click.command(
    cls=CliCommand,
    examples="""\
  giacbind suggest factr
  giacbind suggest -n 8 integrat""",
)
@click.argument("name")
@click.option("-n", "count", type=int, default=None, help="Maximum number of suggestions.")
@click.pass_obj
def suggest(app: AppContext, name: str, count: int | None) -> None:
    """Suggest registered commands close to NAME."""
    from giacbind.services.catalog import CatalogService

    app.emit(CatalogService(app.runtime).suggest(name, count))


@click.command(
    cls=CliCommand,
    examples="""\
  giacbind categories
  giacbind categories calculus
  giacbind -q categories trigonometry""",
)
@click.argument("category", required=False)
@click.pass_obj
def categories(app: AppContext, category: str | None) -> None:
    """List command categories, or the commands in CATEGORY."""
    from giacbind.services.catalog import CatalogService

    app.emit(CatalogService(app.runtime).categories(category))
