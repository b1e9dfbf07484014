"""Command: report native library and registry status."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from giacbind.commands._base import CliCommand

if TYPE_CHECKING:
    from giacbind.commands._context import AppContext


@click.command(cls=CliCommand, examples="  giacbind status\n  giacbind --json status")
@click.pass_obj
def status(app: AppContext) -> None:
    """Show whether GIAC is loaded and how many commands are registered."""
    from giacbind.services.catalog import CatalogService

    app.emit(CatalogService(app.runtime).status())
