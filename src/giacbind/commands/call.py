"""Command: invoke a GIAC command by name."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from giacbind.commands._base import CliCommand

if TYPE_CHECKING:
    from giacbind.commands._context import AppContext


@click.command(
    cls=CliCommand,
    examples="""\
  giacbind call factor "x^2-1"
  giacbind call diff "sin(x)*x" x
  giacbind -v call gcd 12 18""",
)
@click.argument("name")
@click.argument("args", nargs=-1)
@click.pass_obj
def call(app: AppContext, name: str, args: tuple[str, ...]) -> None:
    """Call GIAC command NAME; each ARG is evaluated as GIAC text first."""
    from giacbind.services.evaluate import EvalService

    app.emit(EvalService(app.runtime).call(name, list(args)))
