"""Command: evaluate GIAC source text."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from giacbind.commands._base import CliCommand

if TYPE_CHECKING:
    from giacbind.commands._context import AppContext


@click.command(
    "eval",
    cls=CliCommand,
    examples="""\
  giacbind eval "factor(x^4-1)"
  giacbind eval "int(sin(x),x,0,pi)"
  giacbind -q eval "ifactor(2024)"
  giacbind --json eval "solve(x^2-2=0,x)" """,
)
@click.argument("text")
@click.pass_obj
def eval_cmd(app: AppContext, text: str) -> None:
    """Evaluate TEXT as GIAC source and print the result."""
    from giacbind.services.evaluate import EvalService

    app.emit(EvalService(app.runtime).evaluate(text))
