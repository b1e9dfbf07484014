"""Click classes shared by every giacbind subcommand.

``--examples`` prints a command's usage examples and exits, keeping the
examples out of ``--help``. ``CliGroup`` also answers a mistyped
subcommand with the same nearest-name hint the binding gives for
mistyped GIAC commands.
"""

from __future__ import annotations

from typing import Any

import click

from giacbind.domain.suggest import format_suggestions, rank

SUBCOMMAND_SUGGESTIONS = 3


def _examples_option(examples: str) -> click.Option:
    def show(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if value and not ctx.resilient_parsing:
            click.echo(f"Examples for '{ctx.command_path}':\n")
            click.echo(examples.rstrip("\n"))
            ctx.exit(0)

    return click.Option(
        ["--examples"],
        is_flag=True,
        expose_value=False,
        is_eager=True,
        callback=show,
        help="Show usage examples.",
    )


class CliCommand(click.Command):
    """A subcommand that may carry ``examples`` text."""

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        if examples:
            self.params.append(_examples_option(examples))


class CliGroup(click.Group):
    """Group whose subcommands default to :class:`CliCommand`."""

    command_class = CliCommand

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        if examples:
            self.params.append(_examples_option(examples))

    def resolve_command(
        self, ctx: click.Context, args: list[str]
    ) -> tuple[str | None, click.Command | None, list[str]]:
        try:
            return super().resolve_command(ctx, args)
        except click.UsageError as exc:
            name = args[0] if args else ""
            if name and self.get_command(ctx, name) is None:
                close = rank(name, self.list_commands(ctx), SUBCOMMAND_SUGGESTIONS)
                exc.message += format_suggestions([cmd for cmd, _ in close])
            raise
