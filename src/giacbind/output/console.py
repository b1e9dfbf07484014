"""Rich Console factory and theme for giacbind output.

Consoles render to a StringIO buffer so renderers keep the
``format_result() -> str`` contract. In non-TTY environments (tests,
pipes) Rich disables color codes on its own.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

GIAC_THEME = Theme(
    {
        "giac.ok": "bold green",
        "giac.error": "bold red",
        "giac.warning": "bold yellow",
        "giac.op": "bold cyan",
        "giac.key": "dim",
        "giac.command": "bold blue",
        "giac.result": "bold",
        "giac.type": "magenta",
        "giac.category": "cyan",
        "giac.distance": "magenta",
    }
)


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer.

    Args:
        no_color: Disable ANSI escape codes.
        width: Override terminal width for stable output.
    """
    return Console(
        file=StringIO(),
        theme=GIAC_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()
