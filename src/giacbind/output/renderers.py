"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO). The caller
extracts the rendered text via ``get_output(console)``.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from giacbind.output.console import create_console, get_output

if TYPE_CHECKING:
    from rich.console import Console

    from giacbind.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich.

    Returns plain text (no ANSI) when Rich detects no terminal,
    which is the case inside Click's CliRunner and piped output.
    """
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"

    if "result" in result.data:
        return str(result.data["result"])
    if result.op == "help":
        return str(result.data.get("description", ""))

    items = result.data.get("items")
    if items and isinstance(items, list):
        return "\n".join(_extract_name(item) for item in items)

    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _extract_name(item: Any) -> str:
    if isinstance(item, dict):
        return str(item.get("name", ""))
    return str(item)


def _status_line(console: Console, result: ServiceResult) -> None:
    """Print the OK status line."""
    label = Text("OK", style="giac.ok")
    op = Text(f"  {result.op}", style="giac.op")
    console.print(label, op, end="")
    console.print()


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="giac.key")
    if key == "result":
        v = Text(str(value), style="giac.result")
    elif key == "type":
        v = Text(str(value), style="giac.type")
    elif key in ("command", "name"):
        v = Text(str(value), style="giac.command")
    elif key == "category":
        v = Text(str(value), style="giac.category")
    else:
        v = Text(str(value))
    console.print(k, v, end="")
    console.print()


def _render_meta(console: Console, result: ServiceResult) -> None:
    """Print meta block including telemetry span tree (verbose only)."""
    if not result.meta:
        return

    console.print()
    console.print(Text("  meta:", style="dim"))

    for k, v in result.meta.items():
        if k == "telemetry":
            _render_telemetry_tree(console, v, indent=4)
        else:
            console.print(f"    {k}: {v}")


def _render_telemetry_tree(
    console: Console,
    span_data: dict[str, Any],
    indent: int = 4,
) -> None:
    """Render a hierarchical span tree with color-coded timing."""
    prefix = " " * indent
    name = span_data.get("name", "?")
    duration = span_data.get("duration_ms", 0.0)

    if duration > 1000:
        style = "bold red"
    elif duration > 100:
        style = "yellow"
    else:
        style = "dim"

    line = f"{prefix}[{style}]{duration:>8.2f}ms[/{style}]  {name}"

    annotations = span_data.get("annotations") or {}
    extras = [f"{ak}={av}" for ak, av in annotations.items()]
    if extras:
        line += f"  ({', '.join(extras)})"

    console.print(line)

    for child in span_data.get("children", []):
        _render_telemetry_tree(console, child, indent=indent + 4)


def _name_table(names: list[str], *, columns: int = 6) -> Table:
    """Lay command names out in a borderless grid."""
    table = Table.grid(padding=(0, 2))
    for _ in range(columns):
        table.add_column(style="giac.command", no_wrap=True)
    for start in range(0, len(names), columns):
        row = names[start : start + columns]
        row += [""] * (columns - len(row))
        table.add_row(*row)
    return table


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="giac.error")
    op = Text(f"  {result.op}", style="giac.op")
    sep = Text(" — ")
    console.print(label, op, sep, Text(msg))
    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(f"    {k}: {v}", markup=False)


# ── Evaluation renderers ──────────────────────────────────────────────


def _render_eval(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render eval and call results."""
    _status_line(console, result)
    for key in ("command", "input", "result", "type"):
        if key in result.data:
            _field(console, key, result.data[key])
    if verbose and "tier" in result.data:
        _field(console, "tier", result.data["tier"])
    if verbose:
        _render_meta(console, result)


# ── Catalog renderers ─────────────────────────────────────────────────


def _render_help(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    console.print(Text(str(d.get("command", "?")), style="giac.command"))
    if d.get("category"):
        _field(console, "category", d["category"])
    if d.get("description"):
        console.print()
        console.print(f"  {d['description']}", markup=False)
    if d.get("related"):
        console.print()
        _field(console, "related", ", ".join(d["related"]))
    examples = d.get("examples") or []
    if examples:
        console.print()
        console.print(Text("  examples:", style="giac.key"))
        for example in examples:
            console.print(f"    {example}", markup=False)
    if verbose:
        _render_meta(console, result)


def _render_names(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render search and single-category listings."""
    names = [str(n) for n in result.data.get("items", [])]
    if names:
        console.print(_name_table(names))
    label = "category" if result.op == "category" else "pattern"
    subject = result.data.get(label, "")
    count = result.data.get("count", len(names))
    console.print(f"\n{count} commands ({label}: {subject})", markup=False)
    if verbose:
        _render_meta(console, result)


def _render_suggest(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    items = result.data.get("items", [])
    if not items:
        console.print(f"No suggestions for: {result.data.get('input', '')}", markup=False)
        return
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Command", style="giac.command", no_wrap=True)
    table.add_column("Distance", style="giac.distance", justify="right")
    for item in items:
        table.add_row(str(item.get("name", "")), str(item.get("distance", "")))
    console.print(table)
    if verbose:
        _render_meta(console, result)


def _render_categories(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    items = result.data.get("items", [])
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Category", style="giac.category", no_wrap=True)
    table.add_column("Commands", justify="right")
    for item in items:
        table.add_row(str(item.get("name", "")), str(item.get("count", 0)))
    console.print(table)
    if verbose:
        _render_meta(console, result)


def _render_status(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    d = result.data
    mode = "stub" if d.get("stub_mode") else "native"
    _field(console, "mode", mode)
    for key in ("library_path", "version", "command_count", "help_count", "suggestion_count"):
        if d.get(key) not in (None, ""):
            _field(console, key, d[key])
    if verbose:
        _field(console, "tier1", d.get("tier1"))
        _field(console, "tier2", d.get("tier2"))
        _render_meta(console, result)


# ── Generic fallback ──────────────────────────────────────────────────


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Fallback: key-value pairs for ops without a dedicated renderer."""
    _status_line(console, result)
    for key, value in result.data.items():
        if isinstance(value, (list, dict)):
            _field(console, key, f"{len(value)} entries")
        else:
            _field(console, key, value)
    if verbose:
        _render_meta(console, result)


_OP_RENDERERS: dict[str, Any] = {
    "eval": _render_eval,
    "call": _render_eval,
    "help": _render_help,
    "search": _render_names,
    "category": _render_names,
    "suggest": _render_suggest,
    "categories": _render_categories,
    "status": _render_status,
}
