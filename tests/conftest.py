"""Shared pytest fixtures for giacbind tests.

``FakeNative`` stands in for the loaded wrapper library. It implements the
same surface as ``NativeLibrary`` over plain Python objects: evaluation
echoes its input unless a canned response is registered, and every native
call is recorded so tests can assert which dispatch tier ran.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from collections.abc import Callable, Generator, Sequence
from typing import Any

import pytest
from click.testing import CliRunner

from giacbind.config.settings import GiacSettings
from giacbind.domain.gen_types import GenType
from giacbind.engine.constants import clear_constants_cache
from giacbind.engine.runtime import GiacRuntime, init_runtime, reset_runtime
from giacbind.engine.tables import clear_commands_cache
from giacbind.plugins.manager import PluginManager
from giacbind.services.telemetry import _current_span, disable_telemetry

_INT_RE = re.compile(r"^-?\d+$")
_FLOAT_RE = re.compile(r"^-?\d+\.\d*(e[-+]?\d+)?$")
_FRAC_RE = re.compile(r"^-?\d+/\d+$")
_IDENT_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

DEFAULT_COMMANDS = [
    "abs", "acos", "and", "asin", "atan", "ceil", "conj", "cos", "denom", "det",
    "diff", "evalf", "exp", "expand", "factor", "floor", "gcd", "ifactor", "im",
    "int", "integrate", "inv", "laplace", "latex", "lcm", "limit", "ln", "numer",
    "print", "re", "series", "sign", "simplify", "sin", "solve", "sommet", "sqrt",
    "subst", "tan", "trace", "transpose",
]  # fmt: skip

DEFAULT_HELP = {
    "factor": (
        "Description: Factorizes a polynomial.\n"
        "Related: ifactor, partfrac, normal\n"
        "Examples: factor(x^4-1);factor(x^4-4,sqrt(2))"
    ),
    "ifactor": "Description: Factorization of an integer into prime factors.",
    "integrate": (
        "Description: Indefinite or definite integral of an expression.\n"
        "Related: diff, sum\n"
        "Examples: integrate(x^2,x)"
    ),
}


def split_top_level(text: str) -> list[str]:
    """Split *text* on commas that are not nested in brackets or parentheses."""
    parts: list[str] = []
    depth = 0
    current: list[str] = []
    for char in text:
        if char in "([{":
            depth += 1
        elif char in ")]}":
            depth -= 1
        if char == "," and depth == 0:
            parts.append("".join(current).strip())
            current = []
        else:
            current.append(char)
    if current or parts:
        parts.append("".join(current).strip())
    return [p for p in parts if p]


class FakeGen:
    """A native value: text plus a type tag and, for vectors, its elements."""

    def __init__(self, text: str, type_code: int, subtype: int = 0) -> None:
        self.text = text
        self.type_code = type_code
        self.subtype = subtype
        self.items = split_top_level(text[1:-1]) if type_code == GenType.VECT else []

    def __repr__(self) -> str:
        return f"FakeGen({self.text!r})"


class FakeNative:
    """In-memory replacement for ``NativeLibrary``."""

    def __init__(self) -> None:
        self.path = "/fake/libgiac_c.so"
        self.commands: list[str] = list(DEFAULT_COMMANDS)
        self.helps: dict[str, str] = dict(DEFAULT_HELP)
        self.responses: dict[str, str] = {}
        self.types: dict[str, GenType] = {}
        self.failures: dict[str, tuple[int, str]] = {}
        self.typed: dict[tuple[str, int], Callable[..., str | None]] = {}
        self.applied: dict[str, Callable[..., str | None]] = {}
        self.apply_enabled = False
        self.list_error: Exception | None = None
        self.calls: list[tuple[str, Any]] = []
        self.freed: list[Any] = []
        self.freed_contexts: list[Any] = []
        self.help_db: str | None = None
        self._last_error: tuple[int, str] = (0, "")

    # --- helpers ---

    def make_gen(self, text: str) -> FakeGen:
        if text in self.types:
            return FakeGen(text, self.types[text])
        if _INT_RE.match(text) or text in ("true", "false"):
            return FakeGen(text, GenType.INT)
        if _FLOAT_RE.match(text):
            return FakeGen(text, GenType.DOUBLE)
        if _FRAC_RE.match(text):
            return FakeGen(text, GenType.FRAC)
        if len(text) >= 2 and text.startswith('"') and text.endswith('"'):
            return FakeGen(text, GenType.STRNG)
        if text.startswith("[") and text.endswith("]"):
            return FakeGen(text, GenType.VECT)
        if _IDENT_RE.match(text):
            return FakeGen(text, GenType.IDNT)
        return FakeGen(text, GenType.SYMB)

    def evals(self) -> list[str]:
        return [detail for name, detail in self.calls if name == "eval_string"]

    def calls_named(self, name: str) -> list[Any]:
        return [detail for call, detail in self.calls if call == name]

    # --- lifecycle ---

    def version(self) -> str:
        return "1.9.0-fake"

    def context_new(self) -> Any:
        return object()

    def context_free(self, ctx: Any) -> None:
        self.freed_contexts.append(ctx)

    def gen_free(self, gen: Any) -> None:
        self.freed.append(gen)

    # --- evaluation ---

    def eval_string(self, ctx: Any, text: str) -> FakeGen | None:
        self.calls.append(("eval_string", text))
        if text in self.failures:
            self._last_error = self.failures[text]
            return None
        self._last_error = (0, "")
        return self.make_gen(self.responses.get(text, text))

    def to_string(self, gen: FakeGen, ctx: Any) -> str:
        self.calls.append(("to_string", gen.text))
        return gen.text

    def gen_type(self, gen: FakeGen) -> int:
        return int(gen.type_code)

    def gen_subtype(self, gen: FakeGen) -> int:
        return gen.subtype

    def last_error(self) -> tuple[int, str]:
        return self._last_error

    # --- dispatch tiers ---

    def has_typed(self, name: str, arity: int) -> bool:
        return (name, arity) in self.typed

    def call_typed(self, name: str, ctx: Any, *args: FakeGen) -> FakeGen | None:
        self.calls.append(("call_typed", (name, len(args))))
        fn = self.typed.get((name, len(args)))
        result = fn(*(arg.text for arg in args)) if fn is not None else None
        return None if result is None else self.make_gen(result)

    def has_apply(self, arity: int) -> bool:
        return self.apply_enabled

    def apply(self, ctx: Any, name: str, args: Sequence[FakeGen]) -> FakeGen | None:
        self.calls.append(("apply", (name, len(args))))
        fn = self.applied.get(name)
        result = fn(*(arg.text for arg in args)) if fn is not None else None
        return None if result is None else self.make_gen(result)

    # --- vectors and matrices ---

    def vector_size(self, gen: FakeGen) -> int:
        return len(gen.items)

    def vector_at(self, gen: FakeGen, index: int) -> FakeGen | None:
        if not 0 <= index < len(gen.items):
            return None
        return self.make_gen(gen.items[index])

    def _rows(self, gen: FakeGen) -> list[FakeGen]:
        rows = [self.make_gen(item) for item in gen.items]
        if not rows or any(row.type_code != GenType.VECT for row in rows):
            return []
        return rows

    def matrix_rows(self, gen: FakeGen) -> int:
        return len(self._rows(gen))

    def matrix_cols(self, gen: FakeGen) -> int:
        rows = self._rows(gen)
        return len(rows[0].items) if rows else 0

    def matrix_at(self, gen: FakeGen, row: int, col: int) -> FakeGen | None:
        rows = self._rows(gen)
        if not 0 <= row < len(rows) or not 0 <= col < len(rows[row].items):
            return None
        return self.make_gen(rows[row].items[col])

    # --- introspection ---

    def list_commands(self) -> list[str]:
        if self.list_error is not None:
            raise self.list_error
        return list(self.commands)

    def help_count(self) -> int:
        return len(self.helps)

    def help(self, name: str) -> str:
        self.calls.append(("help", name))
        return self.helps.get(name, "")

    def set_xcasroot(self, path: str) -> None:
        self.calls.append(("set_xcasroot", path))

    def init_help(self, aide_cas: str) -> bool:
        self.help_db = aide_cas
        return True


@pytest.fixture
def fake_native() -> FakeNative:
    return FakeNative()


@pytest.fixture
def settings(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> GiacSettings:
    """Default settings, isolated from the caller's environment."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    monkeypatch.delenv("GIACBIND_CONFIG", raising=False)
    monkeypatch.delenv("GIACBIND_WRAPPER_LIB", raising=False)
    return GiacSettings()


@pytest.fixture
def runtime(fake_native: FakeNative, settings: GiacSettings) -> Generator[GiacRuntime]:
    """Process-wide runtime backed by FakeNative, torn down after the test."""
    rt = init_runtime(settings, native=fake_native, plugins=PluginManager())
    try:
        yield rt
    finally:
        reset_runtime()
        clear_constants_cache()
        clear_commands_cache()


@pytest.fixture
def stub_runtime(settings: GiacSettings) -> Generator[GiacRuntime]:
    """Runtime in degraded mode (no native library)."""
    from giacbind.engine import runtime as runtime_mod

    rt = GiacRuntime(None, settings, load_error="libgiac_c not found")
    runtime_mod._runtime = rt
    try:
        yield rt
    finally:
        reset_runtime()
        clear_constants_cache()
        clear_commands_cache()


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def _restore_observability() -> Generator[None]:
    """Undo logging and telemetry changes made by the CLI under test."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    logging.getLogger("giacbind").setLevel(logging.NOTSET)
    disable_telemetry()
    _current_span.set(None)
