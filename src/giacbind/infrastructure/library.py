"""cffi (ABI mode) boundary to the ``libgiac_c`` wrapper library.

The wrapper exposes GIAC through C linkage: opaque ``giac_context`` and
``giac_gen`` pointers, string evaluation, by-name application, typed
entry points for a hot set of operations, and introspection.

INVARIANT: Nothing raised by native code crosses this boundary. Every
function returns a valid pointer or NULL, and this module translates
NULL to ``None``. Every native call runs under ``GIAC_LOCK``.
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from cffi import FFI

from giacbind.infrastructure.lock import locked

logger = logging.getLogger(__name__)

WRAPPER_ENV_VAR = "GIACBIND_WRAPPER_LIB"
BARE_LIBRARY_NAME = "giac_c"

TYPED_UNARY: tuple[str, ...] = (
    "sin", "cos", "tan", "asin", "acos", "atan", "exp", "ln", "sqrt",
    "abs", "sign", "floor", "ceil", "re", "im", "conj",
    "factor", "expand", "simplify", "normal", "evalf", "neg",
)  # fmt: skip
TYPED_BINARY: tuple[str, ...] = (
    "add", "sub", "mul", "div", "pow", "gcd", "lcm", "diff", "integrate", "solve",
)  # fmt: skip
TYPED_TERNARY: tuple[str, ...] = ("subst", "limit", "series")

TYPED_BY_ARITY: dict[int, tuple[str, ...]] = {
    1: TYPED_UNARY,
    2: TYPED_BINARY,
    3: TYPED_TERNARY,
}

# Native last-error codes
ERROR_NONE = 0
ERROR_PARSE = 1
ERROR_EVAL = 2

CDEF = """
typedef struct giac_context giac_context;
typedef struct giac_gen giac_gen;

const char* giac_version(void);
giac_context* giac_context_new(void);
void giac_context_free(giac_context* ctx);

giac_gen* giac_eval_string(giac_context* ctx, const char* text);
void giac_gen_free(giac_gen* g);
char* giac_gen_to_string(const giac_gen* g, giac_context* ctx);
void giac_string_free(char* s);
int giac_gen_type(const giac_gen* g);
int giac_gen_subtype(const giac_gen* g);

int giac_last_error_kind(void);
const char* giac_last_error_message(void);

giac_gen* giac_apply_0(giac_context* ctx, const char* name);
giac_gen* giac_apply_1(giac_context* ctx, const char* name, const giac_gen* a);
giac_gen* giac_apply_2(giac_context* ctx, const char* name, const giac_gen* a,
                       const giac_gen* b);
giac_gen* giac_apply_3(giac_context* ctx, const char* name, const giac_gen* a,
                       const giac_gen* b, const giac_gen* c);
giac_gen* giac_apply_n(giac_context* ctx, const char* name, const giac_gen** args, size_t n);

int giac_vector_size(const giac_gen* g);
giac_gen* giac_vector_at(const giac_gen* g, int i);
int giac_matrix_rows(const giac_gen* g);
int giac_matrix_cols(const giac_gen* g);
giac_gen* giac_matrix_at(const giac_gen* g, int i, int j);

char* giac_list_commands(void);
int giac_help_count(void);
char* giac_help(const char* name);
void giac_set_xcasroot(const char* path);
int giac_init_help(const char* aide_cas_path);
"""


def _typed_cdef() -> str:
    params = {
        1: "const giac_gen* a",
        2: "const giac_gen* a, const giac_gen* b",
        3: "const giac_gen* a, const giac_gen* b, const giac_gen* c",
    }
    lines = []
    for arity, names in TYPED_BY_ARITY.items():
        for name in names:
            lines.append(f"giac_gen* giac_{name}(giac_context* ctx, {params[arity]});")
    return "\n".join(lines)


ffi = FFI()
ffi.cdef(CDEF)
ffi.cdef(_typed_cdef())


# ---------------------------------------------------------------------------
# Discovery
# ---------------------------------------------------------------------------


def platform_library_name() -> str:
    """File name of the wrapper library on this platform."""
    if sys.platform == "darwin":
        return "libgiac_c.dylib"
    if os.name == "nt":
        return "giac_c.dll"
    return "libgiac_c.so"


def _package_dirs() -> list[Path]:
    pkg_dir = Path(__file__).resolve().parent.parent
    return [pkg_dir / "deps", pkg_dir / "build", pkg_dir.parent.parent / "deps"]


def _system_dirs() -> list[Path]:
    return [
        Path("/usr/local/lib"),
        Path("/usr/lib"),
        Path("/usr/lib64"),
        Path("/opt/homebrew/lib"),
    ]


def _resolve_candidate(candidate: Path, lib_name: str) -> Path | None:
    if candidate.is_file():
        return candidate
    if candidate.is_dir() and (candidate / lib_name).is_file():
        return candidate / lib_name
    return None


def find_wrapper_library(configured: str | None = None) -> Path | None:
    """Locate ``libgiac_c`` on disk.

    Search order: ``GIACBIND_WRAPPER_LIB``, then *configured* (file or
    directory), then ``deps/`` and ``build/`` next to the package, then
    common system library directories. Returns ``None`` when no file is
    found; callers may still try a bare-name ``dlopen``.
    """
    lib_name = platform_library_name()
    explicit = [value for value in (os.environ.get(WRAPPER_ENV_VAR), configured) if value]
    for value in explicit:
        found = _resolve_candidate(Path(value).expanduser(), lib_name)
        if found is not None:
            return found
        logger.warning("Configured wrapper library not found: %s", value)

    for directory in [*_package_dirs(), *_system_dirs()]:
        found = _resolve_candidate(directory, lib_name)
        if found is not None:
            return found
    return None


def find_help_database(xcasroot: str | None = None, giac_path: str | None = None) -> Path | None:
    """Locate the ``aide_cas`` help database, or ``None``."""
    roots: list[Path] = []
    for value in (xcasroot, giac_path):
        if value:
            root = Path(value).expanduser()
            roots.extend([root, root / "share" / "giac"])
    roots.extend([Path("/usr/local/share/giac"), Path("/usr/share/giac")])
    for root in roots:
        candidate = root / "aide_cas"
        if candidate.is_file():
            return candidate
    return None


# ---------------------------------------------------------------------------
# Boundary
# ---------------------------------------------------------------------------


def _handle(ptr: Any) -> Any:
    """Translate ``ffi.NULL`` to the managed null sentinel."""
    if ptr == ffi.NULL:
        return None
    return ptr


class NativeLibrary:
    """Thin, locked wrapper over the loaded ``libgiac_c`` symbols.

    Handles are raw cffi pointers or ``None``. Failures are reported as
    ``None`` results plus :meth:`last_error`; nothing here raises for a
    native failure.
    """

    def __init__(self, lib: Any, path: str | None = None) -> None:
        self._lib = lib
        self.path = path
        self._typed: dict[tuple[str, int], Any] = {}
        for arity, names in TYPED_BY_ARITY.items():
            for name in names:
                fn = getattr(lib, f"giac_{name}", None)
                if fn is not None:
                    self._typed[(name, arity)] = fn
        self._apply = {
            arity: fn
            for arity in range(4)
            if (fn := getattr(lib, f"giac_apply_{arity}", None)) is not None
        }
        self._apply_n = getattr(lib, "giac_apply_n", None)

    # --- strings ---

    def _take_string(self, ptr: Any) -> str:
        if ptr == ffi.NULL:
            return ""
        try:
            return ffi.string(ptr).decode("utf-8", errors="replace")
        finally:
            self._lib.giac_string_free(ptr)

    @staticmethod
    def _borrow_string(ptr: Any) -> str:
        if ptr == ffi.NULL:
            return ""
        return ffi.string(ptr).decode("utf-8", errors="replace")

    # --- lifecycle ---

    @locked
    def version(self) -> str:
        return self._borrow_string(self._lib.giac_version())

    @locked
    def context_new(self) -> Any:
        return _handle(self._lib.giac_context_new())

    @locked
    def context_free(self, ctx: Any) -> None:
        self._lib.giac_context_free(ctx)

    @locked
    def gen_free(self, gen: Any) -> None:
        self._lib.giac_gen_free(gen)

    # --- evaluation ---

    @locked
    def eval_string(self, ctx: Any, text: str) -> Any:
        return _handle(self._lib.giac_eval_string(ctx, text.encode("utf-8")))

    @locked
    def to_string(self, gen: Any, ctx: Any) -> str:
        return self._take_string(self._lib.giac_gen_to_string(gen, ctx))

    @locked
    def gen_type(self, gen: Any) -> int:
        return int(self._lib.giac_gen_type(gen))

    @locked
    def gen_subtype(self, gen: Any) -> int:
        return int(self._lib.giac_gen_subtype(gen))

    @locked
    def last_error(self) -> tuple[int, str]:
        """``(kind_code, message)`` of the most recent native failure."""
        kind = int(self._lib.giac_last_error_kind())
        return kind, self._borrow_string(self._lib.giac_last_error_message())

    # --- dispatch tiers ---

    def has_typed(self, name: str, arity: int) -> bool:
        return (name, arity) in self._typed

    @locked
    def call_typed(self, name: str, ctx: Any, *args: Any) -> Any:
        fn = self._typed.get((name, len(args)))
        if fn is None:
            return None
        return _handle(fn(ctx, *args))

    def has_apply(self, arity: int) -> bool:
        return arity in self._apply or self._apply_n is not None

    @locked
    def apply(self, ctx: Any, name: str, args: Sequence[Any]) -> Any:
        encoded = name.encode("utf-8")
        fn = self._apply.get(len(args))
        if fn is not None:
            return _handle(fn(ctx, encoded, *args))
        if self._apply_n is None:
            return None
        array = ffi.new("const giac_gen*[]", list(args))
        return _handle(self._apply_n(ctx, encoded, array, len(args)))

    # --- vectors and matrices ---

    @locked
    def vector_size(self, gen: Any) -> int:
        return int(self._lib.giac_vector_size(gen))

    @locked
    def vector_at(self, gen: Any, index: int) -> Any:
        return _handle(self._lib.giac_vector_at(gen, index))

    @locked
    def matrix_rows(self, gen: Any) -> int:
        return int(self._lib.giac_matrix_rows(gen))

    @locked
    def matrix_cols(self, gen: Any) -> int:
        return int(self._lib.giac_matrix_cols(gen))

    @locked
    def matrix_at(self, gen: Any, row: int, col: int) -> Any:
        return _handle(self._lib.giac_matrix_at(gen, row, col))

    # --- introspection ---

    @locked
    def list_commands(self) -> list[str]:
        raw = self._take_string(self._lib.giac_list_commands())
        return [line.strip() for line in raw.split("\n") if line.strip()]

    @locked
    def help_count(self) -> int:
        return int(self._lib.giac_help_count())

    @locked
    def help(self, name: str) -> str:
        return self._take_string(self._lib.giac_help(name.encode("utf-8")))

    @locked
    def set_xcasroot(self, path: str) -> None:
        self._lib.giac_set_xcasroot(path.encode("utf-8"))

    @locked
    def init_help(self, aide_cas: str) -> bool:
        return bool(self._lib.giac_init_help(aide_cas.encode("utf-8")))


def load_native_library(configured: str | None = None) -> NativeLibrary:
    """Find and ``dlopen`` the wrapper library.

    Raises:
        OSError: The library could not be found or loaded.
    """
    path = find_wrapper_library(configured)
    target = str(path) if path is not None else BARE_LIBRARY_NAME
    try:
        lib = ffi.dlopen(target)
    except OSError as exc:
        msg = f"Failed to load GIAC wrapper library from {target}: {exc}"
        raise OSError(msg) from exc
    logger.debug("Loaded GIAC wrapper library from %s", target)
    return NativeLibrary(lib, str(path) if path is not None else target)
