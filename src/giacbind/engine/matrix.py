"""GiacMatrix — a rectangular GIAC matrix with linear-algebra helpers.

Elements are addressed 0-based: ``m[i, j]``. Symbolic matrices name
their entries from a base and 1-based indices (``m11``, ``m12``, ...),
switching to underscore separators (``m_1_10``) once any dimension
exceeds 9.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

from giacbind.domain.errors import ErrorKind, GiacError
from giacbind.domain.serialize import to_giac_string
from giacbind.engine.expr import OPERAND_TYPES, GiacExpr
from giacbind.infrastructure.lock import GIAC_LOCK

if TYPE_CHECKING:
    from giacbind.engine.context import GiacContext


def needs_separator(dims: Sequence[int]) -> bool:
    """Whether indexed names need ``_`` separators (any dimension above 9)."""
    return any(d > 9 for d in dims)


def indexed_name(base: str, indices: Sequence[int], separated: bool) -> str:
    """``base`` followed by *indices*, e.g. ``m12`` or ``m_1_10``."""
    if separated:
        return base + "_" + "_".join(str(i) for i in indices)
    return base + "".join(str(i) for i in indices)


def _check_rectangular(rows: Sequence[Any]) -> tuple[int, int]:
    if not rows:
        raise ValueError("A matrix needs at least one row")
    for row in rows:
        if not isinstance(row, (list, tuple)):
            msg = f"Matrix rows must be lists or tuples, got {type(row).__name__}"
            raise ValueError(msg)
    width = len(rows[0])
    if width == 0:
        raise ValueError("A matrix needs at least one column")
    if any(len(row) != width for row in rows):
        raise ValueError("All rows must have the same length")
    return len(rows), width


class GiacMatrix:
    """A rows x cols matrix held as a GIAC expression."""

    def __init__(
        self,
        data: Sequence[Sequence[Any]] | GiacExpr,
        ctx: GiacContext | None = None,
    ) -> None:
        if isinstance(data, GiacExpr):
            self._expr = data
            self._rows, self._cols = self._native_shape(data)
            return
        rows, cols = _check_rectangular(data)
        expr = GiacExpr.from_value(to_giac_string([list(row) for row in data]), ctx)
        self._expr = expr
        self._rows, self._cols = rows, cols

    @staticmethod
    def _native_shape(expr: GiacExpr) -> tuple[int, int]:
        handle = expr.handle
        native = expr.runtime.require_native()
        with GIAC_LOCK:
            rows = native.matrix_rows(handle)
            cols = native.matrix_cols(handle)
        if rows <= 0 or cols <= 0:
            msg = f"Expression is not a matrix: {expr.text}"
            raise ValueError(msg)
        return rows, cols

    @classmethod
    def symbolic(cls, base: str, rows: int, cols: int | None = None) -> GiacMatrix:
        """Matrix of indexed symbols; ``cols=None`` builds a column vector.

        Raises:
            ValueError: A dimension is not positive.
        """
        dims = (rows,) if cols is None else (rows, cols)
        for d in dims:
            if d <= 0:
                msg = f"Dimensions must be positive, got {d}"
                raise ValueError(msg)
        separated = needs_separator(dims)
        if cols is None:
            data = [[indexed_name(base, (i,), separated)] for i in range(1, rows + 1)]
        else:
            data = [
                [indexed_name(base, (i, j), separated) for j in range(1, cols + 1)]
                for i in range(1, rows + 1)
            ]
        return cls(data)

    # --- shape ---

    @property
    def expr(self) -> GiacExpr:
        return self._expr

    @property
    def rows(self) -> int:
        return self._rows

    @property
    def cols(self) -> int:
        return self._cols

    @property
    def shape(self) -> tuple[int, int]:
        return self._rows, self._cols

    def _require_square(self, operation: str) -> None:
        if self._rows != self._cols:
            msg = f"{operation} requires a square matrix, got {self._rows}x{self._cols}"
            raise ValueError(msg)

    # --- elements ---

    def __getitem__(self, key: tuple[int, int]) -> GiacExpr:
        if not isinstance(key, tuple) or len(key) != 2:
            raise TypeError("Matrix indices must be a (row, col) pair")
        i, j = key
        if not (0 <= i < self._rows and 0 <= j < self._cols):
            msg = f"Index ({i}, {j}) out of range for {self._rows}x{self._cols} matrix"
            raise IndexError(msg)
        handle = self._expr.handle
        native = self._expr.runtime.require_native()
        with GIAC_LOCK:
            gen = native.matrix_at(handle, i, j)
        if gen is None:
            raise GiacError(f"Failed to read matrix element ({i}, {j})", ErrorKind.EVAL)
        return GiacExpr(gen, self._expr.runtime, self._expr._ctx)

    def to_list(self) -> list[list[GiacExpr]]:
        """Row-major nested list of element expressions."""
        return [[self[i, j] for j in range(self._cols)] for i in range(self._rows)]

    # --- linear algebra ---

    def _call(self, name: str) -> GiacExpr:
        return self._expr.runtime.dispatcher.call(name, self._expr, ctx=self._expr._ctx)

    def det(self) -> GiacExpr:
        self._require_square("Determinant")
        return self._call("det")

    def inv(self) -> GiacMatrix:
        self._require_square("Inverse")
        return GiacMatrix(self._call("inv"))

    def trace(self) -> GiacExpr:
        self._require_square("Trace")
        return self._call("trace")

    def transpose(self) -> GiacMatrix:
        return GiacMatrix(self._call("transpose"))

    @property
    def T(self) -> GiacMatrix:  # noqa: N802
        return self.transpose()

    def _combine(self, name: str, symbol: str, other: Any) -> GiacMatrix:
        dispatcher = self._expr.runtime.dispatcher
        result = dispatcher.binary_op(name, symbol, self._expr, other, ctx=self._expr._ctx)
        return GiacMatrix(result)

    def __add__(self, other: Any) -> GiacMatrix:
        if not isinstance(other, GiacMatrix):
            return NotImplemented
        if other.shape != self.shape:
            msg = f"Cannot add {self._rows}x{self._cols} and {other.rows}x{other.cols} matrices"
            raise ValueError(msg)
        return self._combine("add", "+", other._expr)

    def __sub__(self, other: Any) -> GiacMatrix:
        if not isinstance(other, GiacMatrix):
            return NotImplemented
        if other.shape != self.shape:
            msg = (
                f"Cannot subtract {other.rows}x{other.cols} from {self._rows}x{self._cols} matrix"
            )
            raise ValueError(msg)
        return self._combine("sub", "-", other._expr)

    def __matmul__(self, other: Any) -> GiacMatrix:
        if not isinstance(other, GiacMatrix):
            return NotImplemented
        if self._cols != other.rows:
            msg = (
                f"Cannot multiply {self._rows}x{self._cols} by {other.rows}x{other.cols}: "
                "inner dimensions differ"
            )
            raise ValueError(msg)
        return self._combine("mul", "*", other._expr)

    def __mul__(self, other: Any) -> GiacMatrix:
        if isinstance(other, GiacMatrix):
            return self.__matmul__(other)
        if isinstance(other, (GiacExpr, *OPERAND_TYPES)):
            return self._combine("mul", "*", other)
        return NotImplemented

    def __rmul__(self, other: Any) -> GiacMatrix:
        if isinstance(other, (GiacExpr, *OPERAND_TYPES)):
            return self._combine("mul", "*", other)
        return NotImplemented

    # --- display ---

    def __giac__(self) -> str:
        return self._expr.text

    def __str__(self) -> str:
        return self._expr.text

    def __repr__(self) -> str:
        return f"GiacMatrix({self._rows}x{self._cols})"

    def _repr_latex_(self) -> str | None:
        return self._expr._repr_latex_()

    def release(self) -> None:
        self._expr.release()
