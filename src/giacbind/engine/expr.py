"""GiacExpr — a managed GIAC value with Python operator and protocol support.

Each GiacExpr exclusively owns one native ``giac_gen`` handle. Operations
never mutate an expression; they return new ones.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from decimal import Decimal
from fractions import Fraction
from typing import TYPE_CHECKING, Any

from giacbind.domain.errors import ErrorKind, GiacError
from giacbind.domain.gen_types import (
    FLOAT_TYPES,
    INTEGER_TYPES,
    NUMERIC_TYPES,
    GenType,
    gen_type_from_code,
)
from giacbind.domain.handles import OpaqueHandle
from giacbind.domain.serialize import build_command_string, infix_string
from giacbind.infrastructure.lock import GIAC_LOCK

if TYPE_CHECKING:
    from giacbind.engine.context import GiacContext
    from giacbind.engine.runtime import GiacRuntime

logger = logging.getLogger(__name__)

#: Python values that combine with expressions through arithmetic operators.
OPERAND_TYPES = (int, float, complex, Fraction, Decimal)

BOOLEAN_TEXT = {"true": True, "false": False}


def strip_quotes(text: str) -> str:
    """Remove one pair of surrounding double quotes, if present."""
    if len(text) >= 2 and text.startswith('"') and text.endswith('"'):
        return text[1:-1]
    return text


class GiacExpr(OpaqueHandle):
    """A GIAC expression backed by a native handle."""

    _handle_label = "expression"

    def __init__(self, handle: Any, runtime: GiacRuntime, ctx: GiacContext | None = None) -> None:
        native = runtime.require_native()
        super().__init__(handle, native.gen_free)
        self._runtime = runtime
        self._ctx = ctx
        self._text: str | None = None

    @classmethod
    def from_value(cls, value: Any, ctx: GiacContext | None = None) -> GiacExpr:
        """Evaluate a Python value (or GIAC source text) into an expression."""
        from giacbind.domain.serialize import to_giac_string
        from giacbind.engine.runtime import get_runtime

        if isinstance(value, GiacExpr):
            return value
        context = ctx or get_runtime().default_context
        return context.eval(to_giac_string(value))

    # --- plumbing ---

    @property
    def runtime(self) -> GiacRuntime:
        return self._runtime

    @property
    def context(self) -> GiacContext:
        return self._ctx or self._runtime.default_context

    def _call(self, name: str, *args: Any) -> GiacExpr:
        return self._runtime.dispatcher.call(name, self, *args, ctx=self._ctx)

    def _eval(self, text: str) -> GiacExpr:
        return self.context.eval(text)

    # --- text ---

    @property
    def text(self) -> str:
        """GIAC's textual form of this expression."""
        handle = self.handle
        if self._text is None:
            native = self._runtime.require_native()
            ctx = self.context.handle
            with GIAC_LOCK:
                self._text = native.to_string(handle, ctx)
        return self._text

    def __giac__(self) -> str:
        return self.text

    def __str__(self) -> str:
        return self.text

    def __repr__(self) -> str:
        if self.released:
            return "GiacExpr(<released>)"
        return f"GiacExpr({self.text!r})"

    def _repr_latex_(self) -> str | None:
        if not self._runtime.settings.output.latex_display:
            return None
        return f"${self.latex()}$"

    def latex(self) -> str:
        """LaTeX source for this expression; falls back to plain text."""
        try:
            rendered = self._call("latex").text
        except GiacError:
            logger.debug("latex() failed for %s", self.text, exc_info=True)
            return self.text
        stripped = strip_quotes(rendered)
        return stripped if stripped != rendered else self.text

    # --- arithmetic ---

    def _binary(self, name: str, symbol: str, other: Any, *, reflected: bool = False) -> Any:
        if not isinstance(other, (GiacExpr, *OPERAND_TYPES)):
            return NotImplemented
        left, right = (other, self) if reflected else (self, other)
        return self._runtime.dispatcher.binary_op(name, symbol, left, right, ctx=self._ctx)

    def __add__(self, other: Any) -> GiacExpr:
        return self._binary("add", "+", other)

    def __radd__(self, other: Any) -> GiacExpr:
        return self._binary("add", "+", other, reflected=True)

    def __sub__(self, other: Any) -> GiacExpr:
        return self._binary("sub", "-", other)

    def __rsub__(self, other: Any) -> GiacExpr:
        return self._binary("sub", "-", other, reflected=True)

    def __mul__(self, other: Any) -> GiacExpr:
        return self._binary("mul", "*", other)

    def __rmul__(self, other: Any) -> GiacExpr:
        return self._binary("mul", "*", other, reflected=True)

    def __truediv__(self, other: Any) -> GiacExpr:
        return self._binary("div", "/", other)

    def __rtruediv__(self, other: Any) -> GiacExpr:
        return self._binary("div", "/", other, reflected=True)

    def __pow__(self, other: Any) -> GiacExpr:
        return self._binary("pow", "^", other)

    def __rpow__(self, other: Any) -> GiacExpr:
        return self._binary("pow", "^", other, reflected=True)

    def __neg__(self) -> GiacExpr:
        return self._runtime.dispatcher.unary_op("neg", "-", self, ctx=self._ctx)

    def __pos__(self) -> GiacExpr:
        return self

    # --- equality and equations ---

    def __eq__(self, other: object) -> bool:
        """Symbolic equality: ``simplify((a)-(b))`` evaluates to ``0``."""
        if not isinstance(other, (GiacExpr, *OPERAND_TYPES)):
            return NotImplemented
        difference = self._eval(f"simplify({infix_string('-', self, other)})")
        return difference.text == "0"

    def __ne__(self, other: object) -> bool:
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    def __hash__(self) -> int:
        """Numbers hash like the equal Python number; anything else by its text.

        Equality is symbolic (``x+x == 2*x``), so two equal non-numeric
        expressions with different printed forms still hash differently.
        Use numeric values or canonical forms as set members and dict keys.
        """
        gen_type = self.giac_type
        if gen_type in INTEGER_TYPES or gen_type in FLOAT_TYPES or gen_type is GenType.FRAC:
            return hash(self.to_python())
        return hash(self.text)

    def __bool__(self) -> bool:
        """False only for the literal zero and ``false`` values."""
        return self.text not in ("0", "0.0", "false")

    def eq(self, other: Any) -> GiacExpr:
        """Build the equation ``self = other`` (unevaluated on both sides)."""
        return self._eval(infix_string("=", self, other))

    def __call__(self, *args: Any) -> GiacExpr:
        """Function application: ``u(0)`` for ``u = giac_var("u")``."""
        return self._eval(build_command_string(self.text, args))

    # --- math helpers ---

    def sin(self) -> GiacExpr:
        return self._call("sin")

    def cos(self) -> GiacExpr:
        return self._call("cos")

    def tan(self) -> GiacExpr:
        return self._call("tan")

    def asin(self) -> GiacExpr:
        return self._call("asin")

    def acos(self) -> GiacExpr:
        return self._call("acos")

    def atan(self) -> GiacExpr:
        return self._call("atan")

    def exp(self) -> GiacExpr:
        return self._call("exp")

    def log(self) -> GiacExpr:
        """Natural logarithm."""
        return self._call("ln")

    def sqrt(self) -> GiacExpr:
        return self._call("sqrt")

    def abs(self) -> GiacExpr:
        return self._call("abs")

    def sign(self) -> GiacExpr:
        return self._call("sign")

    def floor(self) -> GiacExpr:
        return self._call("floor")

    def ceil(self) -> GiacExpr:
        return self._call("ceil")

    def real(self) -> GiacExpr:
        return self._call("re")

    def imag(self) -> GiacExpr:
        return self._call("im")

    def conj(self) -> GiacExpr:
        return self._call("conj")

    def evalf(self) -> GiacExpr:
        return self._call("evalf")

    def __abs__(self) -> GiacExpr:
        return self.abs()

    def __floor__(self) -> GiacExpr:
        return self.floor()

    def __ceil__(self) -> GiacExpr:
        return self.ceil()

    # --- introspection ---

    @property
    def giac_type(self) -> GenType:
        handle = self.handle
        native = self._runtime.require_native()
        with GIAC_LOCK:
            code = native.gen_type(handle)
        return gen_type_from_code(code)

    @property
    def subtype(self) -> int:
        handle = self.handle
        native = self._runtime.require_native()
        with GIAC_LOCK:
            return native.gen_subtype(handle)

    def is_integer(self) -> bool:
        return self.giac_type in INTEGER_TYPES

    def is_numeric(self) -> bool:
        return self.giac_type in NUMERIC_TYPES

    def is_float(self) -> bool:
        return self.giac_type in FLOAT_TYPES

    def is_vector(self) -> bool:
        return self.giac_type is GenType.VECT

    def is_symbolic(self) -> bool:
        return self.giac_type is GenType.SYMB

    def is_identifier(self) -> bool:
        return self.giac_type is GenType.IDNT

    def is_fraction(self) -> bool:
        return self.giac_type is GenType.FRAC

    def is_complex(self) -> bool:
        return self.giac_type is GenType.CPLX

    def is_string(self) -> bool:
        return self.giac_type is GenType.STRNG

    def is_boolean(self) -> bool:
        return self.text in BOOLEAN_TEXT

    def numer(self) -> GiacExpr:
        return self._call("numer")

    def denom(self) -> GiacExpr:
        return self._call("denom")

    def real_part(self) -> GiacExpr:
        return self.real()

    def imag_part(self) -> GiacExpr:
        return self.imag()

    def funcname(self) -> str:
        """Name of the outermost function of a symbolic expression, else ``""``."""
        if not self.is_symbolic():
            return ""
        return strip_quotes(self._call("sommet").text)

    # --- sequence protocol (vectors) ---

    def _require_vector(self) -> None:
        if not self.is_vector():
            msg = f"GIAC value of type {self.giac_type.name} is not a vector"
            raise TypeError(msg)

    def __len__(self) -> int:
        self._require_vector()
        handle = self.handle
        native = self._runtime.require_native()
        with GIAC_LOCK:
            return native.vector_size(handle)

    def _element(self, index: int) -> GiacExpr:
        handle = self.handle
        native = self._runtime.require_native()
        with GIAC_LOCK:
            gen = native.vector_at(handle, index)
        if gen is None:
            raise GiacError(f"Failed to read element {index} of {self.text}", ErrorKind.EVAL)
        return GiacExpr(gen, self._runtime, self._ctx)

    def __getitem__(self, index: int | slice) -> Any:
        size = len(self)
        if isinstance(index, slice):
            return [self._element(i) for i in range(*index.indices(size))]
        if not isinstance(index, int):
            msg = f"Vector indices must be integers or slices, not {type(index).__name__}"
            raise TypeError(msg)
        position = index + size if index < 0 else index
        if not 0 <= position < size:
            msg = f"Index {index} out of range for vector of length {size}"
            raise IndexError(msg)
        return self._element(position)

    def __iter__(self) -> Iterator[GiacExpr]:
        for i in range(len(self)):
            yield self._element(i)

    def __contains__(self, item: object) -> bool:
        return any(element == item for element in self)

    # --- conversion ---

    def _type_error(self, target: str) -> GiacError:
        return GiacError(
            f"Cannot convert {self.giac_type.name} value '{self.text}' to {target}",
            ErrorKind.TYPE,
        )

    def to_python(self) -> Any:
        """Convert to the closest Python value.

        Integers become ``int``, floats ``float``, fractions ``Fraction``,
        complex numbers ``complex``, vectors ``list``, strings ``str``, and
        ``true``/``false`` ``bool``. Anything else is returned unchanged.
        """
        text = self.text
        if text in BOOLEAN_TEXT:
            return BOOLEAN_TEXT[text]
        gen_type = self.giac_type
        if gen_type in INTEGER_TYPES:
            return int(text)
        if gen_type in FLOAT_TYPES:
            return float(self)
        if gen_type is GenType.FRAC:
            return self.to_fraction()
        if gen_type is GenType.CPLX:
            return complex(self)
        if gen_type is GenType.VECT:
            return [element.to_python() for element in self]
        if gen_type is GenType.STRNG:
            return strip_quotes(text)
        return self

    def to_fraction(self) -> Fraction:
        """Exact rational value. Integers and fractions only."""
        gen_type = self.giac_type
        if gen_type in INTEGER_TYPES or gen_type is GenType.FRAC:
            return Fraction(self.text.replace(" ", ""))
        raise self._type_error("Fraction")

    def __int__(self) -> int:
        gen_type = self.giac_type
        if gen_type in INTEGER_TYPES:
            return int(self.text)
        if gen_type in FLOAT_TYPES:
            return int(float(self.text))
        if gen_type is GenType.FRAC:
            return int(self.to_fraction())
        raise self._type_error("int")

    def __float__(self) -> float:
        gen_type = self.giac_type
        if gen_type in INTEGER_TYPES or gen_type in FLOAT_TYPES:
            return float(self.text)
        if gen_type is GenType.FRAC:
            return float(self.to_fraction())
        raise self._type_error("float")

    def __complex__(self) -> complex:
        gen_type = self.giac_type
        if gen_type is GenType.CPLX:
            return complex(float(self.real()), float(self.imag()))
        if gen_type in NUMERIC_TYPES:
            return complex(float(self))
        raise self._type_error("complex")
