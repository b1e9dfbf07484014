"""GEN type codes, matching GIAC's C++ ``gen_unary_types`` enum.

Types 0-1 and 20-21 are immediate (no allocation); 2-19 are pointer types.
"""

from __future__ import annotations

from enum import IntEnum


class GenType(IntEnum):
    """Type tag of a native GIAC value."""

    INT = 0
    DOUBLE = 1
    ZINT = 2
    REAL = 3
    CPLX = 4
    POLY = 5
    IDNT = 6
    VECT = 7
    SYMB = 8
    SPOL1 = 9
    FRAC = 10
    EXT = 11
    STRNG = 12
    FUNC = 13
    ROOT = 14
    MOD = 15
    USER = 16
    MAP = 17
    EQW = 18
    GROB = 19
    POINTER = 20
    FLOAT = 21


INTEGER_TYPES = frozenset({GenType.INT, GenType.ZINT})
FLOAT_TYPES = frozenset({GenType.DOUBLE, GenType.REAL, GenType.FLOAT})
NUMERIC_TYPES = INTEGER_TYPES | FLOAT_TYPES | {GenType.CPLX, GenType.FRAC}

# Subtype of a VECT holding a sequence ``a,b,c`` rather than a list ``[a,b,c]``.
SEQ_SUBTYPE = 1


def gen_type_from_code(code: int) -> GenType:
    """Map a raw native type code to :class:`GenType`.

    Codes outside the known range map to ``SYMB``.
    """
    try:
        return GenType(code)
    except ValueError:
        return GenType.SYMB
