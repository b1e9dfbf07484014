"""Held (unevaluated) commands with LaTeX display.

``hold_cmd("integrate", x**2, x)`` records a command and its arguments
without calling GIAC. ``release(held)`` executes it through the
dispatcher. Display renders textbook notation for a few commands.
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import BaseModel, ConfigDict

from giacbind.domain.errors import GiacError
from giacbind.domain.serialize import build_command_string
from giacbind.engine.expr import GiacExpr, strip_quotes

logger = logging.getLogger(__name__)


def arg_to_latex(arg: Any) -> str:
    """LaTeX for one held-command argument."""
    if isinstance(arg, GiacExpr):
        try:
            rendered = arg.runtime.dispatcher.call("latex", arg).text
        except GiacError:
            logger.debug("latex() failed for held argument", exc_info=True)
            return arg.text
        if len(rendered) > 2 and rendered.startswith('"') and rendered.endswith('"'):
            return strip_quotes(rendered)
        return arg.text
    if isinstance(arg, (list, tuple)):
        return "[" + ", ".join(arg_to_latex(item) for item in arg) + "]"
    return str(arg)


def _latex_integrate(args: tuple[Any, ...]) -> str:
    if len(args) >= 4:
        expr, var, lower, upper = (arg_to_latex(a) for a in args[:4])
        return f"\\int_{{{lower}}}^{{{upper}}} {expr} \\, d{var}"
    if len(args) >= 2:
        expr, var = (arg_to_latex(a) for a in args[:2])
        return f"\\int {expr} \\, d{var}"
    if len(args) == 1:
        return f"\\int {arg_to_latex(args[0])}"
    return "\\int"


def _latex_diff(args: tuple[Any, ...]) -> str:
    if len(args) >= 3:
        expr, var, order = (arg_to_latex(a) for a in args[:3])
        return f"\\frac{{d^{{{order}}}}}{{d{var}^{{{order}}}}} {expr}"
    if len(args) == 2:
        expr, var = (arg_to_latex(a) for a in args)
        return f"\\frac{{d}}{{d{var}}} {expr}"
    if len(args) == 1:
        return f"\\frac{{d}}{{d?}} {arg_to_latex(args[0])}"
    return "\\frac{d}{d?}"


def _latex_transform(symbol: str, args: tuple[Any, ...], *, inverse: bool) -> str:
    head = f"\\mathcal{{{symbol}}}" + ("^{-1}" if inverse else "")
    if len(args) >= 3:
        return f"{head}\\left\\{{{arg_to_latex(args[0])}\\right\\}}({arg_to_latex(args[2])})"
    if args:
        return f"{head}\\left\\{{{arg_to_latex(args[0])}\\right\\}}"
    return head


def _latex_generic(cmd: str, args: tuple[Any, ...]) -> str:
    if not args:
        return f"\\mathrm{{{cmd}}}()"
    inner = ", ".join(arg_to_latex(a) for a in args)
    return f"\\mathrm{{{cmd}}}\\left({inner}\\right)"


_TRANSFORMS: dict[str, tuple[str, bool]] = {
    "laplace": ("L", False),
    "invlaplace": ("L", True),
    "ilaplace": ("L", True),
    "ztransform": ("Z", False),
    "ztrans": ("Z", False),
    "invztransform": ("Z", True),
    "invztrans": ("Z", True),
}


class HeldCmd(BaseModel):
    """An unevaluated command and its arguments."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    cmd: str
    args: tuple[Any, ...] = ()

    def __giac__(self) -> str:
        return build_command_string(self.cmd, self.args)

    def __str__(self) -> str:
        return f"{self.cmd}({', '.join(str(a) for a in self.args)}) [held]"

    def __repr__(self) -> str:
        return f"HeldCmd: {self}"

    def latex(self) -> str:
        if self.cmd == "integrate":
            return _latex_integrate(self.args)
        if self.cmd == "diff":
            return _latex_diff(self.args)
        if self.cmd in _TRANSFORMS:
            symbol, inverse = _TRANSFORMS[self.cmd]
            return _latex_transform(symbol, self.args, inverse=inverse)
        return _latex_generic(self.cmd, self.args)

    def _repr_latex_(self) -> str:
        return f"$${self.latex()}$$"

    def release(self) -> GiacExpr:
        """Execute the held command."""
        from giacbind.engine.api import invoke_cmd

        return invoke_cmd(self.cmd, *self.args)


def hold_cmd(cmd: str, *args: Any) -> HeldCmd:
    """Record *cmd* applied to *args* without evaluating it."""
    return HeldCmd(cmd=cmd, args=args)


def release(held: HeldCmd) -> GiacExpr:
    """Execute a held command."""
    return held.release()
