"""EvalService — evaluate GIAC text and dispatch commands by name."""

from __future__ import annotations

from typing import Any

from giacbind.domain.errors import GiacError
from giacbind.engine.expr import GiacExpr
from giacbind.services.base import BaseService, error_result
from giacbind.services.result import ServiceResult
from giacbind.services.telemetry import annotate_current, trace_span, traced


def _describe(expr: GiacExpr) -> dict[str, Any]:
    return {"result": expr.text, "type": expr.giac_type.name}


class EvalService(BaseService):
    """Evaluation operations for the CLI."""

    @traced
    def evaluate(self, text: str) -> ServiceResult:
        """Evaluate GIAC source *text* in the default context."""
        try:
            with trace_span("native_eval"):
                expr = self._runtime.default_context.eval(text)
            with expr:
                data = {"input": text, **_describe(expr)}
        except (GiacError, TypeError, ValueError) as exc:
            return error_result("eval", exc)
        return ServiceResult(ok=True, op="eval", data=data)

    @traced
    def call(self, name: str, args: list[str]) -> ServiceResult:
        """Dispatch command *name*; each argument is evaluated as GIAC text first."""
        dispatcher = self._runtime.dispatcher
        evaluated: list[GiacExpr] = []
        try:
            dispatcher.validate(name)
            context = self._runtime.default_context
            with trace_span("evaluate_args"):
                for arg in args:
                    evaluated.append(context.eval(arg))
            with trace_span("dispatch"):
                expr, tier = dispatcher.call_with_tier(name, *evaluated)
                annotate_current(tier=tier)
            with expr:
                data = {
                    "command": name,
                    "args": list(args),
                    "tier": tier,
                    **_describe(expr),
                }
        except (GiacError, TypeError, ValueError) as exc:
            return error_result("call", exc)
        finally:
            for arg in evaluated:
                arg.release()
        return ServiceResult(ok=True, op="call", data=data)
