"""BaseService — shared foundation for giacbind services.

Every service receives a :class:`GiacRuntime` at construction time and
converts engine exceptions into failed ServiceResults, so callers never
see a raw GiacError.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from giacbind.domain.errors import ErrorKind, GiacError, UnknownCommandError
from giacbind.services.result import ErrorCode, ServiceError, ServiceResult

if TYPE_CHECKING:
    from giacbind.engine.runtime import GiacRuntime

logger = logging.getLogger(__name__)

_KIND_CODES: dict[ErrorKind, ErrorCode] = {
    ErrorKind.PARSE: ErrorCode.PARSE_ERROR,
    ErrorKind.EVAL: ErrorCode.EVAL_ERROR,
    ErrorKind.TYPE: ErrorCode.TYPE_ERROR,
    ErrorKind.RESOURCE: ErrorCode.RESOURCE_ERROR,
}


def error_result(op: str, exc: Exception) -> ServiceResult:
    """Translate an engine exception into a failed ServiceResult."""
    detail: dict[str, object] = {}
    if isinstance(exc, UnknownCommandError):
        code = ErrorCode.UNKNOWN_COMMAND
        detail = {"command": exc.command, "suggestions": exc.suggestions}
        message = exc.message
    elif isinstance(exc, GiacError):
        code = _KIND_CODES[exc.kind]
        detail = {"kind": str(exc.kind)}
        message = exc.message
    elif isinstance(exc, TypeError):
        code = ErrorCode.TYPE_ERROR
        message = str(exc)
    else:
        code = ErrorCode.INVALID_ARGUMENT
        message = str(exc)
    logger.debug("%s failed: %s (%s)", op, message, code)
    return ServiceResult(
        ok=False,
        op=op,
        error=ServiceError(code=code, message=message, detail=detail),
    )


class BaseService:
    """Base for all service-layer classes.

    Usage::

        class EvalService(BaseService):
            def evaluate(self, text: str) -> ServiceResult:
                try:
                    expr = self._runtime.default_context.eval(text)
                except GiacError as exc:
                    return error_result("eval", exc)
                ...
    """

    def __init__(self, runtime: GiacRuntime) -> None:
        self._runtime = runtime

    @property
    def runtime(self) -> GiacRuntime:
        return self._runtime
