"""Result envelope returned by every service call.

Engine failures never cross the service boundary as exceptions: they are
translated into a ``ServiceError`` with one of the ``ErrorCode`` values,
which the CLI renders as text or JSON.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field


class ErrorCode(StrEnum):
    """Stable error codes carried by ServiceError."""

    PARSE_ERROR = "PARSE_ERROR"
    EVAL_ERROR = "EVAL_ERROR"
    TYPE_ERROR = "TYPE_ERROR"
    RESOURCE_ERROR = "RESOURCE_ERROR"
    UNKNOWN_COMMAND = "UNKNOWN_COMMAND"
    INVALID_ARGUMENT = "INVALID_ARGUMENT"


class ServiceError(BaseModel):
    """Structured error payload within a ServiceResult."""

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)


class ServiceResult(BaseModel):
    """Universal return type for all service operations.

    Attributes:
        ok: Whether the operation succeeded.
        op: Name of the operation (e.g. ``"eval"``).
        data: Operation-specific payload on success.
        warnings: Non-fatal issues encountered during the operation.
        error: Structured error if ``ok`` is False.
        meta: Span tree and other verbose-mode extras.
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None
