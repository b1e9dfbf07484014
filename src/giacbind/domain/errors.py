"""GiacError and the error-kind taxonomy.

Four kinds cover every failure the binding surfaces:
- parse: malformed input rejected by the native evaluator
- eval: a native operation failed or returned the null sentinel
- type: conversion between incompatible representations
- resource: released handle, or native library unavailable
"""

from __future__ import annotations

from enum import StrEnum


class ErrorKind(StrEnum):
    """Classification attached to every GiacError."""

    PARSE = "parse"
    EVAL = "eval"
    TYPE = "type"
    RESOURCE = "resource"


class GiacError(Exception):
    """Exception raised for failures reported by (or about) the GIAC library.

    Attributes:
        message: Human-readable failure description.
        kind: Error classification. Unrecognised kinds fall back to ``eval``.
        suggestions: Nearest command names, set for unknown-command errors.
    """

    def __init__(
        self,
        message: str,
        kind: ErrorKind | str = ErrorKind.EVAL,
        *,
        suggestions: list[str] | None = None,
    ) -> None:
        try:
            resolved = ErrorKind(kind)
        except ValueError:
            resolved = ErrorKind.EVAL
        super().__init__(message)
        self.message = message
        self.kind = resolved
        self.suggestions = list(suggestions or [])

    def __str__(self) -> str:
        return f"GiacError({self.kind}): {self.message}"


class UnknownCommandError(GiacError):
    """A command name absent from a populated registry. Always ``eval`` kind."""

    def __init__(self, command: str, message: str, *, suggestions: list[str] | None = None) -> None:
        super().__init__(message, ErrorKind.EVAL, suggestions=suggestions)
        self.command = command


def released_error(what: str = "expression") -> GiacError:
    """Error raised when an operation touches an already-released handle."""
    return GiacError(f"Cannot use {what}: native handle already released", ErrorKind.RESOURCE)


def unavailable_error() -> GiacError:
    """Error raised when the native library could not be loaded."""
    return GiacError(
        "GIAC native library unavailable (running in degraded mode). "
        "Set GIACBIND_WRAPPER_LIB to the libgiac_c path.",
        ErrorKind.RESOURCE,
    )
