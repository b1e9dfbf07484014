"""structlog setup for the binding and the CLI.

Records from ``logging.getLogger(__name__)`` in library modules and from
``structlog.get_logger`` in telemetry share one processor chain and one
stderr handler. GIAC expressions can run to many kilobytes, so expression
fields are clipped before rendering.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

# Event keys that carry GIAC source or results.
EXPRESSION_FIELDS = frozenset({"expr", "input", "result", "text"})
MAX_FIELD_CHARS = 240

# Loggers outside the package that stay at WARNING even in verbose mode.
QUIET_LOGGERS = ("cffi", "markdown_it")


def clip_expressions(limit: int = MAX_FIELD_CHARS) -> structlog.types.Processor:
    """Build a processor that shortens long expression fields to *limit* chars."""

    def processor(_logger: Any, _method: str, event_dict: dict[str, Any]) -> dict[str, Any]:
        for key in EXPRESSION_FIELDS & event_dict.keys():
            value = event_dict[key]
            if isinstance(value, str) and len(value) > limit:
                event_dict[key] = f"{value[:limit]}... ({len(value)} chars)"
        return event_dict

    return processor


def _pick_renderer(log_json: bool) -> structlog.types.Processor:
    if log_json:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())


def configure_logging(
    *,
    verbose: bool = False,
    log_json: bool = False,
    max_field_chars: int = MAX_FIELD_CHARS,
) -> None:
    """Route giacbind logging to stderr through structlog.

    Args:
        verbose: Show ``giacbind`` DEBUG records (dispatch tiers, library
            loading, evaluation failures). Otherwise WARNING and up.
        log_json: One JSON object per line instead of console output.
        max_field_chars: Clip expression fields longer than this.
    """
    chain: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        clip_expressions(max_field_chars),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    structlog.configure(
        processors=[*chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=chain,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _pick_renderer(log_json),
            ],
        )
    )

    # One handler across repeated CLI invocations in a process.
    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(logging.WARNING)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    logging.getLogger("giacbind").setLevel(logging.DEBUG if verbose else logging.WARNING)
