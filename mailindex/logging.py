"""Structured logging setup using structlog."""

from __future__ import annotations

import logging
import sys

import structlog


def setup_logging(*, json: bool = False, level: str = "INFO") -> None:
    """Configure structlog for a ``python -m mailindex`` run.

    The CLI prints search and sample results on stdout, so log lines
    (``ingest_started``, ``message_skipped``, ...) go to stderr and never
    mix with them.

    Parameters
    ----------
    json:
        If *True*, output JSON lines for log collectors.  If *False* (the
        default, for a terminal), use the console renderer without colours.
    level:
        Root log level name (e.g. ``"DEBUG"`` to see every skipped file).

    Raises ``ValueError`` for an unknown *level*, before any handler is
    touched.
    """
    level = level.upper()
    if level not in logging.getLevelNamesMapping():
        raise ValueError(f"unknown log level: {level}")

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if json:
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)
