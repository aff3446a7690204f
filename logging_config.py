"""Log output for the booking service.

Modules log through the standard library (``logging.getLogger(__name__)``);
structlog only formats those records on the way out, either as colored
console lines or as JSON lines, always to stderr.
"""

from __future__ import annotations

import logging
import sys

import structlog

# Loggers owned by this project, one per module that logs.
PROJECT_LOGGERS = ("catalog", "ledger", "main")


def build_formatter(*, log_json: bool = False) -> structlog.stdlib.ProcessorFormatter:
    """Formatter turning stdlib records into structlog-rendered lines."""
    pre_chain: list[structlog.types.Processor] = [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.ExtraAdder(),
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    if log_json:
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    return structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=pre_chain,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )


def configure_logging(
    *,
    verbose: bool = False,
    log_json: bool = False,
) -> None:
    """Route project loggers to stderr.

    Args:
        verbose: Also show DEBUG records (rejected bookings and registrations).
        log_json: Render JSON lines instead of console lines.
    """
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(build_formatter(log_json=log_json))

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(logging.WARNING)

    level = logging.DEBUG if verbose else logging.INFO
    for name in PROJECT_LOGGERS:
        logging.getLogger(name).setLevel(level)
