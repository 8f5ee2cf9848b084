"""Structured logging for ollama-catalog.

Every logger handed out by ``get_logger`` is a structlog wrapper around
the stdlib logger of the same name, so nothing is written until an
application attaches handlers. ``configure_logging`` (used by the CLI)
does that and picks console or JSON rendering.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import structlog


def _shared_processors() -> list[structlog.types.Processor]:
    return [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]


def configure_logging(
    level: str = "INFO",
    json_output: bool = False,
    log_file: Path | None = None,
    colors: bool = True,
) -> None:
    """Route catalog events to stderr or a file.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_output: Render one JSON object per line
        log_file: Append to this file instead of stderr
        colors: Colorize console output (ignored for JSON and files)
    """
    handler: logging.Handler
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(log_file, encoding="utf-8")
        colors = False
    else:
        handler = logging.StreamHandler(sys.stderr)

    logging.basicConfig(
        format="%(message)s",
        handlers=[handler],
        level=getattr(logging, level.upper()),
        force=True,
    )

    renderer: structlog.types.Processor
    if json_output:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=colors)

    structlog.configure(
        processors=[*_shared_processors(), renderer],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        # module-level loggers must follow later reconfiguration
        cache_logger_on_first_use=False,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger bound to the stdlib logger ``name``."""
    return structlog.wrap_logger(
        logging.getLogger(name), wrapper_class=structlog.stdlib.BoundLogger
    )


def is_debug_enabled(name: str) -> bool:
    """Whether DEBUG events of logger ``name`` would reach a handler."""
    return logging.getLogger(name).isEnabledFor(logging.DEBUG)


def configure_for_cli(
    verbose: bool = False,
    json_output: bool = False,
    log_file: Path | None = None,
) -> None:
    """Configure logging for the command line entry point.

    Args:
        verbose: Enable verbose (DEBUG) logging
        json_output: Use JSON output format
        log_file: Write logs to this file instead of stderr
    """
    configure_logging(
        level="DEBUG" if verbose else "WARNING",
        json_output=json_output,
        log_file=log_file,
        colors=not json_output and sys.stderr.isatty(),
    )
