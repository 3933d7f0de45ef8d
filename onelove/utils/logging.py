"""Structured logging setup using structlog.

Console output (coloured) while developing, one JSON object per line in
production.  Both renderers sit behind the same processor chain, so a
field logged in one shows up in the other.  ``APP_ENV=production`` or
``json_output=True`` selects JSON.

The stdlib root logger gets a handler with the same formatter: records
from httpx, uvicorn and aiosqlite are rendered like ours and land on the
same stream.  That stream is stdout for the web service and stderr for
the admin CLI, whose stdout is reserved for JSON results.
"""

import logging
import os
import sys
from typing import TextIO

import structlog


def configure_logging(
    log_level: str = "INFO",
    json_output: bool = False,
    stream: TextIO | None = None,
    cache_loggers: bool = True,
) -> structlog.BoundLogger:
    """Configure structlog and the stdlib root logger.

    Args:
        log_level: Logging level string (DEBUG, INFO, WARNING, ERROR).
        json_output: Force JSON output.  When False, JSON is still used if
                     ``APP_ENV`` is ``production``.
        stream: Destination for every log line.  Defaults to stdout.
        cache_loggers: Pin each logger to this configuration on first use.
                       Turn off when the stream can be swapped later.

    Returns:
        A configured structlog BoundLogger.
    """
    stream = stream or sys.stdout
    use_json = json_output or os.environ.get("APP_ENV", "development") == "production"
    level = log_level.upper()

    # Request-scoped bindings (see RequestLoggingMiddleware) merge first.
    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]

    renderer: structlog.types.Processor
    if use_json:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=stream.isatty())

    structlog.configure(
        processors=[*shared_processors, renderer],
        # Filtering happens before the processor chain runs.
        wrapper_class=structlog.make_filtering_bound_logger(logging.getLevelName(level)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=stream),
        cache_logger_on_first_use=cache_loggers,
    )

    # stdlib bridge
    handler = logging.StreamHandler(stream)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                *shared_processors,
                renderer,
            ],
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    return structlog.get_logger()


def get_logger(name: str) -> structlog.BoundLogger:
    """Named structlog logger; configures the defaults on first use."""
    if not structlog.is_configured():
        configure_logging()
    return structlog.get_logger(logger_name=name)
