"""
Structured logging configuration using structlog.

Produces JSON logs by default, human-readable colored logs at DEBUG level.
"""

import logging
import sys
from typing import Optional, TextIO

import structlog


def setup_logging(log_level: str = "INFO", stream: Optional[TextIO] = None) -> None:
    """Configure structlog and route stdlib logging through it.

    Args:
        log_level: Level name, usually ``settings.log_level``
        stream: Destination stream (default: stderr, keeping stdout for the chat)
    """
    level = getattr(logging, log_level.upper(), logging.INFO)
    is_dev = level == logging.DEBUG

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if is_dev:
        renderer = structlog.dev.ConsoleRenderer()
    else:
        shared_processors.append(structlog.processors.format_exc_info)
        renderer = structlog.processors.JSONRenderer()

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

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)

    # Quiet noisy third-party loggers
    for name in ("httpcore", "httpx", "anthropic"):
        logging.getLogger(name).setLevel(logging.WARNING)
