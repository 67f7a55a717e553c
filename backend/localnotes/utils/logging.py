"""Structured logging setup.

Call `setup_logging()` once when the application starts, then use
`get_logger(__name__)` in modules. Level and renderer come from the
environment unless passed explicitly:

- LOG_LEVEL  (DEBUG, INFO, WARNING, ...; default INFO)
- LOG_FORMAT (console or json; default console)
"""
from __future__ import annotations

import logging
import os
import sys
from typing import Any

import structlog
from structlog.typing import Processor


def setup_logging(level: str | None = None, format_type: str | None = None) -> None:
    effective_level = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    effective_format = (format_type or os.getenv("LOG_FORMAT", "console")).lower()

    log_level = getattr(logging, effective_level, logging.INFO)

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]

    if effective_format == "json":
        renderer: Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)

    structlog.configure(
        processors=shared_processors + [
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=renderer,
            foreign_pre_chain=shared_processors,
        )
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(log_level)


def get_logger(name: str | None = None) -> Any:
    return structlog.get_logger(name)
