"""
Structlog configuration.

Orchestrator modules log through `structlog.get_logger()`; records from
stdlib loggers (plugin registry, third-party libraries) go through the same
handler on the root logger.

Usage:
    from kenx.core.logging import configure_logging

    configure_logging(level="DEBUG", fmt="text")
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog


def _shared_processors() -> list[Any]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
    ]


def configure_logging(level: str | int = "INFO", fmt: str = "text") -> None:
    """
    Configure stdlib logging and structlog to render through one handler.

    Args:
        level: Minimum level (name or number)
        fmt: "json" for machine readable lines, "text" for console output
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())

    render: list[Any] = [structlog.stdlib.ProcessorFormatter.remove_processors_meta]
    if fmt == "json":
        render += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        render.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))

    shared = _shared_processors()

    structlog.configure(
        processors=[
            *shared,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared,
        processors=render,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(level)

    # uvicorn installs its own handlers unless told otherwise
    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        logging.getLogger(name).handlers = []
        logging.getLogger(name).propagate = True


def bind_stage(stage: str) -> None:
    """Attach the current bootstrap stage to every following log event."""
    structlog.contextvars.bind_contextvars(stage=stage)
