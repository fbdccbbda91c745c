"""Logging for the dep-check CLI: structlog events rendered by stdlib handlers.

Environment:
    DEPSENTINEL_LOG_LEVEL  — level for depsentinel loggers (default: WARNING)
    DEPSENTINEL_LOG_FORMAT — console | json (default: console)

Everything goes to stderr so that stdout carries only the report.
"""

from __future__ import annotations

import logging
import os
import sys

import structlog

DEFAULT_LEVEL = "WARNING"


def _renderer(log_format: str) -> structlog.types.Processor:
    if log_format == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())


def _pre_chain(log_format: str) -> list[structlog.types.Processor]:
    chain: list[structlog.types.Processor] = [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
    ]
    # console lines are read live; only machine-readable output gets a timestamp
    if log_format == "json":
        chain.append(structlog.processors.TimeStamper(fmt="iso", utc=True))
    chain.append(structlog.processors.format_exc_info)
    return chain


def setup_logging(level: str | None = None) -> None:
    """Route structlog through a single stderr handler.

    An explicit *level* (``--verbose`` passes ``DEBUG``) wins over
    ``DEPSENTINEL_LOG_LEVEL``. Safe to call more than once per process.
    """
    log_level = (level or os.environ.get("DEPSENTINEL_LOG_LEVEL", DEFAULT_LEVEL)).upper()
    log_format = os.environ.get("DEPSENTINEL_LOG_FORMAT", "console").lower()
    pre_chain = _pre_chain(log_format)

    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=pre_chain,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _renderer(log_format),
            ],
        )
    )

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(log_level)
    logging.getLogger("depsentinel").setLevel(log_level)
