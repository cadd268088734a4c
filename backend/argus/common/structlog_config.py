"""
Structlog configuration for ARGUS.

JSON logs when the stream is not a terminal, console format otherwise.
Every event carries the methodology version so log lines can be matched to
the scoring rules that produced them.

The library never configures logging on import; call configure() once from
the entry point (scripts or the host application).
"""
import logging
import sys
from typing import Optional, TextIO

import structlog

from ..config.constants import METHODOLOGY_VERSION


def _add_methodology_version(logger, method_name, event_dict):
    event_dict.setdefault("methodology_version", METHODOLOGY_VERSION)
    return event_dict


def configure(
    log_level: str = "INFO",
    stream: Optional[TextIO] = None,
    json_logs: Optional[bool] = None,
) -> None:
    """Configure structlog and the root logger.

    stream defaults to stdout. Scripts that write results to stdout pass
    sys.stderr. json_logs=None picks JSON unless the stream is a terminal.
    """
    stream = stream or sys.stdout
    if json_logs is None:
        json_logs = not stream.isatty()

    shared_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        _add_methodology_version,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

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
            structlog.processors.JSONRenderer() if json_logs else structlog.dev.ConsoleRenderer(),
        ],
        foreign_pre_chain=shared_processors,
    )

    handler = logging.StreamHandler(stream)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(getattr(logging, log_level.upper(), logging.INFO))
