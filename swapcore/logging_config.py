"""
Structured logging for the quote service.

Library modules log through ``logging.getLogger(__name__)`` with %-style
arguments. :func:`setup_logging` routes those records through structlog, so
every line renders as JSON (or colored console output) and carries whatever
context is bound at the time: the HTTP ``request_id`` from the middleware and
the ``quote_key`` the orchestrator binds while it searches.
"""

import logging
import sys
from typing import List, Optional

import structlog

from .config import settings

NOISY_LOGGERS = ("uvicorn.access", "httpcore", "httpx")


def _resolve_level(log_level: Optional[str]) -> int:
    level = logging.getLevelName((log_level or settings.log_level).upper())
    return level if isinstance(level, int) else logging.INFO


def _processors(json_logs: bool) -> List[structlog.types.Processor]:
    processors: List[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
    ]
    if json_logs:
        processors.append(structlog.processors.format_exc_info)
    return processors


def setup_logging(log_level: Optional[str] = None, json_logs: Optional[bool] = None) -> None:
    """Configure structlog and the root stdlib logger.

    Args:
        log_level: Override ``settings.log_level``.
        json_logs: Force JSON (True) or console (False) rendering. Defaults to
            ``settings.log_json``; when that is unset, console at DEBUG and
            JSON otherwise.
    """
    level = _resolve_level(log_level)
    if json_logs is None:
        json_logs = settings.log_json if settings.log_json is not None else level != logging.DEBUG

    shared = _processors(json_logs)
    renderer = structlog.processors.JSONRenderer() if json_logs else structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[*shared, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))
