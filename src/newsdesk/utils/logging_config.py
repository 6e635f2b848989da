"""
Structured logging for newsdesk.

Console output in development, JSON lines in production (``ENV=production``).

Usage:
    from newsdesk.utils.logging_config import configure_logging, get_logger

    configure_logging()            # once, at CLI startup
    logger = get_logger(__name__)
    logger.info("Feed loaded", url=url, items=12)
"""

import logging
import os
import sys
from typing import Optional

import structlog
from structlog.types import Processor


def _is_production() -> bool:
    env = os.getenv("ENV", os.getenv("ENVIRONMENT", "development")).lower()
    return env in ("production", "prod")


def _get_log_level() -> int:
    level_name = os.getenv("LOG_LEVEL", "WARNING").upper()
    return getattr(logging, level_name, logging.WARNING)


def configure_logging(
    json_format: Optional[bool] = None,
    log_level: Optional[int] = None,
) -> None:
    """
    Configure structlog and route stdlib logging through it.

    Args:
        json_format: Emit JSON lines. If None, decided by the ENV variable.
        log_level: Logging level. If None, read from LOG_LEVEL (default WARNING,
            so the CLI output stays readable).
    """
    if json_format is None:
        json_format = _is_production()
    if log_level is None:
        log_level = _get_log_level()

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if json_format:
        renderer: Processor = structlog.processors.JSONRenderer(ensure_ascii=False)
    else:
        renderer = structlog.dev.ConsoleRenderer(
            colors=sys.stderr.isatty(),
            exception_formatter=structlog.dev.plain_traceback,
        )

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # Log lines go to stderr so rendered articles on stdout stay clean.
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=renderer,
            foreign_pre_chain=shared_processors,
        )
    )
    logging.basicConfig(format="%(message)s", handlers=[handler], level=log_level, force=True)

    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def get_logger(name: Optional[str] = None) -> structlog.stdlib.BoundLogger:
    """Return a structlog logger, typically ``get_logger(__name__)``."""
    return structlog.get_logger(name)
