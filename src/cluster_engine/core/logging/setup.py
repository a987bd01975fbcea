"""Centralized logging setup with Logfire integration.

Logfire is configured from the environment (LOGFIRE_TOKEN and friends); events
are only shipped when a token is present, otherwise they stay on the console.
"""

import logging
import sys

import logfire
import structlog
from structlog.processors import CallsiteParameter, CallsiteParameterAdder
from structlog.types import EventDict, Processor, WrappedLogger

from .base import LOG_LEVEL


def add_cluster_context(
    _logger: WrappedLogger,
    _method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """Promote error and cluster fields so Logfire can filter on them.

    Args:
        _logger: The wrapped logger instance
        _method_name: The name of the logging method
        event_dict: The event dictionary

    Returns:
        The event dictionary with added context
    """
    if "error" in event_dict:
        event_dict["error_type"] = type(event_dict["error"]).__name__

    # Cluster ids are short prefixed uuids; keep the prefix out of span names
    cluster_id = event_dict.get("cluster_id")
    if isinstance(cluster_id, str) and cluster_id.startswith("cluster_"):
        event_dict["cluster_key"] = cluster_id.removeprefix("cluster_")

    return event_dict


def setup_logging(
    level: str | None = None,
    service_name: str | None = None,
    colors: bool = True,
) -> None:
    """Set up engine-wide logging with Logfire and structlog integration.

    Args:
        level: Minimum level name; defaults to the configured ``log_level``
        service_name: Service name reported to Logfire
        colors: Whether the console renderer uses ANSI colours
    """
    from cluster_engine.core.config import get_settings

    settings = get_settings()
    level_name = (level or settings.log_level or LOG_LEVEL).upper()
    numeric_level = logging.getLevelName(level_name)
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    logfire.configure(
        service_name=service_name or settings.service_name,
        send_to_logfire="if-token-present",
        console=False,
    )

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        CallsiteParameterAdder(
            parameters=[
                CallsiteParameter.FILENAME,
                CallsiteParameter.LINENO,
                CallsiteParameter.FUNC_NAME,
            ]
        ),
        add_cluster_context,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        # Must come before the final renderer
        logfire.StructlogProcessor(),
        structlog.dev.ConsoleRenderer(colors=colors),
    ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # Route standard library records (apscheduler, etc.) through the same chain
    formatter = structlog.stdlib.ProcessorFormatter(
        processor=structlog.dev.ConsoleRenderer(colors=colors),
        foreign_pre_chain=processors[:-2],
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers = [handler]
    root_logger.setLevel(numeric_level)

