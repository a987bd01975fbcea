"""Base logging functionality.

Kept free of imports from the rest of the package so that any module,
including the error and config layers, can obtain a logger.
"""

import structlog
from structlog.typing import FilteringBoundLogger

# Default log level
LOG_LEVEL = "INFO"


def get_logger(name: str | None = None) -> FilteringBoundLogger:
    """Get a configured logger instance.

    If structlog has not been configured yet, its default configuration is used.

    Args:
        name: The name of the logger to get.

    Returns:
        FilteringBoundLogger: A structlog logger instance.
    """
    return structlog.get_logger(name)
