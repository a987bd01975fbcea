"""Logging context utilities for structured logging.

Cluster ids and sweep ids are bound to structlog's context variables so that
every event emitted while a cluster is being mutated or recomputed can be
correlated without threading the ids through each call. ``setup_logging``
installs ``merge_contextvars``, which copies them into each event.
"""

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import structlog


def get_log_context() -> dict[str, Any]:
    """Get a copy of the current logging context."""
    return structlog.contextvars.get_contextvars()


def set_log_context(context: dict[str, Any]) -> None:
    """Replace the logging context.

    Args:
        context: Dictionary with logging context data
    """
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(**context)


def update_log_context(key: str, value: Any) -> None:
    """Update a single key in the logging context.

    Args:
        key: Context key to update
        value: Value to set
    """
    structlog.contextvars.bind_contextvars(**{key: value})


def clear_log_context() -> None:
    """Clear the current logging context."""
    structlog.contextvars.clear_contextvars()


@contextmanager
def log_context(**values: Any) -> Iterator[dict[str, Any]]:
    """Temporarily extend the logging context, restoring it on exit.

    Example:
        with log_context(cluster_id=cluster.id):
            cluster.update_centroid(vector)
    """
    with structlog.contextvars.bound_contextvars(**values):
        yield get_log_context()
