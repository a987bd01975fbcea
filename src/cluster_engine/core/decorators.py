"""Error handling decorators for the orchestration layer.

Engine operations raise synchronously and never swallow errors. These
decorators sit on scheduler jobs and other caller-side loops, where one bad
cluster must be logged rather than abort the whole run.
"""

import asyncio
import inspect
from collections.abc import Awaitable, Callable
from functools import wraps
from typing import Any, ParamSpec, TypeVar, cast

from .base import ApplicationError, ErrorLevel
from .error_context import ErrorContext
from .logging import get_logger

logger = get_logger(__name__)
P = ParamSpec("P")
T = TypeVar("T")


def _log_error(func_name: str, error: Exception, level: ErrorLevel) -> None:
    error_context: dict[str, Any] = {
        "function": func_name,
        "error_context": ErrorContext(error).to_dict(),
    }
    logger.log(
        level.to_logging_level(),
        f"Error in {func_name}: {error!s}",
        extra=error_context,
        exc_info=True,
    )


def with_error_handling(
    error_level: ErrorLevel = ErrorLevel.ERROR,
    reraise: bool = True,
) -> Callable[[Callable[P, T]], Callable[P, T]]:
    """Decorator for handling errors in functions.

    Application errors are logged at their own level, anything else at
    ``error_level``. When ``reraise`` is False the wrapped call returns None.

    Args:
        error_level: Severity level for unexpected errors
        reraise: Whether to re-raise the error after logging

    Returns:
        Decorated function with error handling
    """

    def decorator(func: Callable[P, T]) -> Callable[P, T]:
        original_signature = inspect.signature(func)

        if asyncio.iscoroutinefunction(func):

            @wraps(func)
            async def async_wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
                try:
                    return await cast("Callable[P, Awaitable[T]]", func)(*args, **kwargs)
                except ApplicationError as e:
                    _log_error(func.__name__, e, e.level)
                    if reraise:
                        raise
                    return cast("T", None)
                except Exception as e:
                    _log_error(func.__name__, e, error_level)
                    if reraise:
                        raise
                    return cast("T", None)

            async_wrapper.__signature__ = original_signature  # type: ignore[attr-defined]
            return cast("Callable[P, T]", async_wrapper)

        @wraps(func)
        def sync_wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
            try:
                return func(*args, **kwargs)
            except ApplicationError as e:
                _log_error(func.__name__, e, e.level)
                if reraise:
                    raise
                return cast("T", None)
            except Exception as e:
                _log_error(func.__name__, e, error_level)
                if reraise:
                    raise
                return cast("T", None)

        sync_wrapper.__signature__ = original_signature  # type: ignore[attr-defined]
        return sync_wrapper

    return decorator
