"""Error context capture for structured error logs"""

from datetime import UTC, datetime
from typing import Any
from uuid import uuid4

from .base import ApplicationError


class ErrorContext:
    """Captures and stores context around an error"""

    def __init__(self, error: Exception, trace_id: str | None = None, **context: Any):
        self.error = error
        self.trace_id = trace_id or str(uuid4())
        self.timestamp = datetime.now(UTC)
        self.context = context

    def to_dict(self) -> dict[str, Any]:
        """Flatten the error, its structured details and extra context into one dict."""
        result: dict[str, Any] = {
            "error_type": self.error.__class__.__name__,
            "error_message": str(self.error),
            "trace_id": self.trace_id,
            "timestamp": self.timestamp.isoformat(),
        }

        if isinstance(self.error, ApplicationError):
            result["error_code"] = self.error.code.value
            result["error_level"] = self.error.level.value

            # Prefix the details fields to avoid collisions
            for key, value in self.error.details.model_dump(mode="json").items():
                result[f"details.{key}"] = value

        for key, value in self.context.items():
            result[f"context.{key}"] = value

        return result
