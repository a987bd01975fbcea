"""Specific error types for the clustering engine."""

from typing import Any

from .base import (
    ApplicationError,
    DimensionErrorDetails,
    ErrorCode,
    ErrorLevel,
    ValidationErrorDetails,
)


class ValidationError(ApplicationError):
    """A cluster, assignment or statistics value violates an invariant."""

    def __init__(
        self,
        message: str,
        details: ValidationErrorDetails | None = None,
        code: ErrorCode = ErrorCode.CLUSTER_VALIDATION,
    ):
        super().__init__(
            message=message,
            code=code,
            level=ErrorLevel.WARNING,
            details=details or ValidationErrorDetails(
                source="cluster",
                operation="validate",
            ),
        )

    @classmethod
    def for_field(
        cls,
        message: str,
        field: str,
        actual_value: Any = None,
        constraint: str | None = None,
        operation: str = "validate",
        source: str = "cluster",
    ) -> "ValidationError":
        """Build a validation error pointing at a single field."""
        return cls(
            message,
            details=ValidationErrorDetails(
                source=source,
                operation=operation,
                field=field,
                actual_value=actual_value,
                constraint=constraint,
            ),
        )


class DimensionMismatchError(ValidationError):
    """A vector's length does not match the cluster dimension.

    Raised separately so callers can special-case an embedding model change.
    """

    def __init__(self, expected: int, actual: int, operation: str = "update_centroid"):
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Centroid dimension mismatch: expected {expected}, got {actual}",
            details=DimensionErrorDetails(
                source="cluster",
                operation=operation,
                field="centroid",
                actual_value=actual,
                constraint=f"len == {expected}",
                expected_dimension=expected,
                actual_dimension=actual,
            ),
            code=ErrorCode.DIMENSION_MISMATCH,
        )


class ConfigurationError(ApplicationError):
    """Invalid engine configuration."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(
            message=message,
            code=ErrorCode.CONFIG_INVALID,
            level=ErrorLevel.ERROR,
            details=details,
        )

