"""Base error classes and enums"""

import logging
from datetime import datetime
from enum import Enum
from typing import Any, Self

from logfire.integrations.pydantic import PluginSettings
from pydantic import BaseModel, Field, field_serializer


class ErrorLevel(str, Enum):
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"

    def to_logging_level(self) -> int:
        """Convert ErrorLevel to logging level"""
        return {
            ErrorLevel.DEBUG: logging.DEBUG,
            ErrorLevel.INFO: logging.INFO,
            ErrorLevel.WARNING: logging.WARNING,
            ErrorLevel.ERROR: logging.ERROR,
            ErrorLevel.CRITICAL: logging.CRITICAL,
        }[self]


class ErrorCode(str, Enum):
    """Error codes for the clustering engine."""

    # General Errors (1xxx)
    UNKNOWN = "1000"
    INVALID_INPUT = "1002"
    PROCESSING_FAILED = "1004"
    CONFIG_INVALID = "1005"

    # Cluster Errors (7xxx)
    CLUSTER_VALIDATION = "7001"
    DIMENSION_MISMATCH = "7002"
    ASSIGNMENT_INVALID = "7003"


class ErrorDetails(BaseModel, plugin_settings=PluginSettings(logfire={"record": "all"})):
    """Base model for structured error details"""

    source: str = Field(description="Component or module where the error occurred")
    operation: str = Field(description="Operation being performed when the error occurred")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(), description="When the error occurred")

    # Ensure timestamp is serialized consistently
    @field_serializer("timestamp")
    def serialize_timestamp(self, timestamp: datetime) -> str:
        return timestamp.isoformat()


class ValidationErrorDetails(ErrorDetails):
    """Details for validation-related errors"""

    field: str | None = Field(None, description="Field that failed validation")
    actual_value: Any = Field(None, description="Value that failed validation")
    expected_type: str | None = Field(None, description="Expected type or format")
    constraint: str | None = Field(None, description="Constraint that was violated")


class DimensionErrorDetails(ValidationErrorDetails):
    """Details for centroid/embedding dimension mismatches"""

    expected_dimension: int = Field(description="Dimension the cluster was created with")
    actual_dimension: int = Field(description="Dimension of the supplied vector")


class ApplicationError(Exception):
    """Base class for all engine errors"""

    def __init__(
        self,
        message: str,
        code: ErrorCode,
        level: ErrorLevel = ErrorLevel.ERROR,
        details: ErrorDetails | dict[str, Any] | None = None,
    ):
        self.message = message
        self.code = code
        self.level = level

        # Convert dict to ErrorDetails if needed
        if details is None:
            self.details = ErrorDetails(source="unknown", operation="unknown")
        elif isinstance(details, dict):
            details = dict(details)
            source = details.pop("source", "unknown")
            operation = details.pop("operation", "unknown")
            self.details = ErrorDetails(source=source, operation=operation, **details)
        else:
            self.details = details

        super().__init__(message)

    @classmethod
    def with_details(cls, message: str, details: ErrorDetails, **kwargs: Any) -> Self:
        """Create an error with specific details model"""
        return cls(message=message, details=details, **kwargs)
