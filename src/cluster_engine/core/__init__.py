from .base import ApplicationError, ErrorCode, ErrorLevel
from .errors import (
    ConfigurationError,
    DimensionMismatchError,
    ValidationError,
)
