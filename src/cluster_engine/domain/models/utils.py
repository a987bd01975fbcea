"""Utility functions for domain models."""

from datetime import UTC, datetime


def utc_now() -> datetime:
    """Get the current UTC datetime with timezone awareness."""
    return datetime.now(UTC)


def hours_between(earlier: datetime, later: datetime) -> float:
    """Elapsed hours from ``earlier`` to ``later`` (negative if reversed)."""
    return (later - earlier).total_seconds() / 3600.0


def ensure_aware(value: datetime) -> datetime:
    """Treat naive datetimes as UTC so they compare with ``utc_now()``."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value
