# src/townsquare/db/time.py
"""Time utilities for database models."""

from datetime import UTC, datetime, timedelta


def utcnow() -> datetime:
    """Return the current UTC time as a timezone-aware datetime."""
    return datetime.now(UTC)


def utc_in(seconds: int) -> datetime:
    """Return the UTC time ``seconds`` from now."""
    return utcnow() + timedelta(seconds=seconds)
