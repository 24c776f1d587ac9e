"""
Core Utilities.

Shared utility functions used across the client.
"""

from datetime import datetime, timezone


def utc_now() -> datetime:
    """Return the current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def iso_timestamp(moment: datetime | None = None) -> str:
    """
    Format a moment as ISO 8601 UTC with millisecond precision.

    Args:
        moment: Aware datetime. Defaults to now.

    Returns:
        String such as 2024-05-01T12:30:00.123Z
    """
    moment = moment or utc_now()
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")
