"""
Date utility functions for release-date checks and serialization
"""
from datetime import datetime, timezone
from typing import Optional


def utc_now() -> datetime:
    """
    Get the current time as a timezone-aware UTC datetime

    Returns:
        datetime: Current UTC time
    """
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    """
    Normalize a datetime to UTC. Naive values are taken to be UTC already.

    Args:
        value: Input datetime

    Returns:
        datetime: Timezone-aware datetime in UTC
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def to_iso(value: Optional[datetime]) -> Optional[str]:
    """Render a stored datetime as an ISO-8601 UTC string"""
    if value is None:
        return None
    return ensure_utc(value).isoformat().replace("+00:00", "Z")
