"""
Date Utilities
==============

UTC helpers shared by the query window, the SOAP codec and the sinks.
"""

from datetime import UTC, datetime


def utc_now() -> datetime:
    """
    Get current time in UTC.

    Returns:
        Current UTC datetime
    """
    return datetime.now(UTC)


def ensure_utc(dt: datetime) -> datetime:
    """
    Normalize a datetime to UTC.

    Args:
        dt: Datetime object (timezone-aware or naive assumed UTC)

    Returns:
        Timezone-aware datetime in UTC
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def to_unix_ns(dt: datetime) -> int:
    """Convert datetime to Unix timestamp in nanoseconds (naive assumed UTC)."""
    dt = ensure_utc(dt)
    delta = dt - datetime(1970, 1, 1, tzinfo=UTC)
    return (delta.days * 86_400 + delta.seconds) * 1_000_000_000 + (
        delta.microseconds * 1_000
    )


def to_soap_datetime(dt: datetime) -> str:
    """Format datetime as an xsd:dateTime in UTC (e.g. 2017-06-14T23:10:00Z)."""
    return ensure_utc(dt).strftime("%Y-%m-%dT%H:%M:%SZ")
