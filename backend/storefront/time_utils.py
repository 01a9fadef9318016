from __future__ import annotations

from datetime import datetime, timedelta, timezone


def utcnow() -> datetime:
    """Current UTC time, naive. Every stored timestamp uses this clock."""
    return datetime.utcnow()


def expires_after(delta: timedelta) -> datetime:
    """UTC-naive instant `delta` from now; a negative delta lies in the past."""
    return utcnow() + delta


def to_utc_z(value: datetime | None) -> str | None:
    """
    ISO-8601 with millisecond precision and a trailing 'Z'.
    Naive values are read as UTC.
    """
    if value is None:
        return None
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value.isoformat(timespec="milliseconds") + "Z"
