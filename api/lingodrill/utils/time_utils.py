"""
Timestamp helpers.

Timestamps are stored as timezone-aware UTC. Calendar days (review dates,
daily activity, "today" in statistics) are local dates.
"""
from datetime import date, datetime, time, timezone


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """
    Convert a datetime to aware UTC.

    Naive values passed in by callers are local wall-clock times.
    """
    # astimezone() reads a naive datetime as local time
    return value.astimezone(timezone.utc)


def stored_as_utc(value: datetime) -> datetime:
    """Aware UTC view of a timestamp loaded from the database."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def local_date(value: datetime) -> date:
    """Local calendar day of an aware timestamp."""
    return value.astimezone().date()


def local_midnight(day: date) -> datetime:
    """Start of a local calendar day as aware UTC."""
    return datetime.combine(day, time.min).astimezone(timezone.utc)
