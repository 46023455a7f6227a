"""
Date/time helpers.

All timestamps are stored as naive UTC datetimes.
"""

from datetime import date, datetime, time, timedelta, timezone


def utcnow() -> datetime:
    """Current UTC time as a naive datetime (the storage convention)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(value: datetime) -> datetime:
    """Normalize an aware datetime to naive UTC; naive values pass through."""
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def parse_iso_datetime(value: str) -> datetime:
    """Parse an ISO-8601 timestamp (Strava uses a trailing 'Z')."""
    return to_naive_utc(datetime.fromisoformat(value.replace("Z", "+00:00")))


def day_bounds(day: date) -> tuple[datetime, datetime]:
    """[start, end) of a calendar day."""
    start = datetime.combine(day, time.min)
    return start, start + timedelta(days=1)


def days_between(earlier: datetime, later: datetime) -> int:
    return (later.date() - earlier.date()).days
