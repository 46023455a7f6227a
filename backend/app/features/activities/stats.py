"""
Calendar bucketing of activities.

Totals over a single window are SQL aggregates (ActivityRepository.totals).
Per-day/week/month series are built here from a column projection so the
same code runs on SQLite and PostgreSQL. Weeks start on Monday.
"""

from collections import defaultdict
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Callable, Iterable, NamedTuple, Optional

STREAK_LOOKBACK_DAYS = 365


class ActivityPoint(NamedTuple):
    """The columns series are built from."""

    date: datetime
    distance: float
    duration: int
    elevation_gain: int
    avg_pace: Optional[float]
    avg_heart_rate: Optional[int]


@dataclass
class Bucket:
    start: date
    distance: float = 0.0
    duration: int = 0
    elevation: int = 0
    workouts: int = 0
    avg_pace: Optional[float] = None
    avg_heart_rate: Optional[int] = None


def week_start(day: date) -> date:
    return day - timedelta(days=day.weekday())


def month_start(day: date) -> date:
    return day.replace(day=1)


def add_months(day: date, months: int) -> date:
    """First day of the month `months` away from day's month."""
    index = day.year * 12 + day.month - 1 + months
    return date(index // 12, index % 12 + 1, 1)


def _fill(bucket: Bucket, points: list[ActivityPoint]) -> Bucket:
    paces = [p.avg_pace for p in points if p.avg_pace]
    heart_rates = [p.avg_heart_rate for p in points if p.avg_heart_rate]
    bucket.distance = round(sum(p.distance for p in points), 2)
    bucket.duration = sum(p.duration for p in points)
    bucket.elevation = sum(p.elevation_gain or 0 for p in points)
    bucket.workouts = len(points)
    bucket.avg_pace = round(sum(paces) / len(paces), 1) if paces else None
    bucket.avg_heart_rate = round(sum(heart_rates) / len(heart_rates)) if heart_rates else None
    return bucket


def bucketize(
    points: Iterable[ActivityPoint],
    starts: list[date],
    key: Callable[[date], date],
) -> list[Bucket]:
    """
    One bucket per entry of starts, in that order.

    key maps an activity's day to the start of its bucket; points that
    land outside every bucket are dropped.
    """
    grouped: dict[date, list[ActivityPoint]] = defaultdict(list)
    for point in points:
        grouped[key(point.date.date())].append(point)
    return [_fill(Bucket(start=start), grouped.get(start, [])) for start in starts]


def daily(points: Iterable[ActivityPoint], first_day: date, days: int) -> list[Bucket]:
    return bucketize(points, [first_day + timedelta(days=i) for i in range(days)], lambda d: d)


def weekly(points: Iterable[ActivityPoint], first_week: date, weeks: int) -> list[Bucket]:
    starts = [first_week + timedelta(weeks=i) for i in range(weeks)]
    return bucketize(points, starts, week_start)


def monthly(points: Iterable[ActivityPoint], first_month: date, months: int) -> list[Bucket]:
    starts = [add_months(first_month, i) for i in range(months)]
    return bucketize(points, starts, month_start)


def streak_days(active_days: set[date], today: date, limit: int = STREAK_LOOKBACK_DAYS) -> int:
    """
    Consecutive days with at least one activity, counting back from today.

    A rest day today does not break the streak yet; any earlier gap does.
    """
    streak = 0
    for offset in range(limit):
        day = today - timedelta(days=offset)
        if day in active_days:
            streak += 1
        elif offset > 0:
            break
    return streak


def percent_change(current: float, previous: float) -> int:
    """Whole-percent change; 0 when there is no previous value."""
    if not previous:
        return 0
    return round((current - previous) / previous * 100)
