"""
Tests for notification text formatting.
"""

import pytest

from app.shared.dates import day_bounds, days_between, parse_iso_datetime, to_naive_utc
from app.shared.formatters import format_distance_km, format_duration, format_pace


class TestFormatters:

    @pytest.mark.parametrize("seconds, expected", [
        (0, "0:00"),
        (59, "0:59"),
        (3000, "50:00"),
        (3930, "1:05:30"),
        (None, "—"),
    ])
    def test_duration(self, seconds, expected):
        assert format_duration(seconds) == expected

    @pytest.mark.parametrize("pace, expected", [
        (330, "5:30 /km"),
        (299.6, "5:00 /km"),
        (0, "—"),
        (None, "—"),
    ])
    def test_pace(self, pace, expected):
        assert format_pace(pace) == expected

    def test_distance(self):
        assert format_distance_km(12.54) == "12.5 km"
        assert format_distance_km(0.85) == "850 m"


class TestDates:

    def test_parse_strava_timestamp(self):
        value = parse_iso_datetime("2026-03-01T07:00:00Z")
        assert value.tzinfo is None
        assert (value.hour, value.minute) == (7, 0)

    def test_offset_is_normalized(self):
        value = parse_iso_datetime("2026-03-01T09:00:00+02:00")
        assert value.hour == 7

    def test_naive_passes_through(self):
        value = parse_iso_datetime("2026-03-01T07:00:00")
        assert to_naive_utc(value) == value

    def test_day_bounds(self):
        start, end = day_bounds(parse_iso_datetime("2026-03-01T17:30:00Z").date())
        assert (end - start).days == 1
        assert start.hour == 0

    def test_days_between_uses_calendar_days(self):
        late = parse_iso_datetime("2026-03-01T23:59:00Z")
        early_next = parse_iso_datetime("2026-03-02T00:01:00Z")
        assert days_between(late, early_next) == 1
