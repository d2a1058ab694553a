"""Tests for graph_tutorial/graph/week.py

The week window resolver turns "today" and the user's time zone into the
UTC instant the calendar query starts from. Key behavior:
- Weeks start on Sunday, 0-6 days at or before the reference date
- Local midnight is converted with the rules in effect at that moment
- DST gaps and overlaps at midnight resolve to one documented instant
- Unknown zones fail with UnknownTimeZone
"""

from datetime import date, datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from graph_tutorial.graph.timezones import UnknownTimeZone
from graph_tutorial.graph.week import (
    day_of_week,
    local_to_utc,
    resolve_week_start_utc,
    resolve_week_window_utc,
    week_start_date,
)


UTC = timezone.utc


# ─────────────────────────────────────────────────────────────────────────────
# Week Start Date
# ─────────────────────────────────────────────────────────────────────────────


class TestWeekStartDate:
    """Tests for the Sunday-start day arithmetic."""

    def test_day_of_week_sunday_is_zero(self):
        assert day_of_week(date(2024, 3, 10)) == 0  # Sunday
        assert day_of_week(date(2024, 3, 13)) == 3  # Wednesday
        assert day_of_week(date(2024, 3, 16)) == 6  # Saturday

    def test_wednesday_goes_back_three_days(self):
        assert week_start_date(date(2024, 3, 13)) == date(2024, 3, 10)

    def test_sunday_is_its_own_week_start(self):
        assert week_start_date(date(2024, 3, 10)) == date(2024, 3, 10)

    def test_saturday_goes_back_six_days(self):
        assert week_start_date(date(2024, 3, 16)) == date(2024, 3, 10)

    def test_crosses_month_and_year(self):
        # 2025-01-01 is a Wednesday
        assert week_start_date(date(2025, 1, 1)) == date(2024, 12, 29)

    def test_time_of_day_is_ignored(self):
        assert week_start_date(datetime(2024, 3, 13, 23, 59)) == date(2024, 3, 10)


# ─────────────────────────────────────────────────────────────────────────────
# Concrete Scenarios
# ─────────────────────────────────────────────────────────────────────────────


class TestResolveWeekStartUtc:
    """Tests for resolve_week_start_utc."""

    def test_wednesday_in_utc(self):
        """Wednesday in UTC resolves to the preceding Sunday at 00:00Z."""
        result = resolve_week_start_utc(date(2024, 3, 13), "UTC")

        assert result == datetime(2024, 3, 10, 0, 0, tzinfo=UTC)
        assert result.utcoffset() == timedelta(0)

    def test_sunday_in_fixed_minus_five(self):
        """Sunday in a UTC-5 zone without DST resolves to 05:00Z the same day."""
        result = resolve_week_start_utc(date(2024, 1, 7), "America/Bogota")

        assert result == datetime(2024, 1, 7, 5, 0, tzinfo=UTC)

    def test_sunday_in_etc_zone(self):
        # POSIX-style sign: Etc/GMT+5 is UTC-5
        result = resolve_week_start_utc(date(2024, 1, 7), "Etc/GMT+5")

        assert result == datetime(2024, 1, 7, 5, 0, tzinfo=UTC)

    def test_uses_offset_at_week_start_not_reference_date(self):
        """DST starts Sunday 2024-03-10 at 02:00 in New York; midnight is still EST."""
        result = resolve_week_start_utc(date(2024, 3, 13), "America/New_York")

        assert result == datetime(2024, 3, 10, 5, 0, tzinfo=UTC)

    def test_daylight_time_offset(self):
        result = resolve_week_start_utc(date(2024, 7, 17), "America/Los_Angeles")

        assert result == datetime(2024, 7, 14, 7, 0, tzinfo=UTC)

    def test_windows_zone_name(self):
        result = resolve_week_start_utc(date(2024, 7, 17), "Pacific Standard Time")

        assert result == datetime(2024, 7, 14, 7, 0, tzinfo=UTC)

    def test_accepts_resolved_zone(self):
        result = resolve_week_start_utc(date(2024, 7, 17), ZoneInfo("Europe/Berlin"))

        # CEST is UTC+2, so Sunday midnight is Saturday 22:00Z
        assert result == datetime(2024, 7, 13, 22, 0, tzinfo=UTC)

    def test_accepts_datetime_reference(self):
        result = resolve_week_start_utc(datetime(2024, 3, 13, 18, 30), "UTC")

        assert result == datetime(2024, 3, 10, tzinfo=UTC)

    def test_result_is_aware_utc(self):
        result = resolve_week_start_utc(date(2024, 3, 13), "Asia/Tokyo")

        assert result.tzinfo is UTC
        assert result == datetime(2024, 3, 9, 15, 0, tzinfo=UTC)

    def test_unknown_zone_raises(self):
        with pytest.raises(UnknownTimeZone) as exc_info:
            resolve_week_start_utc(date(2024, 3, 13), "Mars/Olympus_Mons")

        assert exc_info.value.identifier == "Mars/Olympus_Mons"

    def test_empty_zone_raises(self):
        with pytest.raises(UnknownTimeZone):
            resolve_week_start_utc(date(2024, 3, 13), "")

    def test_none_zone_raises(self):
        with pytest.raises(UnknownTimeZone):
            resolve_week_start_utc(date(2024, 3, 13), None)


# ─────────────────────────────────────────────────────────────────────────────
# DST at Midnight
# ─────────────────────────────────────────────────────────────────────────────


class TestDstAtMidnight:
    """Zones whose clocks change at 00:00 on a Sunday.

    Gap: the skipped midnight becomes 01:00 under the post-transition
    offset. Overlap: the standard-time occurrence of midnight is used.
    """

    def test_spring_forward_gap_sao_paulo(self):
        """Brazil skipped 00:00-01:00 on Sunday 2018-11-04 (-03 -> -02)."""
        zone = ZoneInfo("America/Sao_Paulo")

        result = resolve_week_start_utc(date(2018, 11, 7), zone)

        assert result == datetime(2018, 11, 4, 3, 0, tzinfo=UTC)
        local = result.astimezone(zone)
        assert local.date() == date(2018, 11, 4)
        assert (local.hour, local.minute) == (1, 0)
        assert local.utcoffset() == timedelta(hours=-2)

    def test_spring_forward_gap_havana(self):
        """Cuba skipped 00:00-01:00 on Sunday 2023-03-12 (CST -> CDT)."""
        zone = ZoneInfo("America/Havana")

        result = resolve_week_start_utc(date(2023, 3, 12), zone)

        assert result == datetime(2023, 3, 12, 5, 0, tzinfo=UTC)
        assert result.astimezone(zone).utcoffset() == timedelta(hours=-4)

    def test_gap_is_deterministic(self):
        first = resolve_week_start_utc(date(2018, 11, 4), "America/Sao_Paulo")
        second = resolve_week_start_utc(date(2018, 11, 4), "America/Sao_Paulo")

        assert first == second

    def test_fall_back_overlap_havana_uses_standard_time(self):
        """Cuba repeated 00:00-01:00 on Sunday 2023-11-05 (CDT -> CST)."""
        zone = ZoneInfo("America/Havana")

        result = resolve_week_start_utc(date(2023, 11, 8), zone)

        # CST is UTC-5; the daylight-time midnight would be 04:00Z
        assert result == datetime(2023, 11, 5, 5, 0, tzinfo=UTC)
        local = result.astimezone(zone)
        assert local.date() == date(2023, 11, 5)
        assert local.dst() == timedelta(0)


class TestLocalToUtc:
    """Tests for the wall-clock conversion policy at any time of day."""

    def test_unambiguous(self):
        result = local_to_utc(datetime(2024, 1, 15, 12, 0), ZoneInfo("America/New_York"))

        assert result == datetime(2024, 1, 15, 17, 0, tzinfo=UTC)

    def test_gap_moves_forward(self):
        # 02:30 never happened on 2024-03-10 in New York; it reads as 03:30 EDT
        result = local_to_utc(datetime(2024, 3, 10, 2, 30), ZoneInfo("America/New_York"))

        assert result == datetime(2024, 3, 10, 7, 30, tzinfo=UTC)
        local = result.astimezone(ZoneInfo("America/New_York"))
        assert (local.hour, local.minute) == (3, 30)

    def test_overlap_uses_standard_time(self):
        # 01:30 happened twice on 2024-11-03 in New York; EST is the second
        result = local_to_utc(datetime(2024, 11, 3, 1, 30), ZoneInfo("America/New_York"))

        assert result == datetime(2024, 11, 3, 6, 30, tzinfo=UTC)

    def test_overlap_southern_hemisphere(self):
        # Sydney repeats 02:00-03:00 on 2024-04-07 (AEDT +11 -> AEST +10)
        result = local_to_utc(datetime(2024, 4, 7, 2, 30), ZoneInfo("Australia/Sydney"))

        assert result == datetime(2024, 4, 6, 16, 30, tzinfo=UTC)

    def test_utc_passthrough(self):
        result = local_to_utc(datetime(2024, 6, 1, 8, 0), UTC)

        assert result == datetime(2024, 6, 1, 8, 0, tzinfo=UTC)


# ─────────────────────────────────────────────────────────────────────────────
# Properties
# ─────────────────────────────────────────────────────────────────────────────


ZONES = [
    "UTC",
    "America/New_York",
    "America/Sao_Paulo",
    "America/Havana",
    "Europe/London",
    "Asia/Kolkata",
    "Australia/Lord_Howe",
    "Pacific/Chatham",
    "Pacific Standard Time",
]


def _dates(start: date, days: int):
    return [start + timedelta(days=i) for i in range(days)]


class TestWeekProperties:
    """Properties that hold for every date and zone."""

    @pytest.mark.parametrize("zone_name", ZONES)
    def test_local_date_is_sunday_within_six_days(self, zone_name):
        from graph_tutorial.graph.timezones import get_zone

        zone = get_zone(zone_name)
        # Spans the 2018 Brazil and 2023 Cuba transitions
        dates = _dates(date(2018, 10, 28), 21) + _dates(date(2023, 3, 5), 14) + _dates(
            date(2023, 10, 29), 14
        )
        for d in dates:
            result = resolve_week_start_utc(d, zone)
            local_date = result.astimezone(zone).date()

            assert day_of_week(local_date) == 0, (zone_name, d, result)
            assert 0 <= (d - local_date).days <= 6, (zone_name, d, result)

    @pytest.mark.parametrize("zone_name", ZONES)
    def test_idempotent(self, zone_name):
        d = date(2024, 3, 13)

        assert resolve_week_start_utc(d, zone_name) == resolve_week_start_utc(d, zone_name)

    def test_sunday_maps_to_itself(self):
        for d in _dates(date(2024, 1, 7), 52 * 7)[::7]:
            result = resolve_week_start_utc(d, "Europe/Paris")
            assert result.astimezone(ZoneInfo("Europe/Paris")).date() == d


# ─────────────────────────────────────────────────────────────────────────────
# Week Window
# ─────────────────────────────────────────────────────────────────────────────


class TestResolveWeekWindowUtc:
    """Tests for the (start, end) week window."""

    def test_plain_week_is_seven_days(self):
        start, end = resolve_week_window_utc(date(2024, 1, 10), "UTC")

        assert start == datetime(2024, 1, 7, tzinfo=UTC)
        assert end == datetime(2024, 1, 14, tzinfo=UTC)

    def test_week_with_dst_start_is_shorter(self):
        start, end = resolve_week_window_utc(date(2024, 3, 13), "America/New_York")

        assert end - start == timedelta(days=7, hours=-1)
