"""Tests for core/clinic_time.py"""

from datetime import date, datetime, timezone

import pytest
from zoneinfo import ZoneInfoNotFoundError

from clinic_booking.core.clinic_time import ClinicClock

from conftest import MONDAY, SUNDAY, TUESDAY


class TestCivilDates:

    def test_day_of_week_is_sunday_based(self):
        assert ClinicClock.day_of_week(SUNDAY) == 0
        assert ClinicClock.day_of_week(MONDAY) == 1
        assert ClinicClock.day_of_week(date(2025, 3, 8)) == 6

    def test_iter_dates_includes_both_ends(self):
        assert list(ClinicClock.iter_dates(SUNDAY, TUESDAY)) == [SUNDAY, MONDAY, TUESDAY]

    def test_iter_dates_single_day(self):
        assert list(ClinicClock.iter_dates(MONDAY, MONDAY)) == [MONDAY]

    def test_unknown_timezone_raises(self):
        with pytest.raises(ZoneInfoNotFoundError):
            ClinicClock("Not/AZone")


class TestWallClock:

    def test_at_minute_is_utc(self, clock):
        instant = clock.at_minute(MONDAY, 540)
        assert instant == datetime(2025, 3, 3, 14, 0, tzinfo=timezone.utc)
        assert instant.utcoffset().total_seconds() == 0

    def test_minute_1440_is_next_local_midnight(self, clock):
        assert clock.at_minute(MONDAY, 1440) == clock.start_of_day(TUESDAY)
        assert clock.at_minute(MONDAY, 1440) == datetime(2025, 3, 4, 5, 0, tzinfo=timezone.utc)

    def test_spring_forward_gap_does_not_exist(self, clock):
        dst_day = date(2025, 3, 9)
        assert clock.wall_time_exists(dst_day, 90)
        assert not clock.wall_time_exists(dst_day, 120)
        assert not clock.wall_time_exists(dst_day, 150)
        assert clock.wall_time_exists(dst_day, 180)

    def test_fall_back_ambiguous_time_resolves_to_first_occurrence(self, clock):
        fall_back = date(2025, 11, 2)
        assert clock.wall_time_exists(fall_back, 90)
        # 01:30 EDT
        assert clock.at_minute(fall_back, 90) == datetime(2025, 11, 2, 5, 30, tzinfo=timezone.utc)

    def test_day_bounds_cover_dst_day(self, clock):
        start, end = clock.day_bounds(date(2025, 3, 9), date(2025, 3, 9))
        assert (end - start).total_seconds() == 23 * 3600


class TestInstants:

    def test_local_date_near_midnight(self, clock):
        late_monday = datetime(2025, 3, 4, 3, 0, tzinfo=timezone.utc)  # 22:00 EST
        assert clock.local_date(late_monday) == MONDAY

    def test_seconds_into_day(self, clock):
        instant = datetime(2025, 3, 3, 14, 30, 15, tzinfo=timezone.utc)
        assert clock.seconds_into_day(instant) == 9 * 3600 + 30 * 60 + 15

    def test_naive_instant_rejected(self, clock):
        with pytest.raises(ValueError):
            clock.localize(datetime(2025, 3, 3, 9, 0))

    def test_timestamp_round_trip(self, clock):
        instant = clock.at_minute(MONDAY, 600)
        assert clock.from_timestamp(clock.to_timestamp(instant)) == instant
