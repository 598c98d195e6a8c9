"""Tests for core/availability.py"""

from datetime import date, datetime, timezone

import pytest

from clinic_booking.core.availability import Shift, WeeklySchedule, project, project_range
from clinic_booking.models import Availability

from conftest import MONDAY, SUNDAY, TUESDAY


def _shift(day_of_week=1, start=540, end=1020, therapist_id=1, location_id=1):
    return Shift(
        therapist_id=therapist_id,
        location_id=location_id,
        day_of_week=day_of_week,
        start_minute=start,
        end_minute=end,
    )


class TestShift:

    @pytest.mark.parametrize("day", [-1, 7])
    def test_day_of_week_range(self, day):
        with pytest.raises(ValueError):
            _shift(day_of_week=day)

    @pytest.mark.parametrize("start,end", [(600, 600), (600, 540), (-10, 60), (1440, 1441), (0, 1441)])
    def test_minutes_range(self, start, end):
        with pytest.raises(ValueError):
            _shift(start=start, end=end)

    def test_full_day_shift_is_valid(self):
        shift = _shift(start=0, end=1440)
        assert shift.end_minute == 1440

    def test_from_record(self):
        row = Availability(therapist_id=4, location_id=2, day_of_week=3, start_minute=60, end_minute=120)
        assert Shift.from_record(row) == _shift(day_of_week=3, start=60, end=120, therapist_id=4, location_id=2)

    def test_covers_is_inclusive_at_both_ends(self):
        shift = _shift(start=540, end=1020)
        assert shift.covers(540 * 60, 60)
        assert shift.covers(960 * 60, 60)
        assert not shift.covers(961 * 60, 60)
        assert not shift.covers(539 * 60, 30)


class TestWeeklySchedule:

    def test_groups_by_day(self):
        schedule = WeeklySchedule([_shift(day_of_week=1), _shift(day_of_week=3), _shift(day_of_week=1, start=1100, end=1200)])
        assert len(schedule) == 3
        assert [s.start_minute for s in schedule.shifts_on(1)] == [540, 1100]
        assert schedule.shifts_on(2) == []


class TestProject:

    def test_matching_day_projects_to_instants(self, clock):
        [interval] = project([_shift()], MONDAY, clock)
        assert interval.day == MONDAY
        assert interval.start == datetime(2025, 3, 3, 14, 0, tzinfo=timezone.utc)
        assert interval.end == datetime(2025, 3, 3, 22, 0, tzinfo=timezone.utc)
        assert (interval.start_minute, interval.end_minute) == (540, 1020)

    def test_other_days_yield_nothing(self, clock):
        shift = _shift(day_of_week=1)
        for day in clock.iter_dates(date(2025, 3, 4), date(2025, 3, 9)):
            assert project([shift], day, clock) == []

    def test_overlapping_shifts_project_independently(self, clock):
        shifts = [_shift(start=540, end=720), _shift(start=660, end=900)]
        intervals = project(shifts, MONDAY, clock)
        assert [(i.start_minute, i.end_minute) for i in intervals] == [(540, 720), (660, 900)]

    def test_shift_until_midnight(self, clock):
        [interval] = project([_shift(start=1200, end=1440)], MONDAY, clock)
        assert interval.end == clock.start_of_day(TUESDAY)

    def test_dst_day_interval_is_shorter(self, clock):
        # Sunday 2025-03-09, 01:00-04:00 wall clock spans two real hours
        [interval] = project([_shift(day_of_week=0, start=60, end=240)], date(2025, 3, 9), clock)
        assert (interval.end - interval.start).total_seconds() == 2 * 3600


class TestProjectRange:

    def test_every_date_is_a_key(self, clock):
        result = project_range([_shift(day_of_week=1)], SUNDAY, TUESDAY, clock)
        assert list(result) == [SUNDAY, MONDAY, TUESDAY]
        assert result[SUNDAY] == []
        assert len(result[MONDAY]) == 1
        assert result[TUESDAY] == []

    def test_single_day_range(self, clock):
        result = project_range([_shift(day_of_week=1)], MONDAY, MONDAY, clock)
        assert list(result) == [MONDAY]

    def test_no_shifts(self, clock):
        result = project_range([], SUNDAY, TUESDAY, clock)
        assert all(intervals == [] for intervals in result.values())

    def test_reversed_range(self, clock):
        with pytest.raises(ValueError):
            project_range([_shift()], TUESDAY, MONDAY, clock)
