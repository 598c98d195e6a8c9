# clinic_booking/core/availability.py

# Weekly shifts are clinic-local (day of week + minute of day); projecting
# them onto a date gives absolute intervals through the ClinicClock.

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Dict, Iterable, List

from clinic_booking.core.clinic_time import MINUTES_PER_DAY, ClinicClock


@dataclass(frozen=True)
class Shift:
    therapist_id: int
    location_id: int
    day_of_week: int  # 0 = Sunday
    start_minute: int
    end_minute: int

    def __post_init__(self):
        if not 0 <= self.day_of_week <= 6:
            raise ValueError(f"day_of_week must be between 0 and 6, got {self.day_of_week}")
        if not 0 <= self.start_minute < MINUTES_PER_DAY:
            raise ValueError(f"start_minute out of range: {self.start_minute}")
        if not self.start_minute < self.end_minute <= MINUTES_PER_DAY:
            raise ValueError(
                f"end_minute must be after start_minute and at most {MINUTES_PER_DAY}, "
                f"got {self.start_minute}-{self.end_minute}"
            )

    @classmethod
    def from_record(cls, record: Any) -> "Shift":
        """Build from any object carrying the shift attributes (e.g. an Availability row)."""
        return cls(
            therapist_id=record.therapist_id,
            location_id=record.location_id,
            day_of_week=record.day_of_week,
            start_minute=record.start_minute,
            end_minute=record.end_minute,
        )

    def covers(self, start_second: int, duration_mins: int) -> bool:
        """[start_second, start_second + duration) lies within the shift, both ends inclusive."""
        return (
            self.start_minute * 60 <= start_second
            and start_second + duration_mins * 60 <= self.end_minute * 60
        )


@dataclass(frozen=True)
class Interval:
    """A shift made concrete on one civil day."""

    therapist_id: int
    location_id: int
    day: date
    start_minute: int
    end_minute: int
    start: datetime  # UTC
    end: datetime  # UTC


class WeeklySchedule:
    """
    Periodic interval set: day of week -> shifts, in insertion order.

    Shifts of one therapist on one day are kept as given; they are not
    merged even when they overlap.
    """

    def __init__(self, shifts: Iterable[Shift] = ()):
        self._by_day: Dict[int, List[Shift]] = {day: [] for day in range(7)}
        for shift in shifts:
            self.add(shift)

    def add(self, shift: Shift) -> None:
        self._by_day[shift.day_of_week].append(shift)

    def shifts_on(self, day_of_week: int) -> List[Shift]:
        return list(self._by_day[day_of_week])

    def __len__(self) -> int:
        return sum(len(shifts) for shifts in self._by_day.values())


def _as_schedule(shifts) -> WeeklySchedule:
    if isinstance(shifts, WeeklySchedule):
        return shifts
    return WeeklySchedule(shifts)


def project(shifts, target_date: date, clock: ClinicClock) -> List[Interval]:
    """
    Shift intervals active on ``target_date``.

    Args:
        shifts: WeeklySchedule or iterable of Shift
        target_date: civil date in the clinic zone
        clock: clinic clock

    Returns:
        one Interval per shift whose day of week matches, in schedule order
    """
    schedule = _as_schedule(shifts)
    intervals = []
    for shift in schedule.shifts_on(clock.day_of_week(target_date)):
        intervals.append(
            Interval(
                therapist_id=shift.therapist_id,
                location_id=shift.location_id,
                day=target_date,
                start_minute=shift.start_minute,
                end_minute=shift.end_minute,
                start=clock.at_minute(target_date, shift.start_minute),
                end=clock.at_minute(target_date, shift.end_minute),
            )
        )
    return intervals


def project_range(
    shifts,
    start_date: date,
    end_date: date,
    clock: ClinicClock,
) -> Dict[date, List[Interval]]:
    """
    Projection for every date from start_date to end_date inclusive.

    Dates without a matching shift map to an empty list.
    """
    if start_date > end_date:
        raise ValueError(f"start_date {start_date} is after end_date {end_date}")

    schedule = _as_schedule(shifts)
    return {day: project(schedule, day, clock) for day in clock.iter_dates(start_date, end_date)}
