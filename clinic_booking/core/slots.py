# clinic_booking/core/slots.py

# Candidate starts step from the shift start on a fixed cadence; free ones are
# merged across therapists by start instant.

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Any, Dict, Iterable, List, Optional, Set, Tuple

from clinic_booking.core.availability import Interval
from clinic_booking.core.clinic_time import ClinicClock
from clinic_booking.core.overlap import active_bounds_by_therapist, overlaps

DEFAULT_CADENCE_MINUTES = 30


@dataclass(frozen=True, order=True)
class Slot:
    start: datetime  # UTC
    therapist_ids: Tuple[int, ...] = field(default=())

    @property
    def time(self) -> int:
        """Start as seconds since the Unix epoch."""
        return int(self.start.timestamp())

    def to_dict(self) -> Dict[str, Any]:
        return {"time": self.time, "therapist_ids": list(self.therapist_ids)}


def candidate_minutes(interval: Interval, duration_mins: int, cadence_mins: int) -> List[int]:
    """Start minutes reachable from the interval start whose slot ends no later than the interval end."""
    minutes = []
    minute = interval.start_minute
    while minute + duration_mins <= interval.end_minute:
        minutes.append(minute)
        minute += cadence_mins
    return minutes


def _is_blocked(start: datetime, end: datetime, booked: List[Tuple[datetime, datetime]]) -> bool:
    for appt_start, appt_end in booked:
        if appt_start >= end:
            # sorted by start: nothing later can overlap
            break
        if overlaps(appt_start, appt_end, start, end):
            return True
    return False


def generate_slots(
    intervals: Iterable[Interval],
    duration_mins: int,
    appointments: Iterable[Any],
    clock: ClinicClock,
    cadence_mins: int = DEFAULT_CADENCE_MINUTES,
) -> List[Slot]:
    """
    Available slots for the given intervals.

    Args:
        intervals: projected shift intervals, of one or many therapists
        duration_mins: service duration, the width of every slot
        appointments: existing appointments (cancelled ones are ignored)
        clock: clinic clock used to place wall-clock minutes in time
        cadence_mins: step between successive candidate starts

    Returns:
        slots sorted by start; each carries the sorted ids of every
        therapist free at that instant
    """
    if duration_mins <= 0:
        raise ValueError(f"duration_mins must be positive, got {duration_mins}")
    if cadence_mins <= 0:
        raise ValueError(f"cadence_mins must be positive, got {cadence_mins}")

    booked = active_bounds_by_therapist(appointments)
    duration = timedelta(minutes=duration_mins)
    free: Dict[datetime, Set[int]] = {}

    for interval in intervals:
        therapist_booked = booked.get(interval.therapist_id, [])
        for minute in candidate_minutes(interval, duration_mins, cadence_mins):
            if not clock.wall_time_exists(interval.day, minute):
                continue
            start = clock.at_minute(interval.day, minute)
            if start + duration > interval.end:
                # spring-forward day: the wall clock runs an hour ahead of real time
                continue
            if _is_blocked(start, start + duration, therapist_booked):
                continue
            free.setdefault(start, set()).add(interval.therapist_id)

    return [Slot(start=start, therapist_ids=tuple(sorted(ids))) for start, ids in sorted(free.items())]


def group_by_day(
    slots: Iterable[Slot],
    clock: ClinicClock,
    days: Optional[Iterable[date]] = None,
) -> Dict[date, List[Slot]]:
    """
    Partition slots by clinic-local date, ascending within each day.

    Dates listed in ``days`` are present even when they hold no slot.
    """
    grouped: Dict[date, List[Slot]] = {day: [] for day in days or ()}
    for slot in sorted(slots):
        grouped.setdefault(clock.local_date(slot.start), []).append(slot)
    return grouped


def slot_times(slots: Iterable[Slot]) -> List[int]:
    """Time-only view of detailed slots."""
    return [slot.time for slot in slots]
