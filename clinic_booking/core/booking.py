# clinic_booking/core/booking.py

# Pure check of one proposed appointment. Persisting it, and holding the lock
# that keeps check and insert atomic, is up to the caller.

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Iterable, Union

from clinic_booking.core.availability import Shift
from clinic_booking.core.clinic_time import ClinicClock
from clinic_booking.core.errors import DoubleBooked, NotAvailable
from clinic_booking.core.overlap import find_collisions


@dataclass(frozen=True)
class BookingCandidate:
    therapist_id: int
    location_id: int
    start: datetime  # timezone-aware
    duration_mins: int

    @property
    def end(self) -> datetime:
        return self.start + timedelta(minutes=self.duration_mins)


@dataclass(frozen=True)
class Ok:
    ok = True


@dataclass(frozen=True)
class Rejected:
    reason: str
    message: str
    ok = False


def has_covering_shift(candidate: BookingCandidate, shifts: Iterable[Any], clock: ClinicClock) -> bool:
    local_date = clock.local_date(candidate.start)
    day_of_week = clock.day_of_week(local_date)
    start_second = clock.seconds_into_day(candidate.start)

    for record in shifts:
        shift = record if isinstance(record, Shift) else Shift.from_record(record)
        if shift.therapist_id != candidate.therapist_id:
            continue
        if shift.location_id != candidate.location_id:
            continue
        if shift.day_of_week != day_of_week:
            continue
        if not shift.covers(start_second, candidate.duration_mins):
            continue
        # wall-clock seconds alone overstate a spring-forward shift by an hour
        if candidate.end <= clock.at_minute(local_date, shift.end_minute):
            return True
    return False


def validate_booking(
    candidate: BookingCandidate,
    shifts: Iterable[Any],
    appointments: Iterable[Any],
    clock: ClinicClock,
) -> Union[Ok, Rejected]:
    """
    Both checks must pass:
        1. a shift of the therapist at the location fully contains the
           appointment (else not-available)
        2. no non-cancelled appointment of the therapist overlaps it
           (else double-booked)
    """
    if candidate.duration_mins <= 0:
        raise ValueError(f"duration_mins must be positive, got {candidate.duration_mins}")

    if not has_covering_shift(candidate, shifts, clock):
        return Rejected(
            reason=NotAvailable.reason,
            message="Therapist is not available at this time/location",
        )

    collisions = find_collisions(candidate.therapist_id, candidate.start, candidate.end, appointments)
    if collisions:
        return Rejected(
            reason=DoubleBooked.reason,
            message="Therapist is already booked for this time slot",
        )

    return Ok()
