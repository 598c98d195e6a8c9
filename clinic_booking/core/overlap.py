# clinic_booking/core/overlap.py

# Appointments are read through therapist_id, starts_at (epoch seconds),
# duration_mins and status, so storage rows and plain objects work alike.

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Iterable, List, Tuple

from clinic_booking.schemas import AppointmentStatus


def overlaps(a_start: datetime, a_end: datetime, b_start: datetime, b_end: datetime) -> bool:
    """[a_start, a_end) and [b_start, b_end) share at least one instant. Touching ends do not count."""
    return a_start < b_end and a_end > b_start


def is_active(appointment: Any) -> bool:
    return appointment.status != AppointmentStatus.cancelled.value


def appointment_bounds(appointment: Any) -> Tuple[datetime, datetime]:
    start = datetime.fromtimestamp(appointment.starts_at, tz=timezone.utc)
    return start, start + timedelta(minutes=appointment.duration_mins)


def active_bounds_by_therapist(appointments: Iterable[Any]) -> Dict[int, List[Tuple[datetime, datetime]]]:
    """Bounds of non-cancelled appointments grouped per therapist, sorted by start."""
    result: Dict[int, List[Tuple[datetime, datetime]]] = {}
    for appt in appointments:
        if not is_active(appt):
            continue
        result.setdefault(appt.therapist_id, []).append(appointment_bounds(appt))
    for bounds in result.values():
        bounds.sort()
    return result


def find_collisions(
    therapist_id: int,
    start: datetime,
    end: datetime,
    appointments: Iterable[Any],
) -> List[Any]:
    """Non-cancelled appointments of the therapist overlapping [start, end)."""
    collisions = []
    for appt in appointments:
        if appt.therapist_id != therapist_id or not is_active(appt):
            continue
        appt_start, appt_end = appointment_bounds(appt)
        if overlaps(appt_start, appt_end, start, end):
            collisions.append(appt)
    return collisions
