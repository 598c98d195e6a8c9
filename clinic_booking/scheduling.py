# clinic_booking/scheduling.py

import logging
import threading
from contextlib import contextmanager
from datetime import date, timedelta
from typing import Dict, Iterator, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from clinic_booking.config import MAX_SLOT_RANGE_DAYS, SLOT_CADENCE_MINUTES, get_clock
from clinic_booking.core.availability import Shift, WeeklySchedule, project_range
from clinic_booking.core.booking import BookingCandidate, Rejected, validate_booking
from clinic_booking.core.clinic_time import EARLIEST_DATE, LATEST_DATE, ClinicClock
from clinic_booking.core.errors import ERRORS_BY_REASON, InvalidRequest, NotFound, SchedulingError
from clinic_booking.core.slots import generate_slots, group_by_day, slot_times
from clinic_booking.models import Appointment, Availability, Location, Service, TherapistService, User
from clinic_booking.schemas import AppointmentCreate, AppointmentStatus, UserRole

logger = logging.getLogger(__name__)

# appointments starting this long before a window can still run into it
APPOINTMENT_LOOKBACK = timedelta(days=1)

_locks_guard = threading.Lock()
_therapist_locks: Dict[int, threading.Lock] = {}


@contextmanager
def therapist_lock(therapist_id: int) -> Iterator[None]:
    """In-process queue for one therapist's bookings, in front of the database lock."""
    with _locks_guard:
        lock = _therapist_locks.setdefault(therapist_id, threading.Lock())
    with lock:
        yield


def lock_therapist_row(session: Session, therapist_id: int) -> None:
    """
    Exclusive database lock covering the therapist until the session's
    transaction ends, shared by every process using the database.
    """
    if session.get_bind().dialect.name == "sqlite":
        # no row locks: take the database write lock before reading
        session.connection().exec_driver_sql("BEGIN IMMEDIATE")
    else:
        session.exec(select(User.id).where(User.id == therapist_id).with_for_update()).one()


def check_dates(*days: date) -> None:
    for day in days:
        if not EARLIEST_DATE <= day <= LATEST_DATE:
            raise InvalidRequest(
                f"Date {day.isoformat()} is outside {EARLIEST_DATE.isoformat()}..{LATEST_DATE.isoformat()}"
            )


def _get_or_not_found(session: Session, model, object_id: int, label: str):
    obj = session.get(model, object_id)
    if obj is None:
        raise NotFound(f"{label} not found")
    return obj


def _get_user_with_role(session: Session, user_id: int, role: UserRole, label: str) -> User:
    user = session.get(User, user_id)
    if user is None or user.role != role.value:
        raise NotFound(f"{label} not found")
    return user


def candidate_therapist_ids(session: Session, location_id: int, service_id: int) -> List[int]:
    """Therapists certified for the service with at least one shift at the location."""
    certified = session.exec(
        select(TherapistService.user_id).where(TherapistService.service_id == service_id)
    ).all()
    if not certified:
        return []

    working_here = session.exec(
        select(Availability.therapist_id)
        .where(Availability.location_id == location_id)
        .where(Availability.therapist_id.in_(certified))
    ).all()
    return sorted(set(working_here))


def load_shifts(session: Session, therapist_ids: List[int], location_id: int) -> List[Shift]:
    rows = session.exec(
        select(Availability)
        .where(Availability.therapist_id.in_(therapist_ids))
        .where(Availability.location_id == location_id)
        .order_by(Availability.therapist_id, Availability.day_of_week, Availability.start_minute)
    ).all()
    return [Shift.from_record(row) for row in rows]


def load_appointments(session: Session, therapist_ids: List[int], start_ts: int, end_ts: int) -> List[Appointment]:
    """Non-cancelled appointments of the therapists that may overlap [start_ts, end_ts)."""
    lookback = int(APPOINTMENT_LOOKBACK.total_seconds())
    return session.exec(
        select(Appointment)
        .where(Appointment.therapist_id.in_(therapist_ids))
        .where(Appointment.status != AppointmentStatus.cancelled.value)
        .where(Appointment.starts_at >= start_ts - lookback)
        .where(Appointment.starts_at < end_ts)
        .order_by(Appointment.starts_at)
    ).all()


def get_slots(
    session: Session,
    location_id: int,
    service_id: int,
    start_date: date,
    end_date: date,
    therapist_id: Optional[int] = None,
    detailed: bool = False,
    clock: Optional[ClinicClock] = None,
    cadence_mins: Optional[int] = None,
) -> Dict[str, list]:
    """
    Bookable slots for a service at a location, per clinic-local date.

    Returns:
        {"YYYY-MM-DD": [epoch seconds, ...]} or, when detailed,
        {"YYYY-MM-DD": [{"time": epoch seconds, "therapist_ids": [...]}, ...]}
        with every date of the range present
    """
    clock = clock or get_clock()
    cadence_mins = cadence_mins or SLOT_CADENCE_MINUTES

    check_dates(start_date, end_date)
    if start_date > end_date:
        raise InvalidRequest("start_date must not be after end_date")
    if (end_date - start_date).days + 1 > MAX_SLOT_RANGE_DAYS:
        raise InvalidRequest(f"Date range may span at most {MAX_SLOT_RANGE_DAYS} days")

    service = _get_or_not_found(session, Service, service_id, "Service")
    _get_or_not_found(session, Location, location_id, "Location")

    if therapist_id is not None:
        _get_user_with_role(session, therapist_id, UserRole.therapist, "Therapist")
        therapist_ids = [therapist_id]
    else:
        therapist_ids = candidate_therapist_ids(session, location_id, service_id)

    days = list(clock.iter_dates(start_date, end_date))
    if not therapist_ids:
        return {day.isoformat(): [] for day in days}

    schedule = WeeklySchedule(load_shifts(session, therapist_ids, location_id))
    range_start, range_end = clock.day_bounds(start_date, end_date)
    appointments = load_appointments(
        session,
        therapist_ids,
        clock.to_timestamp(range_start),
        clock.to_timestamp(range_end),
    )

    projected = project_range(schedule, start_date, end_date, clock)
    intervals = [interval for day in days for interval in projected[day]]
    slots = generate_slots(intervals, service.duration_mins, appointments, clock, cadence_mins)

    result = {}
    for day, day_slots in group_by_day(slots, clock, days=days).items():
        if detailed:
            result[day.isoformat()] = [slot.to_dict() for slot in day_slots]
        else:
            result[day.isoformat()] = slot_times(day_slots)

    logger.debug(
        "slots location=%s service=%s therapists=%s %s..%s: %d",
        location_id, service_id, therapist_ids, start_date, end_date, len(slots),
    )
    return result


def book_appointment(
    session: Session,
    request: AppointmentCreate,
    clock: Optional[ClinicClock] = None,
) -> Appointment:
    """
    Create a scheduled appointment after checking shift coverage and collisions.

    The checks and the insert run under the therapist's lock so that two
    overlapping requests for the same therapist cannot both succeed.

    Raises:
        NotFound: a referenced service, location, therapist or patient does not exist
        NotAvailable: no shift of the therapist at the location covers the time
        DoubleBooked: the time overlaps a non-cancelled appointment of the therapist
    """
    clock = clock or get_clock()

    _get_or_not_found(session, Service, request.service_id, "Service")
    _get_or_not_found(session, Location, request.location_id, "Location")
    _get_user_with_role(session, request.therapist_id, UserRole.therapist, "Therapist")
    _get_user_with_role(session, request.patient_id, UserRole.patient, "Patient")

    candidate = BookingCandidate(
        therapist_id=request.therapist_id,
        location_id=request.location_id,
        start=clock.from_timestamp(request.starts_at),
        duration_mins=request.duration_mins,
    )

    with therapist_lock(request.therapist_id):
        try:
            lock_therapist_row(session, request.therapist_id)
            shifts = load_shifts(session, [request.therapist_id], request.location_id)
            appointments = load_appointments(
                session,
                [request.therapist_id],
                clock.to_timestamp(candidate.start),
                clock.to_timestamp(candidate.end),
            )

            outcome = validate_booking(candidate, shifts, appointments, clock)
            if isinstance(outcome, Rejected):
                logger.info(
                    "booking rejected (%s): therapist=%s location=%s starts_at=%s duration=%s",
                    outcome.reason, request.therapist_id, request.location_id,
                    request.starts_at, request.duration_mins,
                )
                raise ERRORS_BY_REASON[outcome.reason](outcome.message)

            db_appt = Appointment(
                starts_at=request.starts_at,
                duration_mins=request.duration_mins,
                status=AppointmentStatus.scheduled.value,
                patient_id=request.patient_id,
                therapist_id=request.therapist_id,
                service_id=request.service_id,
                location_id=request.location_id,
            )
            session.add(db_appt)
            session.commit()
        except SchedulingError:
            session.rollback()  # releases the database lock
            raise
        except SQLAlchemyError:
            session.rollback()
            logger.exception("booking failed to persist: therapist=%s", request.therapist_id)
            raise

        session.refresh(db_appt)  # fills db_appt.id

    logger.info(
        "appointment %s booked: therapist=%s location=%s starts_at=%s",
        db_appt.id, db_appt.therapist_id, db_appt.location_id, db_appt.starts_at,
    )
    return db_appt
