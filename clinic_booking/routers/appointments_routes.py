# clinic_booking/routers/appointments_routes.py

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlmodel import Session, select

from clinic_booking.config import get_clock
from clinic_booking.core.errors import AlreadyCancelled, NotFound, SchedulingError
from clinic_booking.db import get_session
from clinic_booking.deps import http_error
from clinic_booking.models import Appointment, Location, Service, User
from clinic_booking.scheduling import book_appointment, check_dates
from clinic_booking.schemas import (
    AppointmentCreate,
    AppointmentDetail,
    AppointmentPublic,
    AppointmentStatus,
)

router = APIRouter(
    prefix="/appointments",
    tags=["appointments"],
)


@router.post("", response_model=AppointmentPublic, status_code=201)
def create_appointment(
    appt: AppointmentCreate,
    session: Session = Depends(get_session),
):
    try:
        return book_appointment(session, appt)
    except SchedulingError as exc:
        raise http_error(exc)


@router.get("", response_model=List[AppointmentDetail])
def list_appointments(
    therapist_id: Optional[int] = None,
    location_id: Optional[int] = None,
    status: Optional[AppointmentStatus] = None,
    on_date: Optional[date] = None,
    session: Session = Depends(get_session),
):
    stmt = select(Appointment)

    if therapist_id is not None:
        stmt = stmt.where(Appointment.therapist_id == therapist_id)
    if location_id is not None:
        stmt = stmt.where(Appointment.location_id == location_id)
    if status is not None:
        stmt = stmt.where(Appointment.status == status.value)
    if on_date is not None:
        try:
            check_dates(on_date)
        except SchedulingError as exc:
            raise http_error(exc)
        clock = get_clock()
        day_start, day_end = clock.day_bounds(on_date, on_date)
        stmt = (
            stmt.where(Appointment.starts_at >= clock.to_timestamp(day_start))
            .where(Appointment.starts_at < clock.to_timestamp(day_end))
        )

    appts = session.exec(stmt.order_by(Appointment.starts_at)).all()

    # names of related rows, fetched once per table
    users = {u.id: u.name for u in session.exec(select(User)).all()}
    services = {s.id: s.name for s in session.exec(select(Service)).all()}
    locations = {loc.id: loc.name for loc in session.exec(select(Location)).all()}

    return [
        AppointmentDetail(
            **a.model_dump(),
            patient_name=users.get(a.patient_id),
            therapist_name=users.get(a.therapist_id),
            service_name=services.get(a.service_id),
            location_name=locations.get(a.location_id),
        )
        for a in appts
    ]


@router.patch("/{appt_id}/cancel", response_model=AppointmentPublic)
def cancel_appointment(
    appt_id: int,
    session: Session = Depends(get_session),
):
    # 1) Find the appointment in DB
    target = session.get(Appointment, appt_id)
    if target is None:
        raise http_error(NotFound("Appointment not found"))

    # 2) Already cancelled?
    if target.status == AppointmentStatus.cancelled.value:
        raise http_error(AlreadyCancelled("Appointment already cancelled"))

    # 3) Cancel and persist
    target.status = AppointmentStatus.cancelled.value
    session.add(target)
    session.commit()
    session.refresh(target)

    return target
