# clinic_booking/routers/clinic_routes.py

from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlmodel import Session, select

from clinic_booking.db import get_session
from clinic_booking.models import Availability, Location, Service, TherapistService, User
from clinic_booking.schemas import (
    AvailabilityPublic,
    LocationPublic,
    ServicePublic,
    TherapistPublic,
    UserRole,
)

router = APIRouter(
    tags=["clinic"],
)


@router.get("/locations", response_model=List[LocationPublic])
def list_locations(session: Session = Depends(get_session)):
    return session.exec(select(Location).order_by(Location.id)).all()


@router.get("/services", response_model=List[ServicePublic])
def list_services(session: Session = Depends(get_session)):
    return session.exec(select(Service).order_by(Service.id)).all()


@router.get("/therapists", response_model=List[TherapistPublic])
def list_therapists(
    service_id: Optional[int] = None,
    location_id: Optional[int] = None,
    session: Session = Depends(get_session),
):
    stmt = select(User).where(User.role == UserRole.therapist.value)

    # 1) Certified for the service
    if service_id is not None:
        certified = select(TherapistService.user_id).where(TherapistService.service_id == service_id)
        stmt = stmt.where(User.id.in_(certified))

    # 2) Works at the location
    if location_id is not None:
        working = select(Availability.therapist_id).where(Availability.location_id == location_id)
        stmt = stmt.where(User.id.in_(working))

    return session.exec(stmt.order_by(User.id)).all()


@router.get("/availabilities", response_model=List[AvailabilityPublic])
def list_availabilities(
    therapist_id: Optional[int] = None,
    location_id: Optional[int] = None,
    session: Session = Depends(get_session),
):
    stmt = select(Availability)
    if therapist_id is not None:
        stmt = stmt.where(Availability.therapist_id == therapist_id)
    if location_id is not None:
        stmt = stmt.where(Availability.location_id == location_id)

    stmt = stmt.order_by(Availability.therapist_id, Availability.day_of_week, Availability.start_minute)
    return session.exec(stmt).all()
