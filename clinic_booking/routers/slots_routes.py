# clinic_booking/routers/slots_routes.py

from fastapi import APIRouter, Depends
from sqlmodel import Session

from clinic_booking.core.errors import SchedulingError
from clinic_booking.db import get_session
from clinic_booking.deps import http_error
from clinic_booking.scheduling import get_slots
from clinic_booking.schemas import SlotQuery

router = APIRouter(
    tags=["slots"],
)


@router.get("/slots")
def list_slots(
    query: SlotQuery = Depends(),
    session: Session = Depends(get_session),
):
    """Bookable start times per date; with ``detailed`` each time lists the free therapists."""
    try:
        return get_slots(
            session,
            location_id=query.location_id,
            service_id=query.service_id,
            start_date=query.start_date,
            end_date=query.end_date,
            therapist_id=query.therapist_id,
            detailed=query.detailed,
        )
    except SchedulingError as exc:
        raise http_error(exc)
