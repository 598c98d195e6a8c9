# clinic_booking/deps.py

from fastapi import HTTPException

from clinic_booking.core.errors import SchedulingError


def http_error(exc: SchedulingError) -> HTTPException:
    return HTTPException(status_code=exc.status_code, detail=exc.to_detail())
