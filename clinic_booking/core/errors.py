# clinic_booking/core/errors.py


class SchedulingError(Exception):
    reason = "scheduling-error"
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_detail(self) -> dict:
        return {"reason": self.reason, "message": self.message}


class InvalidRequest(SchedulingError):
    reason = "invalid-request"
    status_code = 400


class NotFound(SchedulingError):
    reason = "not-found"
    status_code = 404


class NotAvailable(SchedulingError):
    reason = "not-available"
    status_code = 400


class DoubleBooked(SchedulingError):
    reason = "double-booked"
    status_code = 409


class AlreadyCancelled(SchedulingError):
    reason = "already-cancelled"
    status_code = 409


ERRORS_BY_REASON = {
    cls.reason: cls for cls in (InvalidRequest, NotFound, NotAvailable, DoubleBooked)
}
