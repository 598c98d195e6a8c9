# clinic_booking/schemas.py

from datetime import date
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from clinic_booking.core.clinic_time import MINUTES_PER_DAY

# 9999-12-29T23:59:59Z: an end and a local midnight after it still fit in a datetime
MAX_STARTS_AT = 253402127999


class UserRole(str, Enum):
    admin = "admin"
    therapist = "therapist"
    patient = "patient"


class AppointmentStatus(str, Enum):
    scheduled = "scheduled"
    completed = "completed"
    cancelled = "cancelled"


class LocationPublic(BaseModel):
    id: int
    name: str
    address: str


class ServicePublic(BaseModel):
    id: int
    name: str
    duration_mins: int
    cost_cents: int


class TherapistPublic(BaseModel):
    id: int
    name: str
    role: UserRole
    specialization: Optional[str] = None


class AvailabilityPublic(BaseModel):
    id: int
    therapist_id: int
    location_id: int
    day_of_week: int
    start_minute: int
    end_minute: int


class AppointmentCreate(BaseModel):
    starts_at: int = Field(ge=0, le=MAX_STARTS_AT)  # seconds since the Unix epoch
    duration_mins: int = Field(gt=0, le=MINUTES_PER_DAY)
    patient_id: int
    therapist_id: int
    service_id: int
    location_id: int


class AppointmentPublic(BaseModel):
    id: int
    starts_at: int
    duration_mins: int
    status: AppointmentStatus
    patient_id: int
    therapist_id: int
    service_id: int
    location_id: int


class AppointmentDetail(AppointmentPublic):
    patient_name: Optional[str] = None
    therapist_name: Optional[str] = None
    service_name: Optional[str] = None
    location_name: Optional[str] = None


class SlotQuery(BaseModel):
    location_id: int
    service_id: int
    start_date: date
    end_date: date
    therapist_id: Optional[int] = None
    detailed: bool = False
