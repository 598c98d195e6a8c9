# clinic_booking/models.py

from typing import Optional

from sqlalchemy import CheckConstraint, Index
from sqlmodel import SQLModel, Field


class Location(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    address: str


class User(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    role: str = Field(index=True)  # admin, therapist or patient
    specialization: Optional[str] = None


class Service(SQLModel, table=True):
    __table_args__ = (
        CheckConstraint("duration_mins > 0", name="ck_service_duration_positive"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    duration_mins: int
    cost_cents: int


class TherapistService(SQLModel, table=True):
    # certification: the therapist may perform the service
    user_id: int = Field(foreign_key="user.id", primary_key=True)
    service_id: int = Field(foreign_key="service.id", primary_key=True)


class Availability(SQLModel, table=True):
    """Recurring weekly shift of a therapist at a location."""

    __table_args__ = (
        CheckConstraint("day_of_week >= 0 AND day_of_week <= 6", name="ck_availability_day"),
        CheckConstraint(
            "start_minute >= 0 AND start_minute < end_minute AND end_minute <= 1440",
            name="ck_availability_minutes",
        ),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    therapist_id: int = Field(foreign_key="user.id", index=True)
    location_id: int = Field(foreign_key="location.id", index=True)
    day_of_week: int  # 0 = Sunday
    start_minute: int  # minutes from local midnight
    end_minute: int


class Appointment(SQLModel, table=True):
    __table_args__ = (
        Index("ix_appointment_therapist_start", "therapist_id", "starts_at"),
        CheckConstraint("duration_mins > 0", name="ck_appointment_duration_positive"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)

    starts_at: int  # seconds since the Unix epoch
    duration_mins: int
    status: str = "scheduled"
    patient_id: int = Field(foreign_key="user.id")
    therapist_id: int = Field(foreign_key="user.id")
    service_id: int = Field(foreign_key="service.id")
    location_id: int = Field(foreign_key="location.id")
