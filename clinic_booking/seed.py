# clinic_booking/seed.py

"""Demo data: python -m clinic_booking.seed"""

import logging
from datetime import date, timedelta
from typing import Dict, Optional

from sqlmodel import Session, select

from clinic_booking.config import get_clock
from clinic_booking.core.clinic_time import ClinicClock
from clinic_booking.db import engine, init_db
from clinic_booking.models import Appointment, Availability, Location, Service, TherapistService, User
from clinic_booking.schemas import AppointmentStatus, UserRole

logger = logging.getLogger(__name__)


def clear(session: Session) -> None:
    # reverse dependency order
    for model in (Appointment, TherapistService, Availability, Service, User, Location):
        for row in session.exec(select(model)).all():
            session.delete(row)
        session.flush()
    session.commit()


def _add_all(session: Session, rows):
    session.add_all(rows)
    session.flush()  # fills ids
    return rows


def seed(session: Session, today: Optional[date] = None, clock: Optional[ClinicClock] = None) -> Dict[str, int]:
    """
    Reset the database to the demo clinic.

    Appointments land in the week after ``today``.

    Returns:
        counts of created rows per table
    """
    clock = clock or get_clock()
    today = today or date.today()

    clear(session)

    # 1) Locations
    downtown, westside = _add_all(session, [
        Location(name="Downtown", address="123 Main St"),
        Location(name="Westside", address="456 West Ave"),
    ])

    # 2) Services
    assessment, massage, dry_needling = _add_all(session, [
        Service(name="Initial Assessment", duration_mins=60, cost_cents=15000),
        Service(name="Massage", duration_mins=45, cost_cents=10000),
        Service(name="Dry Needling", duration_mins=30, cost_cents=8000),
    ])

    # 3) Therapists
    therapist_a, therapist_b, therapist_c = _add_all(session, [
        User(name="Therapist A", role=UserRole.therapist.value, specialization="General"),
        User(name="Therapist B", role=UserRole.therapist.value, specialization="Massage"),
        User(name="Therapist C", role=UserRole.therapist.value, specialization="Sports"),
    ])

    # 4) Certifications
    certifications = _add_all(session, [
        TherapistService(user_id=therapist_a.id, service_id=assessment.id),
        TherapistService(user_id=therapist_a.id, service_id=massage.id),
        TherapistService(user_id=therapist_a.id, service_id=dry_needling.id),
        TherapistService(user_id=therapist_b.id, service_id=massage.id),
        TherapistService(user_id=therapist_c.id, service_id=assessment.id),
        TherapistService(user_id=therapist_c.id, service_id=dry_needling.id),
    ])

    # 5) Weekly shifts (0 = Sunday)
    shifts = []
    # A: Downtown Mon-Fri 09:00-17:00
    for day in range(1, 6):
        shifts.append(Availability(
            therapist_id=therapist_a.id, location_id=downtown.id,
            day_of_week=day, start_minute=540, end_minute=1020,
        ))
    # B: Westside Tue-Thu 10:00-18:00
    for day in range(2, 5):
        shifts.append(Availability(
            therapist_id=therapist_b.id, location_id=westside.id,
            day_of_week=day, start_minute=600, end_minute=1080,
        ))
    # C: Downtown weekends 10:00-15:00
    for day in (0, 6):
        shifts.append(Availability(
            therapist_id=therapist_c.id, location_id=downtown.id,
            day_of_week=day, start_minute=600, end_minute=900,
        ))
    _add_all(session, shifts)

    # 6) Patients
    patients = _add_all(session, [
        User(name=f"Patient {i + 1}", role=UserRole.patient.value) for i in range(5)
    ])

    # 7) Appointments, next week
    next_week = today + timedelta(days=7)
    week_sunday = next_week - timedelta(days=clock.day_of_week(next_week))

    def at(day_offset: int, hour: int) -> int:
        return clock.to_timestamp(clock.at_minute(week_sunday + timedelta(days=day_offset), hour * 60))

    scheduled = AppointmentStatus.scheduled.value
    appointments = _add_all(session, [
        # A, Downtown
        Appointment(starts_at=at(1, 10), duration_mins=60, status=scheduled, patient_id=patients[0].id,
                    therapist_id=therapist_a.id, service_id=assessment.id, location_id=downtown.id),
        Appointment(starts_at=at(1, 13), duration_mins=45, status=scheduled, patient_id=patients[1].id,
                    therapist_id=therapist_a.id, service_id=massage.id, location_id=downtown.id),
        Appointment(starts_at=at(3, 11), duration_mins=30, status=AppointmentStatus.completed.value,
                    patient_id=patients[2].id, therapist_id=therapist_a.id, service_id=dry_needling.id,
                    location_id=downtown.id),
        Appointment(starts_at=at(5, 14), duration_mins=60, status=scheduled, patient_id=patients[3].id,
                    therapist_id=therapist_a.id, service_id=assessment.id, location_id=downtown.id),
        # B, Westside
        Appointment(starts_at=at(2, 10), duration_mins=45, status=scheduled, patient_id=patients[4].id,
                    therapist_id=therapist_b.id, service_id=massage.id, location_id=westside.id),
        Appointment(starts_at=at(2, 12), duration_mins=45, status=scheduled, patient_id=patients[0].id,
                    therapist_id=therapist_b.id, service_id=massage.id, location_id=westside.id),
        Appointment(starts_at=at(4, 15), duration_mins=45, status=AppointmentStatus.cancelled.value,
                    patient_id=patients[1].id, therapist_id=therapist_b.id, service_id=massage.id,
                    location_id=westside.id),
        # C, Downtown weekend
        Appointment(starts_at=at(6, 11), duration_mins=30, status=scheduled, patient_id=patients[2].id,
                    therapist_id=therapist_c.id, service_id=dry_needling.id, location_id=downtown.id),
    ])

    session.commit()

    return {
        "locations": 2,
        "services": 3,
        "users": 3 + len(patients),
        "certifications": len(certifications),
        "availabilities": len(shifts),
        "appointments": len(appointments),
    }


def main() -> None:
    logging.basicConfig(level=logging.INFO)
    init_db()
    with Session(engine) as session:
        counts = seed(session)
    for table, count in counts.items():
        logger.info("seeded %s: %d", table, count)


if __name__ == "__main__":
    main()
