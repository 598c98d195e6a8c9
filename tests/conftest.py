"""Shared test fixtures for clinic booking tests."""

from datetime import date
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session, create_engine

from clinic_booking import config, scheduling
from clinic_booking.core.clinic_time import ClinicClock
from clinic_booking.db import get_session, init_db
from clinic_booking.main import app
from clinic_booking.models import Availability, Location, Service, TherapistService, User

CLINIC_TZ = "America/New_York"

# EST (UTC-5) week, before the 2025-03-09 DST switch
SUNDAY = date(2025, 3, 2)
MONDAY = date(2025, 3, 3)
TUESDAY = date(2025, 3, 4)


@pytest.fixture(autouse=True)
def clinic_settings(monkeypatch):
    """Pin configuration so tests do not depend on the caller's environment."""
    monkeypatch.setattr(config, "CLINIC_TIMEZONE", CLINIC_TZ)
    monkeypatch.setattr(scheduling, "SLOT_CADENCE_MINUTES", 30)
    monkeypatch.setattr(scheduling, "MAX_SLOT_RANGE_DAYS", 62)


@pytest.fixture
def clock() -> ClinicClock:
    return ClinicClock(CLINIC_TZ)


@pytest.fixture
def engine(tmp_path):
    engine = create_engine(
        f"sqlite:///{tmp_path / 'clinic.db'}",
        connect_args={"check_same_thread": False},
    )
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def client(engine):
    def override_get_session():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = override_get_session
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def clinic(session) -> SimpleNamespace:
    """
    Small clinic:
        alice: Downtown Mon 09:00-17:00, assessment + dry needling
        bob:   Downtown Mon 10:00-15:00, assessment
        carol: Westside Tue 10:00-18:00, assessment + massage
        dave:  Downtown Mon 09:00-17:00, massage
    """
    downtown = Location(name="Downtown", address="123 Main St")
    westside = Location(name="Westside", address="456 West Ave")
    assessment = Service(name="Initial Assessment", duration_mins=60, cost_cents=15000)
    massage = Service(name="Massage", duration_mins=45, cost_cents=10000)
    needling = Service(name="Dry Needling", duration_mins=30, cost_cents=8000)
    alice = User(name="Alice", role="therapist", specialization="General")
    bob = User(name="Bob", role="therapist", specialization="Sports")
    carol = User(name="Carol", role="therapist", specialization="Massage")
    dave = User(name="Dave", role="therapist")
    patient = User(name="Pat", role="patient")
    admin = User(name="Ada", role="admin")

    session.add_all([
        downtown, westside, assessment, massage, needling,
        alice, bob, carol, dave, patient, admin,
    ])
    session.flush()

    session.add_all([
        TherapistService(user_id=alice.id, service_id=assessment.id),
        TherapistService(user_id=alice.id, service_id=needling.id),
        TherapistService(user_id=bob.id, service_id=assessment.id),
        TherapistService(user_id=carol.id, service_id=assessment.id),
        TherapistService(user_id=carol.id, service_id=massage.id),
        TherapistService(user_id=dave.id, service_id=massage.id),
        Availability(therapist_id=alice.id, location_id=downtown.id, day_of_week=1, start_minute=540, end_minute=1020),
        Availability(therapist_id=bob.id, location_id=downtown.id, day_of_week=1, start_minute=600, end_minute=900),
        Availability(therapist_id=carol.id, location_id=westside.id, day_of_week=2, start_minute=600, end_minute=1080),
        Availability(therapist_id=dave.id, location_id=downtown.id, day_of_week=1, start_minute=540, end_minute=1020),
    ])
    session.commit()

    return SimpleNamespace(
        downtown=downtown.id,
        westside=westside.id,
        assessment=assessment.id,
        massage=massage.id,
        needling=needling.id,
        alice=alice.id,
        bob=bob.id,
        carol=carol.id,
        dave=dave.id,
        patient=patient.id,
        admin=admin.id,
    )


@pytest.fixture
def ts(clock):
    """Epoch seconds of a clinic-local wall-clock minute on a date."""

    def _ts(day: date, minute: int) -> int:
        return clock.to_timestamp(clock.at_minute(day, minute))

    return _ts
