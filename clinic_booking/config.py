# clinic_booking/config.py

import os

from dotenv import load_dotenv

from clinic_booking.core.clinic_time import ClinicClock

# values from .env never override variables already set in the environment
load_dotenv()

# Database
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./clinic.db")
SQL_ECHO = os.getenv("SQL_ECHO", "false").lower() in ("1", "true", "yes")

# Clinic reference zone: day-of-week, minute-of-day and date keys use it
CLINIC_TIMEZONE = os.getenv("CLINIC_TIMEZONE", "America/New_York")

# Slots
SLOT_CADENCE_MINUTES = int(os.getenv("SLOT_CADENCE_MINUTES", "30"))
MAX_SLOT_RANGE_DAYS = int(os.getenv("MAX_SLOT_RANGE_DAYS", "62"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


def get_clock() -> ClinicClock:
    return ClinicClock(CLINIC_TIMEZONE)
