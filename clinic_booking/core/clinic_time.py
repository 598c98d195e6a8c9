# clinic_booking/core/clinic_time.py

# Instants handed out by the clock are UTC-aware datetimes. Aware datetimes
# sharing a ZoneInfo compare by wall-clock time, so local datetimes never
# leave this module.

from datetime import date, datetime, time, timedelta, timezone
from typing import Iterator, Tuple
from zoneinfo import ZoneInfo

MINUTES_PER_DAY = 24 * 60

# civil dates whose neighbouring days stay inside datetime range in any zone
EARLIEST_DATE = date(1, 1, 2)
LATEST_DATE = date(9999, 12, 29)


class ClinicClock:
    """Converts between clinic-local civil time and absolute instants."""

    def __init__(self, tz_name: str):
        # ZoneInfoNotFoundError propagates: a misconfigured zone must not silently become UTC
        self.tz = ZoneInfo(tz_name)
        self.tz_name = tz_name

    def __repr__(self) -> str:
        return f"ClinicClock({self.tz_name!r})"

    # --- civil dates ---

    @staticmethod
    def day_of_week(day: date) -> int:
        """Sunday-based day of week: 0 = Sunday ... 6 = Saturday."""
        return (day.weekday() + 1) % 7

    @staticmethod
    def iter_dates(start: date, end: date) -> Iterator[date]:
        """Every calendar date from start to end, both inclusive."""
        current = start
        while current <= end:
            yield current
            current += timedelta(days=1)

    # --- wall clock -> instant ---

    def _wall(self, day: date, minute: int) -> datetime:
        extra_days, minute = divmod(minute, MINUTES_PER_DAY)
        return datetime.combine(
            day + timedelta(days=extra_days),
            time(minute // 60, minute % 60),
            tzinfo=self.tz,
        )

    def at_minute(self, day: date, minute: int) -> datetime:
        """
        Instant of the wall-clock time ``minute`` minutes after local midnight
        of ``day``. ``minute`` may be 1440 (next local midnight).

        Ambiguous wall-clock times (DST fall-back) resolve to the first
        occurrence.
        """
        return self._wall(day, minute).astimezone(timezone.utc)

    def wall_time_exists(self, day: date, minute: int) -> bool:
        """False for wall-clock times skipped by a DST spring-forward gap."""
        wall = self._wall(day, minute)
        round_trip = wall.astimezone(timezone.utc).astimezone(self.tz)
        return round_trip.replace(tzinfo=None) == wall.replace(tzinfo=None)

    def start_of_day(self, day: date) -> datetime:
        return self.at_minute(day, 0)

    def day_bounds(self, start: date, end: date) -> Tuple[datetime, datetime]:
        """Half-open [local midnight of start, local midnight after end)."""
        return self.start_of_day(start), self.start_of_day(end + timedelta(days=1))

    # --- instant -> wall clock ---

    def localize(self, instant: datetime) -> datetime:
        if instant.tzinfo is None:
            raise ValueError("instant must be timezone-aware")
        return instant.astimezone(self.tz)

    def local_date(self, instant: datetime) -> date:
        return self.localize(instant).date()

    def seconds_into_day(self, instant: datetime) -> int:
        """Wall-clock seconds since local midnight."""
        local = self.localize(instant)
        return local.hour * 3600 + local.minute * 60 + local.second

    # --- epoch seconds ---

    @staticmethod
    def from_timestamp(ts: int) -> datetime:
        return datetime.fromtimestamp(ts, tz=timezone.utc)

    @staticmethod
    def to_timestamp(instant: datetime) -> int:
        return int(instant.timestamp())
