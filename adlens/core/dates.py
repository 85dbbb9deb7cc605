"""ADLENS — Local Date Handling.

Every instant the analyzer compares is a naive ``datetime`` expressed in the
reference ("local") timezone. Calendar-date strings are anchored to local
midnight directly from their components and are never interpreted as UTC,
which would shift them to the previous day in zones west of Greenwich.
"""

from datetime import date, datetime, time, timedelta, tzinfo
from typing import Any, Callable, Optional
from zoneinfo import ZoneInfo

Clock = Callable[[], datetime]

END_OF_DAY = time(23, 59, 59, 999000)


def resolve_timezone(name: str | None) -> Optional[tzinfo]:
    """Return the ZoneInfo for ``name``, or None for the host local zone."""
    if not name:
        return None
    return ZoneInfo(name)


def make_clock(tz: Optional[tzinfo] = None) -> Clock:
    """Build a clock returning naive "now" in the reference zone."""
    if tz is None:
        return datetime.now

    def _now() -> datetime:
        return datetime.now(tz).replace(tzinfo=None)

    return _now


def parse_local_date(value: str) -> Optional[datetime]:
    """Parse ``YYYY-MM-DD`` into local midnight of that calendar day.

    Returns None when the text does not split into three numeric parts or
    does not name a real day.
    """
    parts = value.strip().split("-")
    if len(parts) != 3 or not all(p.isdigit() for p in parts):
        return None
    year, month, day = (int(p) for p in parts)
    try:
        return datetime(year, month, day)
    except ValueError:
        return None


def normalize_date(value: Any, tz: Optional[tzinfo] = None) -> Optional[datetime]:
    """Coerce a record date into a naive local datetime (None if invalid)."""
    if isinstance(value, str):
        return parse_local_date(value)
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value
        return value.astimezone(tz).replace(tzinfo=None)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    return None


def start_of_day(value: datetime | date) -> datetime:
    return datetime.combine(_as_date(value), time.min)


def end_of_day(value: datetime | date) -> datetime:
    return datetime.combine(_as_date(value), END_OF_DAY)


def local_day(value: Any, tz: Optional[tzinfo] = None) -> Optional[date]:
    """Calendar day of a record date under the same normalization."""
    normalized = normalize_date(value, tz)
    return normalized.date() if normalized is not None else None


def days_between(first: date, last: date) -> list[date]:
    """Inclusive list of calendar days from ``first`` to ``last``."""
    span = (last - first).days
    return [first + timedelta(days=i) for i in range(span + 1)]


def _as_date(value: datetime | date) -> date:
    return value.date() if isinstance(value, datetime) else value
