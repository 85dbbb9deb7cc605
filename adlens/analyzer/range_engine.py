"""ADLENS — Range Engine.

Date-window concerns of the analyzer:
- filter records to an inclusive ``[from, to]`` window
- report the span of dates available in the whole store
- derive the default window ("last N complete days ending yesterday")
"""

from datetime import datetime, timedelta, tzinfo
from typing import List, Optional, Sequence

from adlens.core.dates import end_of_day, normalize_date, start_of_day
from adlens.models.campaign_models import CampaignRecord, DateRange
from adlens.models.dashboard_models import AvailableDateRange


def filter_by_date_range(
    records: Sequence[CampaignRecord],
    date_from: datetime,
    date_to: datetime,
    tz: Optional[tzinfo] = None,
) -> List[CampaignRecord]:
    """Records whose date lies within ``[date_from, date_to]``, order kept.

    Records without a valid date never match.
    """
    matched: List[CampaignRecord] = []
    for record in records:
        when = normalize_date(record.date, tz)
        if when is not None and date_from <= when <= date_to:
            matched.append(record)
    return matched


def get_available_date_range(
    records: Sequence[CampaignRecord],
    tz: Optional[tzinfo] = None,
) -> Optional[AvailableDateRange]:
    """Earliest and latest valid dates in ``records`` (None if there are none)."""
    dates = [
        d for d in (normalize_date(r.date, tz) for r in records) if d is not None
    ]
    if not dates:
        return None
    return AvailableDateRange(min=min(dates), max=max(dates))


def default_date_range(now: datetime, days: int = 7) -> DateRange:
    """The ``days`` complete local days ending the day before ``now``."""
    to = end_of_day(now - timedelta(days=1))
    date_from = start_of_day(to - timedelta(days=days - 1))
    return DateRange(from_=date_from, to=to)


def count_invalid_dates(
    records: Sequence[CampaignRecord],
    tz: Optional[tzinfo] = None,
) -> int:
    return sum(1 for r in records if normalize_date(r.date, tz) is None)
