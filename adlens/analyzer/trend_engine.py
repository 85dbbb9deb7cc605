"""ADLENS — Trend Engine.

Builds the daily series behind the dashboard charts: one entry per calendar
day, oldest first, ending on the anchor day. Days without records are
zero-filled so the series stays contiguous.
"""

from collections import defaultdict
from datetime import date, datetime, tzinfo
from typing import Dict, List, Optional, Sequence

from adlens.analyzer.metrics_engine import (
    cost_per_acquisition,
    engagement_rate,
    sum_measures,
)
from adlens.core.dates import days_between, local_day
from adlens.models.campaign_models import CampaignRecord
from adlens.models.dashboard_models import CampaignTrend


def _group_by_day(
    records: Sequence[CampaignRecord],
    tz: Optional[tzinfo] = None,
) -> Dict[date, List[CampaignRecord]]:
    """Bucket records by local calendar day; invalid dates are dropped."""
    buckets: Dict[date, List[CampaignRecord]] = defaultdict(list)
    for r in records:
        day = local_day(r.date, tz)
        if day is not None:
            buckets[day].append(r)
    return buckets


def get_campaign_trends(
    records: Sequence[CampaignRecord],
    anchor: datetime | date,
    start: datetime | date | None = None,
    tz: Optional[tzinfo] = None,
) -> List[CampaignTrend]:
    """Daily totals from ``start``'s day through ``anchor``'s day.

    Without ``start`` the series begins on the earliest record day (never
    later than the anchor day). Records outside the span are ignored.
    """
    last_day = anchor.date() if isinstance(anchor, datetime) else anchor
    buckets = _group_by_day(records, tz)

    if start is not None:
        first_day = start.date() if isinstance(start, datetime) else start
    elif buckets:
        first_day = min(min(buckets), last_day)
    else:
        first_day = last_day

    trends: List[CampaignTrend] = []
    for day in days_between(first_day, last_day):
        sums = sum_measures(buckets.get(day, []))
        trends.append(
            CampaignTrend(
                date=day,
                label=day.strftime("%d/%m"),
                spend=sums["spend"],
                conversions=sums["conversions"],
                reach=sums["reach"],
                impressions=sums["impressions"],
                engagement=sums["engagement"],
                cpa=cost_per_acquisition(sums["spend"], sums["conversions"]),
                ctr=engagement_rate(sums["engagement"], sums["impressions"]),
            )
        )
    return trends
