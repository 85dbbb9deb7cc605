"""ADLENS — Metrics Engine.

Computes dashboard rollups from a record subset:
totals for every measure, plus CPA and CTR derived from the totals.
"""

from collections import defaultdict
from typing import Dict, Iterable

from adlens.core.metric_registry import MEASURES
from adlens.models.campaign_models import CampaignRecord
from adlens.models.dashboard_models import DashboardMetrics


def sum_measures(records: Iterable[CampaignRecord]) -> Dict[str, float]:
    """Sum every registered measure; absent values count as 0."""
    sums: Dict[str, float] = defaultdict(float)
    for r in records:
        for name in MEASURES:
            sums[name] += getattr(r, name, 0.0) or 0.0
    return {name: sums[name] for name in MEASURES}


def cost_per_acquisition(spend: float, conversions: float) -> float:
    return (spend / conversions) if conversions > 0 else 0.0


def engagement_rate(engagement: float, impressions: float) -> float:
    return (engagement / impressions * 100) if impressions > 0 else 0.0


def aggregate_metrics(records: Iterable[CampaignRecord]) -> DashboardMetrics:
    """Totals and derived ratios for the given records."""
    sums = sum_measures(records)

    return DashboardMetrics(
        total_spend=sums["spend"],
        total_conversions=sums["conversions"],
        total_reach=sums["reach"],
        total_impressions=sums["impressions"],
        total_engagement=sums["engagement"],
        avg_cpa=cost_per_acquisition(sums["spend"], sums["conversions"]),
        ctr=engagement_rate(sums["engagement"], sums["impressions"]),
    )
