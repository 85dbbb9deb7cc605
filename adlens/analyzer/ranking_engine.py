"""ADLENS — Creative Ranking Engine.

Ranks creatives inside the active window.

Ranking key: total conversions, descending. Ties go to the creative with
the lower total spend, then to the lower creative key, so the ordering is
fully deterministic.
"""

from typing import Dict, List, Sequence

from adlens.analyzer.metrics_engine import (
    cost_per_acquisition,
    engagement_rate,
    sum_measures,
)
from adlens.core.logging import get_logger
from adlens.models.campaign_models import CampaignRecord
from adlens.models.dashboard_models import AdPerformance

logger = get_logger("analyzer.ranking")

PRIMARY_KPI = "conversions"
DEFAULT_TOP_N = 6


def _group_by_creative(
    records: Sequence[CampaignRecord],
) -> Dict[str, List[CampaignRecord]]:
    groups: Dict[str, List[CampaignRecord]] = {}
    for r in records:
        groups.setdefault(r.creative_key, []).append(r)
    return groups


def _first_non_empty(records: Sequence[CampaignRecord], attr: str):
    for r in records:
        value = getattr(r, attr)
        if value:
            return value
    return None


def get_top_creatives(
    records: Sequence[CampaignRecord],
    limit: int = DEFAULT_TOP_N,
) -> List[AdPerformance]:
    """Top ``limit`` creatives by total conversions within ``records``."""
    if limit <= 0:
        return []

    groups = _group_by_creative(records)
    totals = {key: sum_measures(rows) for key, rows in groups.items()}

    ordered = sorted(
        totals.items(),
        key=lambda x: (-x[1][PRIMARY_KPI], x[1]["spend"], x[0]),
    )

    ranking: List[AdPerformance] = []
    for rank, (key, sums) in enumerate(ordered[:limit], 1):
        rows = groups[key]
        ranking.append(
            AdPerformance(
                rank=rank,
                creative_id=key,
                creative_name=_first_non_empty(rows, "creative_name") or key,
                campaign_name=_first_non_empty(rows, "campaign_name") or "",
                thumbnail_url=_first_non_empty(rows, "thumbnail_url"),
                primary_kpi=PRIMARY_KPI,
                primary_value=sums[PRIMARY_KPI],
                spend=sums["spend"],
                conversions=sums["conversions"],
                reach=sums["reach"],
                impressions=sums["impressions"],
                engagement=sums["engagement"],
                cpa=cost_per_acquisition(sums["spend"], sums["conversions"]),
                ctr=engagement_rate(sums["engagement"], sums["impressions"]),
            )
        )

    logger.debug(f"Ranked {len(ranking)} of {len(totals)} creatives")
    return ranking
