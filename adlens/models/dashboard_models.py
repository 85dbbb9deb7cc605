"""ADLENS — Dashboard View Models.

Everything here is derived from the Record Store and the active date range;
nothing is persisted.
"""

from datetime import date, datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel

from adlens.models.campaign_models import CampaignRecord, DateRange


class PipelineState(str, Enum):
    """Lifecycle of one pipeline session."""

    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"


class DashboardMetrics(BaseModel):
    """Rollups over the filtered records."""

    total_spend: float = 0.0
    total_conversions: float = 0.0
    total_reach: float = 0.0
    total_impressions: float = 0.0
    total_engagement: float = 0.0
    avg_cpa: float = 0.0
    ctr: float = 0.0


class AdPerformance(BaseModel):
    """One creative's totals within the window, ranked."""

    rank: int
    creative_id: str
    creative_name: str = ""
    campaign_name: str = ""
    thumbnail_url: Optional[str] = None
    primary_kpi: str = "conversions"
    primary_value: float = 0.0
    spend: float = 0.0
    conversions: float = 0.0
    reach: float = 0.0
    impressions: float = 0.0
    engagement: float = 0.0
    cpa: float = 0.0
    ctr: float = 0.0


class CampaignTrend(BaseModel):
    """Totals for one calendar day of the trend series."""

    date: date
    label: str  # DD/MM
    spend: float = 0.0
    conversions: float = 0.0
    reach: float = 0.0
    impressions: float = 0.0
    engagement: float = 0.0
    cpa: float = 0.0
    ctr: float = 0.0


class AvailableDateRange(BaseModel):
    """Earliest and latest record dates in the whole store."""

    min: datetime
    max: datetime


class DashboardSnapshot(BaseModel):
    """Read model exposed to consumers."""

    state: PipelineState = PipelineState.IDLE
    loading: bool = False
    error: Optional[str] = None
    error_kind: Optional[str] = None
    fetched_at: Optional[datetime] = None
    date_range: Optional[DateRange] = None
    available_date_range: Optional[AvailableDateRange] = None
    metrics: DashboardMetrics = DashboardMetrics()
    top_creatives: List[AdPerformance] = []
    campaign_trends: List[CampaignTrend] = []
    invalid_date_count: int = 0
    raw_data: List[CampaignRecord] = []
    filtered_data: List[CampaignRecord] = []
