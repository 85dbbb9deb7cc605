"""ADLENS — Dashboard API Routes."""

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from pydantic import BaseModel

from adlens.analyzer.pipeline import CampaignDataPipeline
from adlens.core.errors import PipelineBusyError
from adlens.core.logging import get_logger
from adlens.models.campaign_models import CampaignRecord, DateRange
from adlens.models.dashboard_models import (
    AdPerformance,
    AvailableDateRange,
    CampaignTrend,
    DashboardMetrics,
    DashboardSnapshot,
)

logger = get_logger("api.dashboard")

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


def get_pipeline(request: Request) -> CampaignDataPipeline:
    """Dependency — the pipeline owned by the running app."""
    return request.app.state.pipeline


# ── Request Models ──


class DateRangeRequest(BaseModel):
    """Request body for PUT /dashboard/date-range."""

    start_date: Optional[date] = None
    """First day of the window (YYYY-MM-DD)."""
    end_date: Optional[date] = None
    """Last day of the window (YYYY-MM-DD), inclusive."""

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"start_date": "2024-01-29", "end_date": "2024-02-04"},
                {"start_date": None, "end_date": None},
            ]
        }
    }


# ── Endpoints ──


@router.get("", response_model=DashboardSnapshot)
async def get_dashboard(
    include_raw: bool = Query(False, description="Include the unfiltered records"),
    pipeline: CampaignDataPipeline = Depends(get_pipeline),
):
    """Full read model: state, range, metrics, top creatives and trends."""
    return pipeline.snapshot(include_raw=include_raw)


@router.get("/metrics", response_model=DashboardMetrics)
async def get_metrics(pipeline: CampaignDataPipeline = Depends(get_pipeline)):
    return pipeline.metrics


@router.get("/top-creatives", response_model=List[AdPerformance])
async def get_top_creatives(
    limit: Optional[int] = Query(None, ge=1, le=100),
    pipeline: CampaignDataPipeline = Depends(get_pipeline),
):
    """Best creatives in the active window, ranked by conversions."""
    if limit is None:
        return pipeline.top_creatives
    return pipeline.top_creatives_for(limit)


@router.get("/trends", response_model=List[CampaignTrend])
async def get_trends(pipeline: CampaignDataPipeline = Depends(get_pipeline)):
    return pipeline.campaign_trends


@router.get("/available-range", response_model=Optional[AvailableDateRange])
async def get_available_range(pipeline: CampaignDataPipeline = Depends(get_pipeline)):
    """Earliest and latest dates in the dataset, for date-picker bounds."""
    return pipeline.available_date_range


@router.get("/records", response_model=List[CampaignRecord])
async def get_records(pipeline: CampaignDataPipeline = Depends(get_pipeline)):
    return pipeline.filtered_data


@router.put("/date-range", response_model=DashboardSnapshot)
async def set_date_range(
    request: DateRangeRequest,
    pipeline: CampaignDataPipeline = Depends(get_pipeline),
):
    """Replace the active window. Both dates empty restores the default window."""
    if request.start_date is None and request.end_date is None:
        pipeline.set_date_range(None)
        return pipeline.snapshot(include_raw=False)

    if request.start_date is None or request.end_date is None:
        raise HTTPException(
            status_code=422, detail="start_date and end_date must be given together"
        )
    if request.start_date > request.end_date:
        raise HTTPException(
            status_code=422, detail="start_date must not be after end_date"
        )

    pipeline.set_date_range(DateRange.for_days(request.start_date, request.end_date))
    return pipeline.snapshot(include_raw=False)


@router.post("/refresh", response_model=DashboardSnapshot)
async def refresh(pipeline: CampaignDataPipeline = Depends(get_pipeline)):
    """Re-fetch the source and rebuild every view."""
    try:
        await pipeline.restart()
    except PipelineBusyError as e:
        logger.warning(f"Refresh rejected: {e}", extra={"endpoint": "/dashboard/refresh"})
        raise HTTPException(status_code=409, detail=str(e))
    return pipeline.snapshot(include_raw=False)
