"""ADLENS — Source API Routes."""

from fastapi import APIRouter, Depends

from adlens.analyzer.pipeline import CampaignDataPipeline
from adlens.api.dashboard_routes import get_pipeline
from adlens.connectors.sheets.client import mask_url

router = APIRouter(prefix="/source", tags=["Source"])


@router.get("/status")
async def source_status(pipeline: CampaignDataPipeline = Depends(get_pipeline)):
    """Where the data comes from and how the last load went."""
    source_url = getattr(pipeline.source, "source_url", "")
    return {
        "status": pipeline.state.value,
        "source": mask_url(source_url) if source_url else None,
        "record_count": len(pipeline.raw_data),
        "invalid_date_count": pipeline.invalid_date_count,
        "fetched_at": pipeline.fetched_at.isoformat() if pipeline.fetched_at else None,
        "error": pipeline.error,
        "error_kind": pipeline.error_kind,
    }
