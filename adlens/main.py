"""ADLENS — FastAPI Application Entry Point.

Campaign performance dashboard backend.
"""

import asyncio
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from adlens.analyzer.pipeline import CampaignDataPipeline, build_pipeline
from adlens.api.dashboard_routes import router as dashboard_router
from adlens.api.source_routes import router as source_router
from adlens.config import settings
from adlens.core.logging import get_logger
from adlens.models.dashboard_models import PipelineState
from adlens.scheduler.jobs import start_scheduler, stop_scheduler

logger = get_logger("main")

VERSION = "1.0.0"


def create_app(pipeline: Optional[CampaignDataPipeline] = None) -> FastAPI:
    """Build the app around ``pipeline`` (wired from settings when omitted)."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Startup and shutdown lifecycle."""
        logger.info("🚀 ADLENS starting up...")
        app.state.pipeline = pipeline or build_pipeline(settings)
        load_task = None
        if settings.autostart and app.state.pipeline.state == PipelineState.IDLE:
            load_task = asyncio.create_task(app.state.pipeline.start())
        start_scheduler(app.state.pipeline)
        yield
        stop_scheduler()
        if load_task is not None and not load_task.done():
            load_task.cancel()
        close = getattr(app.state.pipeline.source, "close", None)
        if close is not None:
            await close()
        logger.info("ADLENS shut down")

    app = FastAPI(
        title="ADLENS",
        description="Campaign performance dashboard — date-windowed rollups, top creatives and daily trends from a published CSV export.",
        version=VERSION,
        lifespan=lifespan,
    )

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Routers
    app.include_router(dashboard_router)
    app.include_router(source_router)

    @app.get("/health", tags=["System"])
    async def health_check():
        """Health check endpoint."""
        return {
            "status": "healthy",
            "service": "adlens",
            "version": VERSION,
        }

    return app


app = create_app()
