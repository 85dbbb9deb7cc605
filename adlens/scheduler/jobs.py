"""ADLENS — Scheduler Jobs.

APScheduler daily job that restarts the pipeline at the configured hour, so
the default window and the Record Store follow the calendar.
"""

from apscheduler.schedulers.asyncio import AsyncIOScheduler

from adlens.analyzer.pipeline import CampaignDataPipeline
from adlens.config import settings
from adlens.core.errors import PipelineBusyError
from adlens.core.logging import get_logger

logger = get_logger("scheduler")

scheduler = AsyncIOScheduler()


async def daily_refresh_job(pipeline: CampaignDataPipeline):
    """Re-fetch the source and rebuild every view."""
    logger.info("Scheduled refresh starting...")
    try:
        await pipeline.restart()
    except PipelineBusyError:
        logger.warning("Scheduled refresh skipped: a fetch is already in progress")
        return
    logger.info(
        f"Scheduled refresh complete: {pipeline.state.value}",
        extra={"state": pipeline.state.value},
    )


def start_scheduler(pipeline: CampaignDataPipeline):
    """Configure and start the scheduler."""
    if not settings.scheduler_enabled:
        logger.info("Scheduler disabled via config")
        return

    scheduler.add_job(
        daily_refresh_job,
        "cron",
        args=[pipeline],
        hour=settings.refresh_hour,
        minute=0,
        id="daily_refresh",
        replace_existing=True,
        misfire_grace_time=3600,
    )
    scheduler.start()
    logger.info(f"Scheduler started. Daily refresh at {settings.refresh_hour}:00")


def stop_scheduler():
    """Shutdown the scheduler gracefully."""
    if scheduler.running:
        scheduler.shutdown(wait=False)
        logger.info("Scheduler stopped")
