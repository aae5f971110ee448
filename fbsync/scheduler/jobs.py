"""FBSync — Scheduler Jobs.

APScheduler daily job that runs the insights sync at the configured hour.
"""

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from google.cloud import bigquery

from fbsync.config import settings
from fbsync.connectors.meta.client import MetaClient
from fbsync.connectors.meta.endpoints import InsightsReader
from fbsync.sync.pipeline import sync_from_settings
from fbsync.warehouse.bigquery import BigQueryWriter
from fbsync.core.logging import get_logger

logger = get_logger("scheduler")

scheduler = AsyncIOScheduler()


async def daily_sync_job(bigquery_client: bigquery.Client):
    """Sync the configured date range into BigQuery."""
    logger.info("Scheduled daily sync starting...")
    try:
        async with MetaClient() as client:
            run = await sync_from_settings(
                InsightsReader(client), BigQueryWriter(bigquery_client)
            )
        logger.info(f"Scheduled sync complete: {run.results}")
    except Exception as e:
        logger.error(f"Scheduled sync failed: {e}")


def start_scheduler(bigquery_client: bigquery.Client):
    """Configure and start the scheduler."""
    if not settings.scheduler_enabled:
        logger.info("Scheduler disabled via config")
        return

    scheduler.add_job(
        daily_sync_job,
        "cron",
        hour=settings.sync_hour,
        minute=0,
        args=[bigquery_client],
        id="daily_sync",
        replace_existing=True,
        misfire_grace_time=3600,
        max_instances=1,
    )
    scheduler.start()
    logger.info(f"Scheduler started. Daily sync at {settings.sync_hour}:00 UTC")


def stop_scheduler():
    """Shutdown the scheduler gracefully."""
    if scheduler.running:
        scheduler.shutdown(wait=False)
        logger.info("Scheduler stopped")
