"""
Scan scheduler.

APScheduler job that triggers the periodic airdrop scan inside the
API server's event loop.
"""

from datetime import UTC, datetime

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from loguru import logger

from airdrop_tracker.services.scan_engine import ScanEngine
from jobs.tasks.scan_task import run_scheduled_scan

SCAN_JOB_ID = "airdrop_scan"


def create_scheduler(
    scanner: ScanEngine,
    interval_seconds: int,
    run_immediately: bool = True,
) -> AsyncIOScheduler:
    """
    Create (not start) the scheduler with the scan job.

    Args:
        scanner: Scan engine
        interval_seconds: Seconds between scans
        run_immediately: Fire the first scan on start

    Returns:
        Configured AsyncIOScheduler
    """
    # next_run_time=None would add the job paused
    extra = {"next_run_time": datetime.now(UTC)} if run_immediately else {}

    scheduler = AsyncIOScheduler(timezone="UTC")
    scheduler.add_job(
        run_scheduled_scan,
        trigger="interval",
        seconds=interval_seconds,
        args=[scanner],
        id=SCAN_JOB_ID,
        name="Airdrop scan",
        max_instances=1,
        coalesce=True,
        replace_existing=True,
        **extra,
    )
    logger.info(
        f"[Scheduler] Scan job registered (every {interval_seconds}s)"
    )
    return scheduler
