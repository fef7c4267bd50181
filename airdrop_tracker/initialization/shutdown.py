"""
Initialization - Shutdown Module.

Stops the scheduler, closes WebSocket clients and database connections.
"""

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from loguru import logger

from .services import ServiceContainer


async def shutdown_handler(
    container: ServiceContainer,
    scheduler: AsyncIOScheduler | None = None,
) -> None:
    """Handle graceful shutdown."""
    logger.info("Graceful shutdown initiated...")

    if scheduler is not None and scheduler.running:
        scheduler.shutdown(wait=False)
        logger.info("Scheduler stopped")

    await container.hub.close_all()

    await container.db_engine.dispose()
    logger.info("Database connections closed")

    logger.info("Graceful shutdown complete")
