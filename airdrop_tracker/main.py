"""
Server entry point.

Starts the API, the WebSocket hub and (unless disabled) the scan
scheduler in a single event loop.
"""

from aiohttp import web
from loguru import logger

from airdrop_tracker.api.app import create_app
from airdrop_tracker.config.settings import settings
from airdrop_tracker.initialization.logging import setup_logging
from airdrop_tracker.initialization.services import (
    build_services,
    initialize_storage,
)
from jobs.scheduler import create_scheduler


async def build_application() -> web.Application:
    """Wire services, prepare storage and create the app."""
    container = build_services(settings)
    await initialize_storage(container)

    scheduler = None
    if settings.scheduler_enabled:
        scheduler = create_scheduler(
            container.scanner, settings.scan_interval_seconds
        )
    else:
        logger.info("[Scheduler] Disabled, scans run only on request")

    return create_app(container, scheduler=scheduler, close_services=True)


def main() -> None:
    setup_logging("server.log")
    logger.info("Starting 0G Airdrop Tracker...")
    logger.info(f"API on http://{settings.api_host}:{settings.api_port}/api")

    web.run_app(
        build_application(),
        host=settings.api_host,
        port=settings.api_port,
        print=None,
    )


if __name__ == "__main__":
    main()
