#!/usr/bin/env python3
"""Initialize database tables and seed the scan checkpoints."""

import asyncio
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from loguru import logger

from airdrop_tracker.config.settings import settings
from airdrop_tracker.initialization.services import (
    build_services,
    initialize_storage,
)
from airdrop_tracker.services.notifications import NullNotificationSink

# Configure logger for script
logger.remove()
logger.add(sys.stderr, level="INFO")


async def init_database() -> None:
    """Create all database tables."""
    logger.info("Connecting to database...")
    container = build_services(settings, sink=NullNotificationSink())

    try:
        await initialize_storage(container)
    finally:
        await container.db_engine.dispose()

    logger.success("Database tables created successfully!")


if __name__ == "__main__":
    asyncio.run(init_database())
