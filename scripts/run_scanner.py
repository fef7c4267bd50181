#!/usr/bin/env python3
"""
Run one full airdrop scan and exit.

Usage:
    python scripts/run_scanner.py
    python scripts/run_scanner.py --from-block 7300000
"""

import argparse
import asyncio
import sys
from datetime import UTC, datetime
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from loguru import logger

from airdrop_tracker.config.settings import settings
from airdrop_tracker.initialization.logging import setup_logging
from airdrop_tracker.initialization.services import (
    build_services,
    initialize_storage,
)
from airdrop_tracker.services.notifications import NullNotificationSink


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run one airdrop scan")
    parser.add_argument(
        "--from-block",
        type=int,
        default=None,
        help="Lower bound for the start block of every entity",
    )
    return parser.parse_args()


async def run_scanner(from_block: int | None) -> int:
    """Scan once; returns the process exit code."""
    container = build_services(settings, sink=NullNotificationSink())
    try:
        await initialize_storage(container)
        result = await container.scanner.run_full_scan(from_block)
    finally:
        await container.db_engine.dispose()

    if result.success:
        logger.success(
            f"Scanner finished: {result.events_found} events, "
            f"last block {result.last_block_reached}"
        )
        return 0

    logger.error(f"Scanner failed: {result.error or result.message}")
    return 1


if __name__ == "__main__":
    args = parse_args()
    setup_logging(f"scanner-{datetime.now(UTC):%Y-%m-%d}.log")
    sys.exit(asyncio.run(run_scanner(args.from_block)))
