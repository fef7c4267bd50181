"""
Airdrop Scan Background Task.

Runs a full scan of both watched entities on every scheduler tick.
After the first catch-up run each tick only covers the new blocks.
"""

import asyncio

from loguru import logger

from airdrop_tracker.services.scan_engine import ScanEngine


async def run_scheduled_scan(scanner: ScanEngine) -> dict:
    """
    Main scan task.

    A tick that finds a scan already running is logged and dropped,
    never retried.

    Returns:
        Dict with scan results
    """
    results = {
        "success": False,
        "events": 0,
        "last_block": None,
        "errors": [],
    }

    if scanner.is_scanning:
        logger.info("[Scan Task] Scan already running, skipping tick")
        results["errors"].append("Scan already in progress")
        return results

    try:
        scan_result = await scanner.run_full_scan()

        results["success"] = scan_result.success
        results["events"] = scan_result.events_found
        results["last_block"] = scan_result.last_block_reached
        if scan_result.error or scan_result.message:
            results["errors"].append(scan_result.error or scan_result.message)

        if scan_result.events_found > 0:
            logger.info(
                f"[Scan Task] Recorded {scan_result.events_found} new events "
                f"(last block {scan_result.last_block_reached})"
            )

    except asyncio.CancelledError:
        logger.info("[Scan Task] Task cancelled")
        raise
    except Exception as e:
        logger.exception(f"[Scan Task] Task failed: {e}")
        results["errors"].append(str(e))

    return results
