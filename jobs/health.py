"""
Health check handlers.

Registered on the API application; the scheduler (if any) and the
scan engine are read from the application state.
"""

from aiohttp import web
from loguru import logger

from airdrop_tracker.api.keys import CONTAINER_KEY, SCHEDULER_KEY


async def health_handler(request: web.Request) -> web.Response:
    """
    Health check endpoint.

    Returns:
        JSON response with scheduler and scanner status
    """
    scheduler = request.app.get(SCHEDULER_KEY)
    container = request.app[CONTAINER_KEY]

    try:
        scanner_info = {"is_scanning": container.scanner.is_scanning}

        if scheduler is None:
            return web.json_response(
                {
                    "status": "healthy",
                    "scheduler_running": False,
                    "scanner": scanner_info,
                }
            )

        is_running = scheduler.running
        jobs = scheduler.get_jobs()
        job_info = [
            {
                "id": job.id,
                "name": job.name,
                "next_run_time": job.next_run_time.isoformat() if job.next_run_time else None,
            }
            for job in jobs
        ]

        return web.json_response(
            {
                "status": "healthy" if is_running else "stopped",
                "scheduler_running": is_running,
                "jobs_count": len(jobs),
                "jobs": job_info,
                "scanner": scanner_info,
            }
        )
    except Exception as e:
        logger.error(f"[Health] Health check failed: {e}")
        return web.json_response(
            {
                "status": "unhealthy",
                "error": str(e),
            },
            status=503,
        )


async def readiness_handler(request: web.Request) -> web.Response:
    """
    Readiness check endpoint.

    Ready once the scheduler runs, or immediately when scheduling is
    disabled.
    """
    scheduler = request.app.get(SCHEDULER_KEY)
    if scheduler is not None and not scheduler.running:
        return web.json_response(
            {
                "status": "not_ready",
                "ready": False,
            },
            status=503,
        )

    return web.json_response(
        {
            "status": "ready",
            "ready": True,
        }
    )


async def liveness_handler(request: web.Request) -> web.Response:
    """Liveness check endpoint."""
    return web.json_response(
        {
            "status": "alive",
            "alive": True,
        }
    )


def register_health_routes(app: web.Application) -> None:
    app.router.add_get("/health", health_handler)
    app.router.add_get("/readiness", readiness_handler)
    app.router.add_get("/liveness", liveness_handler)
