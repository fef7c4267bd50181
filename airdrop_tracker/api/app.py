"""
API application factory.
"""

import asyncio

from aiohttp import web
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from loguru import logger

from airdrop_tracker.initialization.services import ServiceContainer
from airdrop_tracker.initialization.shutdown import shutdown_handler
from jobs.health import register_health_routes

from .keys import BACKGROUND_TASKS_KEY, CONTAINER_KEY, SCHEDULER_KEY
from .routes import error_middleware, routes


@web.middleware
async def cors_middleware(request: web.Request, handler):
    """Allow the dashboard to call the API from any origin."""
    if request.method == "OPTIONS":
        response = web.Response()
    else:
        response = await handler(request)
    response.headers["Access-Control-Allow-Origin"] = "*"
    response.headers["Access-Control-Allow-Methods"] = "GET, POST, OPTIONS"
    response.headers["Access-Control-Allow-Headers"] = "Content-Type"
    return response


def create_app(
    container: ServiceContainer,
    scheduler: AsyncIOScheduler | None = None,
    close_services: bool = False,
) -> web.Application:
    """
    Build the aiohttp application.

    Args:
        container: Wired services
        scheduler: Scan scheduler, started and stopped with the app
        close_services: Dispose database and hub on cleanup
    """
    app = web.Application(middlewares=[cors_middleware, error_middleware])
    app[CONTAINER_KEY] = container
    app[BACKGROUND_TASKS_KEY] = set()
    if scheduler is not None:
        app[SCHEDULER_KEY] = scheduler

    app.add_routes(routes)
    app.router.add_get("/ws", container.hub.handle)
    register_health_routes(app)

    async def on_startup(app: web.Application) -> None:
        if scheduler is not None and not scheduler.running:
            scheduler.start()
            logger.info("[Scheduler] Started")

    async def on_cleanup(app: web.Application) -> None:
        tasks = list(app[BACKGROUND_TASKS_KEY])
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        if close_services:
            await shutdown_handler(container, scheduler)
        elif scheduler is not None and scheduler.running:
            scheduler.shutdown(wait=False)

    app.on_startup.append(on_startup)
    app.on_cleanup.append(on_cleanup)
    return app
