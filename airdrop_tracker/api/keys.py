"""Typed application state keys."""

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from aiohttp import web

from airdrop_tracker.initialization.services import ServiceContainer

CONTAINER_KEY = web.AppKey("container", ServiceContainer)
SCHEDULER_KEY = web.AppKey("scheduler", AsyncIOScheduler)
BACKGROUND_TASKS_KEY = web.AppKey("background_tasks", set)
