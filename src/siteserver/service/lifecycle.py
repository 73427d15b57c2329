import logging
import asyncio
from typing import AsyncGenerator, Optional
from fastapi import FastAPI
from contextlib import asynccontextmanager
from fastapi_sessions.backends.implementations import InMemoryBackend

from ..jobs import JobScheduler, init_share_job
from ..session import purge_expired_sessions
from ..session.backends import RedisBackend
from ..session.config import SessionStore

logger = logging.getLogger("siteserver.service.lifecycle")

SESSION_CLEANUP_INTERVAL = 3600


async def periodic_session_cleanup(backend: SessionStore, interval_seconds: int = SESSION_CLEANUP_INTERVAL):
    """Periodically drop expired sessions from the in-memory store"""
    while True:
        try:
            removed = await purge_expired_sessions(backend)
            if removed > 0:
                logger.info(f"Session cleanup completed: removed {removed} expired sessions")
        except Exception as e:
            logger.error(f"Error during session cleanup: {e}", exc_info=True)

        await asyncio.sleep(interval_seconds)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    backend = app.state.session_backend

    scheduler = JobScheduler()
    init_share_job(app.state.settings, app.state.share, scheduler)
    app.state.scheduler = scheduler
    scheduler.start()

    # Redis expires sessions through the key TTL
    cleanup_task: Optional[asyncio.Task] = None
    if isinstance(backend, InMemoryBackend):
        cleanup_task = asyncio.create_task(periodic_session_cleanup(backend))
    app.state.session_cleanup_task = cleanup_task

    yield

    # Cancel scheduled jobs during shutdown
    await scheduler.shutdown()

    if cleanup_task is not None:
        cleanup_task.cancel()
        try:
            await cleanup_task
        except asyncio.CancelledError:
            logger.info("Session cleanup task cancelled during shutdown")

    if isinstance(backend, RedisBackend):
        await backend.redis_client.aclose()
        logger.info("Redis session store connection closed")
