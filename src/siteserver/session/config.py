import logging
import time
from typing import TYPE_CHECKING, Optional, Union
from uuid import UUID

import redis.asyncio as aioredis
from fastapi_sessions.backends.implementations import InMemoryBackend
from fastapi_sessions.frontends.implementations import SessionCookie, CookieParameters
from fastapi_sessions.frontends.implementations.cookie import SameSiteEnum

from .backends.redis_backend import RedisBackend
from .models import SessionData

if TYPE_CHECKING:
    from ..service.config import Settings

logger = logging.getLogger('siteserver.session.config')

COOKIE_NAME = "session"

# 90 days, for both the cookie and the store TTL
SESSION_MAX_AGE = 90 * 24 * 60 * 60

SessionStore = Union[InMemoryBackend[UUID, SessionData], RedisBackend[UUID, SessionData]]


def build_session_cookie(settings: "Settings") -> SessionCookie:
    """
    Signed session cookie: 90 day lifetime, ``Secure`` only in production.
    """
    cookie_params = CookieParameters(
        max_age=SESSION_MAX_AGE,
        secure=settings.is_prod,
        httponly=True,
        samesite=SameSiteEnum.lax,
        path="/",
    )

    # Uses UUID
    return SessionCookie(
        cookie_name=COOKIE_NAME,
        identifier="session_verifier",
        auto_error=False,
        secret_key=settings.session_secret.get_secret_value(),
        cookie_params=cookie_params,
    )


def build_session_backend(settings: "Settings") -> SessionStore:
    if settings.session_store == "redis":
        logger.info(f"Using Redis session store at {settings.redis_url}")
        redis_client = aioredis.from_url(settings.redis_url, decode_responses=True)
        return RedisBackend[UUID, SessionData](
            redis_client=redis_client,
            session_model=SessionData,
            ttl=SESSION_MAX_AGE,
        )

    logger.info("Using in-memory session store")
    return InMemoryBackend[UUID, SessionData]()


async def purge_expired_sessions(
    backend: SessionStore,
    max_age: int = SESSION_MAX_AGE,
    now: Optional[float] = None,
) -> int:
    """
    Delete in-memory sessions not written for longer than ``max_age`` seconds.

    Redis expires its keys through the TTL, so only ``InMemoryBackend`` needs
    sweeping. Returns the number of sessions removed.
    """
    if not isinstance(backend, InMemoryBackend):
        return 0
    if now is None:
        now = time.time()

    expired = [
        session_id
        for session_id, session_data in list(backend.data.items())
        if session_data.is_expired(max_age, now)
    ]
    for session_id in expired:
        await backend.delete(session_id)
    return len(expired)
