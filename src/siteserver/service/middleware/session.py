import copy
import logging
import uuid
from starlette.middleware.base import BaseHTTPMiddleware
from fastapi import HTTPException, Request
from fastapi_sessions.backends.session_backend import BackendError
from fastapi_sessions.frontends.implementations import SessionCookie

from ...session.config import SESSION_MAX_AGE, SessionStore
from ...session.models import SessionData

logger = logging.getLogger('siteserver.service.middleware')


class SessionMiddleware(BaseHTTPMiddleware):
    """
    Attach the store-backed session to ``request.session``.

    Only sessions a handler actually modified are written back: an untouched
    session is never persisted and never gets a cookie, and a session emptied
    by the handler is destroyed along with its cookie.
    """

    def __init__(self, app, session_cookie: SessionCookie, backend: SessionStore):
        super().__init__(app)
        self.session_cookie = session_cookie
        self.backend = backend

    async def _load(self, request: Request) -> tuple[uuid.UUID | None, dict]:
        # Missing, forged and expired cookies all come back as a non-UUID error value
        try:
            session_id = self.session_cookie(request)
        except HTTPException:
            return None, {}
        if not isinstance(session_id, uuid.UUID):
            return None, {}

        try:
            session_data = await self.backend.read(session_id)
        except BackendError as e:
            logger.warning(f"Could not load session {session_id}: {e}")
            return None, {}

        if session_data is None:
            logger.debug(f"Session {session_id} not found in store")
            return None, {}
        if session_data.is_expired(SESSION_MAX_AGE):
            logger.debug(f"Session {session_id} expired")
            try:
                await self.backend.delete(session_id)
            except (BackendError, KeyError) as e:
                logger.warning(f"Could not delete expired session {session_id}: {e}")
            return None, {}
        return session_id, dict(session_data.data)

    async def dispatch(self, request: Request, call_next):
        session_id, data = await self._load(request)
        original = copy.deepcopy(data)
        request.scope["session"] = data

        response = await call_next(request)

        current = request.scope.get("session") or {}
        if current == original:
            return response

        try:
            if not current:
                if session_id is not None:
                    await self.backend.delete(session_id)
                    logger.debug(f"Session {session_id} destroyed")
                self.session_cookie.delete_from_response(response)
            elif session_id is None:
                session_id = uuid.uuid4()
                await self.backend.create(session_id, SessionData(data=current))
                self.session_cookie.attach_to_response(response, session_id)
                logger.debug(f"Session {session_id} created")
            else:
                await self.backend.update(session_id, SessionData(data=current))
                self.session_cookie.attach_to_response(response, session_id)
        except (BackendError, KeyError) as e:
            logger.error(f"Failed to update session data: {e}")

        return response
