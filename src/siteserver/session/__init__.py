"""HTTP session management: signed cookie frontend and session stores."""

from .config import (
    build_session_cookie,
    build_session_backend,
    purge_expired_sessions,
    COOKIE_NAME,
    SESSION_MAX_AGE,
)
from .models import SessionData

__all__ = [
    "build_session_cookie",
    "build_session_backend",
    "purge_expired_sessions",
    "COOKIE_NAME",
    "SESSION_MAX_AGE",
    "SessionData",
]
