import logging as log
from fastapi import FastAPI
from fastapi.middleware.gzip import GZipMiddleware
from fastapi_sessions.frontends.implementations import SessionCookie
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..assets import AssetHashes
from ..config import Settings
from ..observability import ObservabilityHook
from ...session.config import SessionStore
from .logging import RequestResponseLoggingMiddleware
from .security import SecurityHeadersMiddleware
from .error_handling import ErrorHandlingMiddleware
from .static import StaticFilesMiddleware
from .session import SessionMiddleware
from .template_locals import TemplateLocalsMiddleware
from .exception_handlers import custom_http_exception_handler

logger = log.getLogger('siteserver.service.middleware')


def setup_middleware(
    app: FastAPI,
    settings: Settings,
    hashes: AssetHashes,
    session_cookie: SessionCookie,
    session_backend: SessionStore,
    hook: ObservabilityHook,
):
    """
    Setup all middleware for the FastAPI application.

    Middleware are added in reverse order (last added = first executed).
    Current order of execution:
    1. GZipMiddleware (response compression)
    2. RequestResponseLoggingMiddleware (logs requests/responses)
    3. SecurityHeadersMiddleware (security headers, HTTPS redirect, HSTS)
    4. ErrorHandlingMiddleware (terminal error handler)
    5. StaticFilesMiddleware (serves static roots, bypasses everything below)
    6. SessionMiddleware (loads and persists the signed-cookie session)
    7. TemplateLocalsMiddleware (config and asset hashes for templates)

    Args:
        app: FastAPI application instance
        settings: Application settings
        hashes: Precomputed asset hash suffixes
        session_cookie: Signed session cookie frontend
        session_backend: Session store
        hook: Observability hook notified by the error handler
    """
    # Add custom exception handler for HTTPExceptions
    app.add_exception_handler(StarletteHTTPException, custom_http_exception_handler)

    app.add_middleware(TemplateLocalsMiddleware, settings=settings, hashes=hashes)

    app.add_middleware(SessionMiddleware, session_cookie=session_cookie, backend=session_backend)

    static_dirs = [settings.static_dir, settings.css_framework_dir]
    app.add_middleware(StaticFilesMiddleware, directories=static_dirs, max_age=settings.max_age)
    logger.info(f"Static files served from {[str(d) for d in static_dirs]} with max-age={settings.max_age}")

    app.add_middleware(ErrorHandlingMiddleware, hook=hook)

    app.add_middleware(SecurityHeadersMiddleware, settings=settings)

    app.add_middleware(RequestResponseLoggingMiddleware)

    app.add_middleware(GZipMiddleware, minimum_size=1000)


__all__ = [
    'setup_middleware',
    'RequestResponseLoggingMiddleware',
    'SecurityHeadersMiddleware',
    'ErrorHandlingMiddleware',
    'StaticFilesMiddleware',
    'SessionMiddleware',
    'TemplateLocalsMiddleware',
    'custom_http_exception_handler',
]
