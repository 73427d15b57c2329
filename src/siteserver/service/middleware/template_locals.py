from starlette.middleware.base import BaseHTTPMiddleware
from fastapi import Request

from ..assets import AssetHashes
from ..config import Settings


class TemplateLocalsMiddleware(BaseHTTPMiddleware):
    """Expose the settings and asset hash suffixes to every rendered template."""

    def __init__(self, app, settings: Settings, hashes: AssetHashes):
        super().__init__(app)
        self.locals = {
            "config": settings,
            "hashes": hashes.as_dict(),
        }

    async def dispatch(self, request: Request, call_next):
        request.state.locals = dict(self.locals)
        return await call_next(request)
