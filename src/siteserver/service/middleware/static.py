import logging
from pathlib import Path
from typing import Sequence

from starlette.exceptions import HTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.staticfiles import StaticFiles
from fastapi import Request

logger = logging.getLogger('siteserver.service.middleware')


class StaticFilesMiddleware(BaseHTTPMiddleware):
    """
    Serve files from a list of static roots, checked in order.

    A hit short-circuits the rest of the pipeline (sessions, routes); a miss
    passes the request on untouched.
    """

    def __init__(self, app, directories: Sequence[Path], max_age: int = 0):
        super().__init__(app)
        self.max_age = max_age
        self.roots = []
        for directory in directories:
            if Path(directory).is_dir():
                self.roots.append(StaticFiles(directory=str(directory), check_dir=False))
            else:
                logger.warning(f"Static directory {directory} does not exist, skipping")

    async def _lookup(self, request: Request):
        for root in self.roots:
            path = root.get_path(request.scope)
            try:
                return await root.get_response(path, request.scope)
            except HTTPException as exc:
                if exc.status_code != 404:
                    raise
            except ValueError:
                # Paths with NUL bytes can never name a static file
                return None
        return None

    async def dispatch(self, request: Request, call_next):
        if request.method not in ("GET", "HEAD") or not self.roots:
            return await call_next(request)

        response = await self._lookup(request)
        if response is None:
            return await call_next(request)

        response.headers["Cache-Control"] = f"public, max-age={self.max_age}"
        return response
