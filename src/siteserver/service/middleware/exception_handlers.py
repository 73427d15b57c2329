import logging
from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..errors import status_message

logger = logging.getLogger('siteserver.service.middleware')


async def custom_http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Render HTTPExceptions (404s from unmatched routes included) as ``{"message": ...}``."""
    if exc.status_code >= 500:
        logger.error(f"HTTP exception {exc.status_code} for {request.url}: {exc.detail}")
    else:
        logger.debug(f"HTTP exception {exc.status_code} for {request.url}")

    return JSONResponse(
        status_code=exc.status_code,
        content={"message": status_message(exc.status_code)},
        headers=getattr(exc, "headers", None),
    )
