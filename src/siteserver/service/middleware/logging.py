import logging
from starlette.middleware.base import BaseHTTPMiddleware
from fastapi import Request

logger = logging.getLogger('siteserver.service.middleware')


class RequestResponseLoggingMiddleware(BaseHTTPMiddleware):
    """Log every request and its response status"""

    async def dispatch(self, request: Request, call_next):
        logger.debug(f"REQUEST: {request.method} {request.url}")

        try:
            response = await call_next(request)
        except Exception as exc:
            logger.error(f"UNEXPECTED_EXCEPTION: {type(exc)}: {str(exc)}")
            raise

        logger.debug(f"RESPONSE: Status {response.status_code}")

        if response.status_code >= 400:
            logger.error(f"ERROR_RESPONSE: Status {response.status_code} for {request.method} {request.url}")

        return response
