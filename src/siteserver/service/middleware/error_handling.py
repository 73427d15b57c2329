import logging
from starlette.middleware.base import BaseHTTPMiddleware
from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..errors import status_code_for, status_message
from ..observability import NoopHook, ObservabilityHook

logger = logging.getLogger('siteserver.service.middleware')


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """
    Terminal error handler: turns any exception escaping the routes into a
    ``{"message": "<code>: <reason>"}`` response.

    The raw exception message is never sent to the client.
    """

    def __init__(self, app, hook: ObservabilityHook | None = None):
        super().__init__(app)
        self.hook = hook or NoopHook()

    async def dispatch(self, request: Request, call_next):
        try:
            response = await call_next(request)
            return response
        except StarletteHTTPException as exc:
            # Raised below the router, e.g. by static file lookups
            return JSONResponse(
                status_code=exc.status_code,
                content={"message": status_message(exc.status_code)},
            )
        except Exception as exc:
            logger.error(f"Unexpected error for {request.url}: {str(exc)}", exc_info=True)
            try:
                self.hook.capture_exception(exc, request)
            except Exception as hook_exc:
                logger.warning(f"Observability hook failed: {hook_exc}")

            code = status_code_for(exc)
            return JSONResponse(
                status_code=code,
                content={"message": status_message(code)},
            )
