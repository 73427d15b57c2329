import logging
from starlette.middleware.base import BaseHTTPMiddleware
from fastapi import Request
from fastapi.responses import RedirectResponse

from ..config import Settings

logger = logging.getLogger('siteserver.service.middleware')

SECURITY_HEADERS = {
    # Disable browser mime-type sniffing
    "X-Content-Type-Options": "nosniff",
    # Prevent rendering of the site within a frame
    "X-Frame-Options": "DENY",
    # Re-enable browser XSS filtering if the user disabled it
    "X-XSS-Protection": "1; mode=block",
}

# 2 years, incl. subdomains, allow browser preload list
HSTS_HEADER = "max-age=63072000; includeSubDomains; preload"


def _first_forwarded(value: str) -> str:
    return value.split(",")[0].strip()


def _strip_port(host: str) -> str:
    if host.startswith("["):
        return host.split("]")[0] + "]"
    return host.split(":")[0]


def request_scheme(request: Request, trust_proxy: bool) -> str:
    forwarded = request.headers.get("x-forwarded-proto") if trust_proxy else None
    if forwarded:
        return _first_forwarded(forwarded).lower()
    return request.url.scheme


def request_hostname(request: Request, trust_proxy: bool) -> str:
    forwarded = request.headers.get("x-forwarded-host") if trust_proxy else None
    host = _first_forwarded(forwarded) if forwarded else request.headers.get("host", "")
    return _strip_port(host).lower()


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """
    Adds security headers to every response and, in production, enforces the
    canonical HTTPS origin.

    Production GET requests arriving over plain HTTP or on a non-canonical host
    are answered with a 301 to ``settings.http_origin`` plus the original path;
    the rest of the pipeline never runs for them.
    """

    def __init__(self, app, settings: Settings):
        super().__init__(app)
        self.settings = settings

    def _needs_redirect(self, request: Request) -> bool:
        if not self.settings.is_prod or request.method != "GET":
            return False
        scheme = request_scheme(request, self.settings.trust_proxy)
        hostname = request_hostname(request, self.settings.trust_proxy)
        return scheme != "https" or hostname != self.settings.host.lower()

    async def dispatch(self, request: Request, call_next):
        if self._needs_redirect(request):
            target = self.settings.http_origin + request.url.path
            if request.url.query:
                target += "?" + request.url.query
            logger.debug(f"Redirecting {request.url} to {target}")
            response = RedirectResponse(target, status_code=301)
        else:
            response = await call_next(request)

        for name, value in SECURITY_HEADERS.items():
            response.headers[name] = value

        if self.settings.is_prod:
            response.headers["Strict-Transport-Security"] = HSTS_HEADER

        return response
