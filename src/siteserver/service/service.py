import logging
from typing import Any, Callable, Optional

from fastapi import FastAPI
from fastapi.templating import Jinja2Templates

from ..session import build_session_backend, build_session_cookie
from .api import ApiRegistry, HtmlDocs
from .assets import compute_asset_hashes
from .config import Settings, resolve_target
from .lifecycle import lifespan
from .middleware import setup_middleware
from .observability import ObservabilityHook, build_hook
from .routers import api_router, misc_router, pages_router

logger = logging.getLogger('siteserver.service')


def create_app(
    settings: Settings,
    api: Optional[ApiRegistry] = None,
    share: Optional[Callable[[], Any]] = None,
    observability: Optional[ObservabilityHook] = None,
) -> FastAPI:
    """
    Build the site application.

    Collaborators not passed in are resolved from the settings' import
    strings. Asset hashes are computed here, so a missing bundle or
    stylesheet in production fails app creation.
    """
    if api is None:
        api = resolve_target(settings.api_target)
    if share is None:
        share = resolve_target(settings.share_target)
    if observability is None:
        observability = build_hook(resolve_target(settings.observability_target))

    hashes = compute_asset_hashes(settings)

    # /docs belongs to the documentation renderer, not the OpenAPI UI
    app = FastAPI(
        title="Site Server",
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )

    app.state.settings = settings
    app.state.api = api
    app.state.share = share
    app.state.templates = Jinja2Templates(directory=str(settings.views_dir))
    app.state.doc_renderer = api.doc if api.has_doc_renderer else HtmlDocs(settings.docs_dir)

    session_cookie = build_session_cookie(settings)
    session_backend = build_session_backend(settings)
    app.state.session_backend = session_backend

    setup_middleware(
        app,
        settings=settings,
        hashes=hashes,
        session_cookie=session_cookie,
        session_backend=session_backend,
        hook=observability,
    )

    # Order matters: the catch-all 404 must come last
    app.include_router(pages_router)
    app.include_router(api_router)
    app.include_router(misc_router)

    logger.info(f"Site service created (production={settings.is_prod}, api methods={api.methods})")
    return app


def create_app_from_env() -> FastAPI:
    """Factory for ``uvicorn --factory``."""
    return create_app(Settings.from_env())
