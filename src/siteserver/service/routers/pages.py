import logging
from typing import Any, Callable, Mapping

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.templating import Jinja2Templates

from ..api import invoke, is_not_found
from ..dependencies import get_doc_renderer, get_templates, render_index

logger = logging.getLogger('siteserver.service.routers.pages')

router = APIRouter()

ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


@router.get("/", include_in_schema=False)
async def index(request: Request, templates: Jinja2Templates = Depends(get_templates)):
    return render_index(request, templates)


@router.api_route("/docs", methods=ALL_METHODS, include_in_schema=False)
@router.api_route("/docs/{doc_path:path}", methods=ALL_METHODS, include_in_schema=False)
async def docs(
    request: Request,
    templates: Jinja2Templates = Depends(get_templates),
    doc_renderer: Callable[[Mapping[str, Any]], Any] = Depends(get_doc_renderer),
):
    """
    Render a documentation page inside the index template.

    The renderer sees the path below ``/docs`` (``/`` for the docs root) plus
    any query string. A missing page is a 404; any other failure goes to the
    error handler.
    """
    url = "/" + request.path_params.get("doc_path", "")
    if request.url.query:
        url += "?" + request.url.query

    try:
        doc = await invoke(doc_renderer, {"url": url})
    except Exception as exc:
        if is_not_found(exc):
            logger.debug(f"Doc not found for {url}")
            raise HTTPException(status_code=404)
        raise

    return render_index(request, templates, content=doc)


@router.get("/500", include_in_schema=False)
async def internal_error():
    raise RuntimeError("Manually visited /500")
