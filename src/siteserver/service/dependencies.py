"""
FastAPI dependencies for the site service.

Everything here reads from ``app.state``, which ``create_app`` populates once
at startup, so handlers never touch module-level globals.
"""
from typing import Any, Callable, Mapping

from fastapi import Request
from fastapi.templating import Jinja2Templates

from .api import ApiRegistry


def get_templates(request: Request) -> Jinja2Templates:
    return request.app.state.templates


def get_api(request: Request) -> ApiRegistry:
    return request.app.state.api


def get_doc_renderer(request: Request) -> Callable[[Mapping[str, Any]], Any]:
    return request.app.state.doc_renderer


def render_index(request: Request, templates: Jinja2Templates, **context: Any):
    """Render ``index.html`` with the template locals plus ``context``."""
    template_context = dict(getattr(request.state, "locals", {}))
    template_context.setdefault("content", None)
    template_context.update(context)
    return templates.TemplateResponse(request, "index.html", template_context)
