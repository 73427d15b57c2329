"""
API method registry consumed by the ``/api/{method}`` and ``/docs`` routes.

Handlers take the request's query parameters as a dict and either return a
JSON-serialisable result (directly or as an awaitable) or raise. An exception
carrying an integer ``code`` is reported to the client with that status.
"""
import errno
import inspect
import logging
import os
from pathlib import Path
from typing import Any, Awaitable, Callable, Mapping, Optional, Union

from fastapi.concurrency import run_in_threadpool

logger = logging.getLogger('siteserver.service.api')

ApiHandler = Callable[[dict[str, str]], Union[Any, Awaitable[Any]]]


class ApiError(Exception):
    """Error raised by an API handler, optionally tagged with an HTTP status code."""

    def __init__(self, message: str, code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.code = code


async def invoke(handler: Callable[[Any], Any], arg: Any) -> Any:
    """Call a sync or async handler; sync handlers run in the threadpool."""
    if inspect.iscoroutinefunction(handler):
        return await handler(arg)
    result = await run_in_threadpool(handler, arg)
    if inspect.isawaitable(result):
        result = await result
    return result


def is_not_found(exc: BaseException) -> bool:
    """True when ``exc`` is the "missing document" sentinel."""
    return isinstance(exc, FileNotFoundError) or getattr(exc, "errno", None) == errno.ENOENT


class HtmlDocs:
    """
    Serves pre-rendered HTML fragments from a docs directory.

    ``/`` maps to ``index.html`` and ``/guide/install`` to ``guide/install.html``.
    Anything that does not resolve to a file inside the directory raises
    ``FileNotFoundError``.
    """

    def __init__(self, docs_dir: Path):
        self.docs_dir = Path(docs_dir).resolve()

    def _resolve(self, url: str) -> Path:
        path = url.split("?", 1)[0].strip("/")
        name = path or "index"
        # NUL bytes make the filesystem calls raise ValueError
        if "\0" in name:
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), name)
        candidate = (self.docs_dir / f"{name}.html").resolve()
        if self.docs_dir not in candidate.parents:
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), name)
        return candidate

    def __call__(self, opts: Mapping[str, Any]) -> str:
        target = self._resolve(opts.get("url", "/"))
        logger.debug(f"Rendering doc {target}")
        return target.read_text(encoding="utf-8")


class ApiRegistry:
    def __init__(self, doc: Optional[Callable[[Mapping[str, Any]], Any]] = None):
        self._methods: dict[str, ApiHandler] = {}
        self._doc = doc

    def register(self, name: Optional[str] = None):
        """Decorator registering ``func`` under ``name`` (defaults to the function name)."""
        def decorator(func: ApiHandler) -> ApiHandler:
            self._methods[name or func.__name__] = func
            return func
        return decorator

    def get(self, name: str) -> Optional[ApiHandler]:
        return self._methods.get(name)

    def __contains__(self, name: str) -> bool:
        return name in self._methods

    @property
    def methods(self) -> list[str]:
        return sorted(self._methods)

    def doc(self, opts: Mapping[str, Any]) -> Any:
        if self._doc is None:
            raise FileNotFoundError(errno.ENOENT, "No doc renderer configured", opts.get("url"))
        return self._doc(opts)

    @property
    def has_doc_renderer(self) -> bool:
        return self._doc is not None


default_api = ApiRegistry()


@default_api.register()
def status(params: dict[str, str]) -> dict[str, str]:
    return {"status": "ok"}


__all__ = [
    'ApiError',
    'ApiRegistry',
    'HtmlDocs',
    'default_api',
    'invoke',
    'is_not_found',
]
