import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from ..api import ApiRegistry, invoke
from ..dependencies import get_api
from ..errors import status_code_for
from .pages import ALL_METHODS

logger = logging.getLogger('siteserver.service.routers.api')

router = APIRouter(prefix="/api", tags=["api"])


@router.api_route("/{method}", methods=ALL_METHODS)
@router.api_route("/{method}/{rest:path}", methods=ALL_METHODS)
async def call_method(method: str, request: Request, api: ApiRegistry = Depends(get_api)):
    """
    Dispatch to a registered API method with the query parameters.
    Anything after the method name in the path is ignored.

    Errors are reported as ``{"error": <message>}`` with the error's own status
    code when it carries one, 500 otherwise.
    """
    if method not in api:
        raise HTTPException(status_code=404)
    handler = api.get(method)

    params = dict(request.query_params)
    try:
        result = await invoke(handler, params)
    except Exception as exc:
        code = status_code_for(exc)
        logger.warning(f"API method {method} failed with {code}: {exc}")
        return JSONResponse(status_code=code, content={"error": str(exc)})

    return JSONResponse(content={"result": jsonable_encoder(result)})
