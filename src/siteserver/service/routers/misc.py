from fastapi import APIRouter, HTTPException

from .pages import ALL_METHODS

router = APIRouter()


@router.api_route("/{path:path}", methods=ALL_METHODS, include_in_schema=False)
async def not_found(path: str):
    """Catch-all; must be included after every other router."""
    raise HTTPException(status_code=404)
