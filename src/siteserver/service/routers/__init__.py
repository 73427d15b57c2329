from .api import router as api_router
from .misc import router as misc_router
from .pages import router as pages_router

__all__ = ["api_router", "misc_router", "pages_router"]
