from .config import Settings
from .service import create_app, create_app_from_env

__all__ = ["Settings", "create_app", "create_app_from_env"]
