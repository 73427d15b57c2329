"""
Configuration setup for the site service.

This module handles all configuration initialization including:
- Environment detection (production vs development)
- Canonical host/origin used for HTTPS redirects
- Filesystem locations for static assets, docs and templates
- Session secret and session store selection
- Import strings for the external collaborators (API module, share client, observability)
"""
import os
import logging
from pathlib import Path
from typing import Any, Literal, Optional

from pydantic import BaseModel, SecretStr
from uvicorn.importer import import_from_string

logger = logging.getLogger('siteserver.service.config')

PACKAGE_TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"

DEFAULT_API_TARGET = "siteserver.service.api:default_api"


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes")


class Settings(BaseModel):
    is_prod: bool = False
    host: str = "localhost"
    port: int = 5000
    http_origin: str = "http://localhost:5000"
    root: Path = Path(".")
    static_dir: Path = Path("static")
    css_framework_dir: Path = Path("node_modules/tachyons/css")
    docs_dir: Path = Path("docs")
    views_dir: Path = PACKAGE_TEMPLATES_DIR
    max_age: int = 0
    trust_proxy: bool = True

    session_secret: SecretStr
    session_store: Literal["memory", "redis"] = "memory"
    redis_url: str = "redis://localhost:6379"

    api_target: str = DEFAULT_API_TARGET
    share_target: Optional[str] = None
    observability_target: Optional[str] = None

    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        """
        Build settings from environment variables.

        Raises:
            ValueError: if SESSION_SECRET_KEY is missing, or if SHARE_TARGET is
                missing while running in production.
        """
        is_prod = os.getenv("ENVIRONMENT", "development").lower() == "production"
        host = os.getenv("CANONICAL_HOST", "localhost")
        port = int(os.getenv("PORT", 5000))

        http_origin = os.getenv("HTTP_ORIGIN")
        if not http_origin:
            http_origin = f"https://{host}" if is_prod else f"http://{host}:{port}"

        root = Path(os.getenv("PROJECT_ROOT", os.getcwd())).resolve()

        if not (secret_key := os.getenv("SESSION_SECRET_KEY")):
            raise ValueError("SESSION_SECRET_KEY environment variable must be set")

        share_target = os.getenv("SHARE_TARGET") or None
        if is_prod and not share_target:
            raise ValueError("SHARE_TARGET environment variable must be set in production")

        default_max_age = 7200 if is_prod else 0

        settings = cls(
            is_prod=is_prod,
            host=host,
            port=port,
            http_origin=http_origin.rstrip("/"),
            root=root,
            static_dir=Path(os.getenv("STATIC_DIR", root / "static")),
            css_framework_dir=Path(os.getenv("CSS_FRAMEWORK_DIR", root / "node_modules" / "tachyons" / "css")),
            docs_dir=Path(os.getenv("DOCS_DIR", root / "docs")),
            views_dir=Path(os.getenv("VIEWS_DIR", PACKAGE_TEMPLATES_DIR)),
            max_age=int(os.getenv("STATIC_MAX_AGE", default_max_age)),
            trust_proxy=_env_flag("TRUST_PROXY", "true"),
            session_secret=SecretStr(secret_key),
            session_store=os.getenv("SESSION_STORE", "memory").lower(),
            redis_url=os.getenv("REDIS_URL", "redis://localhost:6379"),
            api_target=os.getenv("API_TARGET", DEFAULT_API_TARGET),
            share_target=share_target,
            observability_target=os.getenv("OBSERVABILITY_TARGET") or None,
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )

        logger.info(f"Settings loaded: production={settings.is_prod}, origin={settings.http_origin}")
        return settings


def resolve_target(target: Optional[str]) -> Any:
    """
    Import a ``"module:attribute"`` target, or return None when unset.
    """
    if not target:
        return None
    resolved = import_from_string(target)
    logger.debug(f"Resolved {target} -> {resolved!r}")
    return resolved


__all__ = [
    'Settings',
    'resolve_target',
    'DEFAULT_API_TARGET',
]
