import os
import logging

import uvicorn
from dotenv import load_dotenv

from siteserver.service import Settings, create_app

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def configure_logging(settings: Settings) -> str:
    """Set up root logging from ``settings.log_level``; unknown levels fall back to INFO."""
    level_name = settings.log_level
    if not isinstance(logging.getLevelName(level_name), int):
        level_name = "INFO"
    logging.basicConfig(level=level_name, format=LOG_FORMAT)
    if level_name != settings.log_level:
        logging.warning(f"Invalid LOG_LEVEL '{settings.log_level}', using INFO")
    return level_name


def main() -> None:
    load_dotenv()
    settings = Settings.from_env()
    level_name = configure_logging(settings)
    logging.info(f"Site service starting (production={settings.is_prod}, log level={level_name})")

    if os.getenv("MODE") == "dev":
        logging.info("Running in development mode with auto-reload")
        logging.info(f"Tip: check the API shim via `curl http://127.0.0.1:{settings.port}/api/status`")
        # The reloader re-imports the app, so it rebuilds settings from the environment
        uvicorn.run(
            "siteserver.service:create_app_from_env",
            factory=True,
            reload=True,
            log_level=level_name.lower(),
            port=settings.port,
        )
        return

    app = create_app(settings)
    # Trust the reverse proxy's X-Forwarded-* headers
    uvicorn.run(app, host="0.0.0.0", port=settings.port, proxy_headers=True, forwarded_allow_ips="*")


if __name__ == "__main__":
    main()
