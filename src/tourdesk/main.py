"""FastAPI application entry point."""

import logging

from fastapi import FastAPI

from . import __version__
from .config import AppConfig, load_config
from .dependencies import include_routers
from .logging import configure_logging

logger = logging.getLogger(__name__)


def create_app(config: AppConfig | None = None) -> FastAPI:
    """Build the back-office media API with hosting transports wired in."""
    cfg = config or load_config()
    configure_logging(cfg.log_level)
    app = FastAPI(title="Tourdesk media delivery", version=__version__)
    include_routers(app, cfg)
    logger.info(
        "app.configured",
        extra={
            "upload_handler_url": cfg.hosting.upload_handler_url,
            "ftp_host": cfg.hosting.ftp_host,
            "public_asset_base_url": cfg.hosting.public_asset_base_url,
        },
    )
    return app


app = create_app()
