"""Dependency wiring helpers."""

from fastapi import FastAPI

from .auth.auth_api import router as auth_router
from .auth.auth_service import AuthService
from .config import AppConfig
from .delivery.deletion_service import AssetDeletionService
from .delivery.delivery_api import router as upload_router
from .delivery.delivery_service import AssetUploadService
from .delivery.naming import AssetNamer
from .delivery.validation import AssetValidator
from .health.health_api import router as health_router
from .media.image_proxy import ImageProxyService
from .media.image_proxy_api import build_image_proxy_router
from .transports.transports_base import OrderedFallback
from .transports.transports_ftp import FtpTransport
from .transports.transports_http import HttpTransport


def build_transports(config: AppConfig) -> tuple[HttpTransport, FtpTransport]:
    hosting = config.hosting
    http_transport = HttpTransport(
        endpoint=hosting.upload_handler_url,
        auth_token=hosting.upload_auth_token,
        public_base_url=hosting.public_asset_base_url,
        timeout_seconds=hosting.upload_http_timeout_seconds,
    )
    ftp_transport = FtpTransport(
        host=hosting.ftp_host,
        port=hosting.ftp_port,
        user=hosting.ftp_user,
        password=hosting.ftp_password,
        root_dir=hosting.ftp_root_dir,
        public_base_url=hosting.public_asset_base_url,
        connect_timeout_seconds=hosting.ftp_connect_timeout_seconds,
        idle_timeout_seconds=hosting.ftp_idle_timeout_seconds,
        delete_timeout_seconds=hosting.ftp_delete_timeout_seconds,
        use_tls=hosting.ftp_use_tls,
    )
    return http_transport, ftp_transport


def include_routers(app: FastAPI, config: AppConfig) -> None:
    """Mount module routers and attach services."""
    http_transport, ftp_transport = build_transports(config)
    validator = AssetValidator(config.upload_limits)

    upload_service = AssetUploadService(
        delivery=OrderedFallback(transports=(http_transport, ftp_transport)),
        validator=validator,
        namer=AssetNamer(),
    )
    deletion_service = AssetDeletionService(remover=ftp_transport)
    auth_service = AuthService.from_file(
        path=config.auth.staff_credentials_path,
        signing_key=config.auth.jwt_signing_key,
        token_ttl_hours=config.auth.staff_jwt_ttl_hours,
    )
    image_proxy = ImageProxyService(
        public_base_url=config.hosting.public_asset_base_url
    )

    app.state.config = config
    app.state.asset_validator = validator
    app.state.upload_service = upload_service
    app.state.deletion_service = deletion_service
    app.state.auth_service = auth_service
    app.state.image_proxy = image_proxy

    app.include_router(health_router)
    app.include_router(auth_router)
    app.include_router(upload_router)
    app.include_router(build_image_proxy_router(image_proxy))
