"""Application configuration builder.

Hosting credentials are required settings: they must come from the
deployment environment (or a local ``.env`` file) and have no code defaults.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Literal, Sequence

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

ALLOWED_CONTENT_TYPES: tuple[str, ...] = (
    "image/jpeg",
    "image/jpg",
    "image/png",
    "image/gif",
    "image/webp",
)


class HostingSettings(BaseSettings):
    """Remote hosting endpoints, credentials and transport timeouts."""

    model_config = SettingsConfigDict(
        env_file=".env", extra="ignore", populate_by_name=True
    )

    upload_handler_url: str = Field(
        validation_alias="UPLOAD_HANDLER_URL",
        description="HTTP endpoint of the remote upload handler script.",
    )
    upload_auth_token: str = Field(
        min_length=1,
        validation_alias="UPLOAD_AUTH_TOKEN",
        description="Bearer credential sent to the upload handler.",
    )
    upload_http_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        validation_alias="UPLOAD_HTTP_TIMEOUT_SECONDS",
    )
    ftp_host: str = Field(min_length=1, validation_alias="FTP_HOST")
    ftp_port: int = Field(default=21, ge=1, le=65535, validation_alias="FTP_PORT")
    ftp_user: str = Field(min_length=1, validation_alias="FTP_USER")
    ftp_password: str = Field(min_length=1, validation_alias="FTP_PASSWORD")
    ftp_root_dir: str = Field(
        default="/public_html/uploads/customers",
        validation_alias="FTP_ROOT_DIR",
        description="Remote directory holding one sub-directory per entity.",
    )
    ftp_connect_timeout_seconds: float = Field(
        default=20.0, gt=0, validation_alias="FTP_CONNECT_TIMEOUT_SECONDS"
    )
    ftp_idle_timeout_seconds: float = Field(
        default=20.0, gt=0, validation_alias="FTP_IDLE_TIMEOUT_SECONDS"
    )
    ftp_delete_timeout_seconds: float = Field(
        default=10.0, gt=0, validation_alias="FTP_DELETE_TIMEOUT_SECONDS"
    )
    ftp_use_tls: bool = Field(default=False, validation_alias="FTP_USE_TLS")
    public_asset_base_url: str = Field(
        validation_alias="PUBLIC_ASSET_BASE_URL",
        description="Public URL prefix mapped onto FTP_ROOT_DIR by the web server.",
    )


class UploadSettings(BaseSettings):
    """Limits applied to incoming uploads."""

    model_config = SettingsConfigDict(
        env_file=".env", extra="ignore", populate_by_name=True
    )

    max_bytes: int = Field(
        default=10 * 1024 * 1024, ge=1, validation_alias="UPLOAD_MAX_BYTES"
    )
    chunk_size_bytes: int = Field(
        default=1024 * 1024, ge=1, validation_alias="UPLOAD_CHUNK_SIZE_BYTES"
    )


class AuthSettings(BaseSettings):
    """Staff authentication settings."""

    model_config = SettingsConfigDict(
        env_file=".env", extra="ignore", populate_by_name=True
    )

    jwt_signing_key: str = Field(min_length=1, validation_alias="JWT_SIGNING_KEY")
    staff_credentials_path: Path = Field(
        default=Path("staff_credentials.json"),
        validation_alias="STAFF_CREDENTIALS_PATH",
    )
    staff_jwt_ttl_hours: int = Field(
        default=12, ge=1, validation_alias="STAFF_JWT_TTL_HOURS"
    )


class LoggingSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", extra="ignore", populate_by_name=True
    )

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO", validation_alias="LOG_LEVEL"
    )


@dataclass(slots=True)
class UploadLimits:
    allowed_content_types: Sequence[str]
    max_bytes: int
    chunk_size_bytes: int


@dataclass(slots=True)
class AppConfig:
    hosting: HostingSettings
    upload_limits: UploadLimits
    auth: AuthSettings
    log_level: str = "INFO"


def load_config() -> AppConfig:
    """Load configuration from the environment."""
    uploads = UploadSettings()
    return AppConfig(
        hosting=HostingSettings(),
        upload_limits=UploadLimits(
            allowed_content_types=ALLOWED_CONTENT_TYPES,
            max_bytes=uploads.max_bytes,
            chunk_size_bytes=uploads.chunk_size_bytes,
        ),
        auth=AuthSettings(),
        log_level=LoggingSettings().level,
    )
