"""HTTP routes for customer asset upload and deletion."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import (
    APIRouter,
    Depends,
    File,
    Form,
    HTTPException,
    Query,
    Request,
    UploadFile,
    status,
)
from pydantic import BaseModel, ConfigDict, Field

from ..auth.auth_dependencies import require_staff_user
from .deletion_service import AssetDeletionService
from .delivery_errors import (
    AssetValidationError,
    EmptyPayloadError,
    InvalidCategoryError,
    InvalidEntityIdError,
    PayloadTooLargeError,
    UnsupportedMediaError,
    UploadFailed,
)
from .delivery_service import AssetUploadService
from .validation import AssetValidator

router = APIRouter(prefix="/api/upload", tags=["upload"])
logger = logging.getLogger(__name__)


class UploadResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    file_name: str = Field(alias="fileName")
    image_url: str = Field(alias="imageUrl")


class DeleteResponse(BaseModel):
    success: bool
    message: str


def get_upload_service(request: Request) -> AssetUploadService:
    try:
        return request.app.state.upload_service  # type: ignore[attr-defined]
    except AttributeError as exc:  # pragma: no cover - defensive path
        raise RuntimeError("AssetUploadService is not configured") from exc


def get_deletion_service(request: Request) -> AssetDeletionService:
    try:
        return request.app.state.deletion_service  # type: ignore[attr-defined]
    except AttributeError as exc:  # pragma: no cover - defensive path
        raise RuntimeError("AssetDeletionService is not configured") from exc


def get_asset_validator(request: Request) -> AssetValidator:
    try:
        return request.app.state.asset_validator  # type: ignore[attr-defined]
    except AttributeError as exc:  # pragma: no cover - defensive path
        raise RuntimeError("AssetValidator is not configured") from exc


_VALIDATION_FAILURES: tuple[tuple[type[AssetValidationError], int, str, str], ...] = (
    (
        UnsupportedMediaError,
        status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
        "unsupported_media_type",
        "Only JPEG, PNG, GIF and WebP images are accepted",
    ),
    (
        PayloadTooLargeError,
        status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
        "payload_too_large",
        "File is larger than the upload limit",
    ),
    (
        InvalidCategoryError,
        status.HTTP_400_BAD_REQUEST,
        "invalid_category",
        "type must be profile, id-front or id-back",
    ),
    (
        InvalidEntityIdError,
        status.HTTP_400_BAD_REQUEST,
        "invalid_entity_id",
        "customerId is not a valid identifier",
    ),
    (EmptyPayloadError, status.HTTP_400_BAD_REQUEST, "empty_file", "File is empty"),
)


def _validation_http_error(exc: AssetValidationError) -> HTTPException:
    code, reason, message = (
        status.HTTP_400_BAD_REQUEST,
        "invalid_request",
        "Upload could not be read",
    )
    for error_type, error_code, error_reason, error_message in _VALIDATION_FAILURES:
        if isinstance(exc, error_type):
            code, reason, message = error_code, error_reason, error_message
            break
    return HTTPException(
        status_code=code,
        detail={"status": "error", "failure_reason": reason, "message": message},
    )


@router.post("", response_model=UploadResponse)
async def upload_asset(
    file: UploadFile | None = File(None),
    customer_id: str | None = Form(None, alias="customerId"),
    asset_type: str | None = Form(None, alias="type"),
    staff: dict[str, Any] = Depends(require_staff_user),
    validator: AssetValidator = Depends(get_asset_validator),
    service: AssetUploadService = Depends(get_upload_service),
) -> UploadResponse:
    """Validate the uploaded image and store it on remote hosting."""
    if file is None or not customer_id or not asset_type:
        logger.warning(
            "delivery.upload.missing_fields",
            extra={
                "has_file": file is not None,
                "has_customer_id": bool(customer_id),
                "has_type": bool(asset_type),
            },
        )
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={
                "status": "error",
                "failure_reason": "invalid_request",
                "message": "file, customerId and type are required",
            },
        )

    try:
        asset = await validator.read_upload(
            file, entity_id=customer_id, category=asset_type
        )
    except AssetValidationError as exc:
        raise _validation_http_error(exc) from exc

    logger.info(
        "delivery.upload.accepted",
        extra={
            "staff_user": staff.get("sub"),
            "entity_id": asset.entity_id,
            "category": asset.category.value,
        },
    )

    try:
        outcome = await service.store_request(asset)
    except AssetValidationError as exc:
        raise _validation_http_error(exc) from exc
    except UploadFailed as exc:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail={
                "status": "error",
                "failure_reason": "upload_failed",
                "message": str(exc),
            },
        ) from exc

    return UploadResponse(fileName=outcome.file_name, imageUrl=outcome.url)


@router.delete("/delete", response_model=DeleteResponse)
async def delete_asset(
    file_name: str | None = Query(None, alias="fileName"),
    customer_id: str | None = Query(None, alias="customerId"),
    staff: dict[str, Any] = Depends(require_staff_user),
    service: AssetDeletionService = Depends(get_deletion_service),
) -> DeleteResponse:
    """Remove a stored asset; failures are reported as ``success: false``."""
    if not file_name or not customer_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={
                "status": "error",
                "failure_reason": "invalid_request",
                "message": "fileName and customerId are required",
            },
        )

    deleted = await service.remove(customer_id, file_name)
    logger.info(
        "delivery.delete.requested",
        extra={"staff_user": staff.get("sub"), "entity_id": customer_id, "deleted": deleted},
    )
    return DeleteResponse(
        success=deleted,
        message=(
            "File deleted successfully"
            if deleted
            else "File deletion failed or file not found"
        ),
    )
