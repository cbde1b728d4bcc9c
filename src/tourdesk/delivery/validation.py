"""Upload validation utilities."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from fastapi import UploadFile

from ..config import UploadLimits
from .delivery_errors import (
    EmptyPayloadError,
    InvalidEntityIdError,
    PayloadTooLargeError,
    UnsupportedMediaError,
    UploadReadError,
)
from .delivery_models import AssetCategory, AssetRequest

logger = logging.getLogger(__name__)

_ENTITY_ID_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]{0,63}$")


def check_entity_id(entity_id: str) -> str:
    """Return ``entity_id`` stripped, rejecting values unsafe as a directory name."""
    value = (entity_id or "").strip()
    if not _ENTITY_ID_RE.match(value) or ".." in value:
        raise InvalidEntityIdError(entity_id)
    return value


@dataclass(slots=True)
class AssetValidator:
    """Validate assets against configured limits."""

    limits: UploadLimits

    def check(self, request: AssetRequest) -> AssetRequest:
        """Validate an in-memory request; returns it unchanged."""
        check_entity_id(request.entity_id)
        AssetCategory.parse(request.category)
        self._check_content_type(request.content_type)
        if request.size_bytes == 0:
            raise EmptyPayloadError(request.original_filename)
        if request.size_bytes > self.limits.max_bytes:
            raise PayloadTooLargeError(request.size_bytes)
        return request

    async def read_upload(
        self,
        upload: UploadFile,
        *,
        entity_id: str,
        category: str,
    ) -> AssetRequest:
        """Read ``upload`` into memory, enforcing every limit before returning."""
        entity = check_entity_id(entity_id)
        asset_category = AssetCategory.parse(category)
        self._check_content_type(upload.content_type)

        cap = self.limits.max_bytes
        chunks: list[bytes] = []
        size = 0
        try:
            while True:
                chunk = await upload.read(self.limits.chunk_size_bytes)
                if not chunk:
                    break
                size += len(chunk)
                if size > cap:
                    logger.warning(
                        "delivery.upload.payload_too_large",
                        extra={"size_bytes": size, "limit_bytes": cap},
                    )
                    raise PayloadTooLargeError(size)
                chunks.append(chunk)
        except PayloadTooLargeError:
            raise
        except Exception as exc:  # pragma: no cover - defensive branch
            logger.error("delivery.upload.read_failed", exc_info=exc)
            raise UploadReadError(str(exc)) from exc
        finally:
            await upload.close()

        if size == 0:
            raise EmptyPayloadError(upload.filename or "")

        request = AssetRequest(
            payload=b"".join(chunks),
            original_filename=upload.filename or "upload",
            content_type=upload.content_type or "application/octet-stream",
            entity_id=entity,
            category=asset_category,
        )
        logger.info(
            "delivery.upload.validated",
            extra={
                "entity_id": entity,
                "category": asset_category.value,
                "upload_filename": request.original_filename,
                "size_bytes": size,
                "content_type": request.content_type,
            },
        )
        return request

    def _check_content_type(self, content_type: str | None) -> None:
        if content_type not in set(self.limits.allowed_content_types):
            logger.warning(
                "delivery.upload.unsupported_media",
                extra={"content_type": content_type},
            )
            raise UnsupportedMediaError(content_type)
