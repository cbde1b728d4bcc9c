"""Upload orchestration: name once, try HTTP, fall back to FTP."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from ..transports.transports_base import OrderedFallback
from .delivery_errors import UploadFailed
from .delivery_models import AssetCategory, AssetRequest, DeliveryOutcome
from .naming import AssetNamer
from .validation import AssetValidator

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class AssetUploadService:
    """Store customer assets on remote hosting.

    The stored name is derived once per call so every transport writes the
    same remote file. Only when all transports fail is :class:`UploadFailed`
    raised; its message carries the first transport's failure.
    """

    delivery: OrderedFallback
    validator: AssetValidator
    namer: AssetNamer = field(default_factory=AssetNamer)
    log: logging.Logger = field(default_factory=lambda: logger)

    async def store(
        self,
        payload: bytes,
        original_filename: str,
        entity_id: str,
        category: AssetCategory | str,
        *,
        content_type: str = "image/jpeg",
    ) -> DeliveryOutcome:
        request = AssetRequest(
            payload=payload,
            original_filename=original_filename,
            content_type=content_type,
            entity_id=entity_id,
            category=AssetCategory.parse(category),
        )
        return await self.store_request(request)

    async def store_request(self, request: AssetRequest) -> DeliveryOutcome:
        self.validator.check(request)
        stored = self.namer.name(
            request.entity_id, request.category, request.original_filename
        )
        self.log.info(
            "delivery.store.start",
            extra={
                "entity_id": request.entity_id,
                "category": request.category.value,
                "stored_name": stored.file_name,
                "size_bytes": request.size_bytes,
            },
        )

        report = await self.delivery.deliver(request.payload, stored)
        if report.result is not None:
            result = report.result
            self.log.info(
                "delivery.store.done",
                extra={
                    "stored_name": result.file_name,
                    "transport": result.transport.value,
                },
            )
            return DeliveryOutcome(
                file_name=result.file_name or stored.file_name,
                url=result.url or "",
                transport=result.transport,
            )

        if not report.failures:
            raise UploadFailed("Upload failed: no transport configured")
        primary, *supplementary = report.failures
        for failure in supplementary:
            self.log.error(
                "delivery.store.fallback_failed",
                extra={
                    "stored_name": stored.file_name,
                    "transport": failure.transport.value,
                    "reason": failure.reason.value if failure.reason else None,
                    "detail": failure.detail,
                },
            )
        self.log.error(
            "delivery.store.failed",
            extra={
                "stored_name": stored.file_name,
                "transport": primary.transport.value,
                "reason": primary.reason.value if primary.reason else None,
                "detail": primary.detail,
            },
        )
        raise UploadFailed(
            f"Upload failed: {primary.detail}",
            primary_reason=primary.reason.value if primary.reason else None,
        )
