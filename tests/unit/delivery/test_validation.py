from __future__ import annotations

from io import BytesIO

import pytest
from fastapi import UploadFile
from starlette.datastructures import Headers

from src.tourdesk.config import ALLOWED_CONTENT_TYPES, UploadLimits
from src.tourdesk.delivery.delivery_errors import (
    EmptyPayloadError,
    InvalidCategoryError,
    InvalidEntityIdError,
    PayloadTooLargeError,
    UnsupportedMediaError,
)
from src.tourdesk.delivery.delivery_models import AssetCategory, AssetRequest
from src.tourdesk.delivery.validation import AssetValidator, check_entity_id


def make_upload(data: bytes, *, content_type: str, filename: str) -> UploadFile:
    return UploadFile(
        filename=filename,
        file=BytesIO(data),
        headers=Headers({"content-type": content_type}),
    )


def build_validator(*, max_bytes: int = 1024, chunk_size: int = 16) -> AssetValidator:
    return AssetValidator(
        UploadLimits(
            allowed_content_types=ALLOWED_CONTENT_TYPES,
            max_bytes=max_bytes,
            chunk_size_bytes=chunk_size,
        )
    )


def make_request(**overrides) -> AssetRequest:
    values = {
        "payload": b"\xff\xd8\xff" + b"0" * 32,
        "original_filename": "face.jpg",
        "content_type": "image/jpeg",
        "entity_id": "CUST-1",
        "category": AssetCategory.PROFILE,
    }
    values.update(overrides)
    return AssetRequest(**values)


@pytest.mark.asyncio
async def test_read_upload_returns_request_with_payload() -> None:
    data = b"png-bytes" * 10
    upload = make_upload(data, content_type="image/png", filename="face.png")

    request = await build_validator().read_upload(
        upload, entity_id=" CUST-1 ", category="profile"
    )

    assert request.payload == data
    assert request.entity_id == "CUST-1"
    assert request.category is AssetCategory.PROFILE
    assert request.content_type == "image/png"
    assert request.original_filename == "face.png"


@pytest.mark.asyncio
async def test_read_upload_rejects_pdf_before_reading() -> None:
    upload = make_upload(b"%PDF-1.7", content_type="application/pdf", filename="id.pdf")

    with pytest.raises(UnsupportedMediaError):
        await build_validator().read_upload(upload, entity_id="CUST-1", category="id-front")


@pytest.mark.asyncio
async def test_read_upload_rejects_oversized_payload() -> None:
    upload = make_upload(b"x" * 2048, content_type="image/jpeg", filename="big.jpg")

    with pytest.raises(PayloadTooLargeError):
        await build_validator(max_bytes=1024, chunk_size=100).read_upload(
            upload, entity_id="CUST-1", category="profile"
        )


@pytest.mark.asyncio
async def test_read_upload_rejects_empty_file() -> None:
    upload = make_upload(b"", content_type="image/jpeg", filename="empty.jpg")

    with pytest.raises(EmptyPayloadError):
        await build_validator().read_upload(upload, entity_id="CUST-1", category="profile")


@pytest.mark.asyncio
async def test_read_upload_rejects_unknown_category() -> None:
    upload = make_upload(b"data", content_type="image/jpeg", filename="a.jpg")

    with pytest.raises(InvalidCategoryError):
        await build_validator().read_upload(upload, entity_id="CUST-1", category="selfie")


@pytest.mark.parametrize("entity_id", ["", "  ", "../etc", "a/b", "CUST..1", "-leading", "x" * 65])
def test_check_entity_id_rejects_unsafe_values(entity_id: str) -> None:
    with pytest.raises(InvalidEntityIdError):
        check_entity_id(entity_id)


def test_check_accepts_valid_request() -> None:
    request = make_request()

    assert build_validator().check(request) is request


def test_check_rejects_request_over_ceiling() -> None:
    with pytest.raises(PayloadTooLargeError):
        build_validator(max_bytes=8).check(make_request())


def test_check_rejects_disallowed_mime() -> None:
    with pytest.raises(UnsupportedMediaError):
        build_validator().check(make_request(content_type="application/pdf"))
