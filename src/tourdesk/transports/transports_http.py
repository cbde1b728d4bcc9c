"""HTTP delivery through the remote upload handler script.

The handler answers with a JSON object that may be followed by interpreter
noise, typically a stray ``?>`` closing tag. The reply is cleaned with a
fixed algorithm before decoding:

1. trim surrounding whitespace;
2. drop a trailing ``?>`` marker;
3. cut everything after the last ``}``;
4. decode the rest as a JSON object.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any

import httpx

from ..delivery.delivery_models import (
    TransportFailureReason,
    TransportName,
    TransportResult,
)
from ..delivery.naming import StoredAssetName
from ..media.public_asset_links import build_public_asset_url

logger = logging.getLogger(__name__)

TRAILING_MARKER = "?>"
_CONTENT_TYPES = {
    "png": "image/png",
    "gif": "image/gif",
    "webp": "image/webp",
}


class ReplyParseError(ValueError):
    """Raised when the handler reply cannot be reduced to a JSON object."""


def clean_handler_reply(text: str) -> str:
    cleaned = text.strip()
    if cleaned.endswith(TRAILING_MARKER):
        cleaned = cleaned[: -len(TRAILING_MARKER)]
    last_brace = cleaned.rfind("}")
    if last_brace != -1:
        cleaned = cleaned[: last_brace + 1]
    return cleaned


def parse_handler_reply(text: str) -> dict[str, Any]:
    """Clean and decode a handler reply into a JSON object."""
    cleaned = clean_handler_reply(text)
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as exc:
        raise ReplyParseError(f"invalid JSON from upload handler: {exc}") from exc
    if not isinstance(data, dict):
        raise ReplyParseError("upload handler reply is not a JSON object")
    return data


def content_type_for(extension: str) -> str:
    return _CONTENT_TYPES.get(extension.lower(), "image/jpeg")


@dataclass(slots=True)
class HttpTransport:
    """POST the asset as multipart form data to the upload handler."""

    endpoint: str
    auth_token: str
    public_base_url: str
    timeout_seconds: float = 30.0
    name: TransportName = TransportName.HTTP
    log: logging.Logger = field(default_factory=lambda: logger)

    async def deliver(
        self, payload: bytes, stored: StoredAssetName
    ) -> TransportResult:
        file_name = stored.file_name
        headers = {"Authorization": f"Bearer {self.auth_token}"}
        files = {"file": (file_name, payload, content_type_for(stored.extension))}
        data = {"customerId": stored.owner, "type": stored.category.value}

        self.log.info(
            "delivery.http.request",
            extra={
                "endpoint": self.endpoint,
                "stored_name": file_name,
                "size_bytes": len(payload),
            },
        )
        try:
            async with httpx.AsyncClient(timeout=self.timeout_seconds) as client:
                response = await client.post(
                    self.endpoint, headers=headers, data=data, files=files
                )
        except httpx.TimeoutException as exc:
            return self._failure(
                TransportFailureReason.NETWORK,
                f"upload handler timed out after {self.timeout_seconds}s: {exc}",
            )
        except httpx.HTTPError as exc:
            return self._failure(
                TransportFailureReason.NETWORK, f"upload handler unreachable: {exc}"
            )

        raw = response.text
        if not 200 <= response.status_code < 300:
            detail = f"upload handler returned status {response.status_code}"
            if "<!DOCTYPE" in raw:
                detail += " with an HTML error page"
            return self._failure(
                TransportFailureReason.REMOTE_REJECTED, detail, raw=raw
            )

        try:
            body = parse_handler_reply(raw)
        except ReplyParseError as exc:
            return self._failure(
                TransportFailureReason.UNPARSABLE_REPLY, str(exc), raw=raw
            )

        if body.get("success") is not True:
            message = body.get("error") or "upload handler reported failure"
            return self._failure(
                TransportFailureReason.REMOTE_REJECTED, str(message), raw=raw
            )

        stored_name = str(body.get("filename") or file_name)
        url = str(
            body.get("url")
            or build_public_asset_url(self.public_base_url, stored.owner, stored_name)
        )
        self.log.info(
            "delivery.http.stored",
            extra={"stored_name": stored_name, "url": url},
        )
        return TransportResult.stored(self.name, file_name=stored_name, url=url)

    def _failure(
        self, reason: TransportFailureReason, detail: str, *, raw: str | None = None
    ) -> TransportResult:
        self.log.warning(
            "delivery.http.failed",
            extra={"reason": reason.value, "detail": detail, "raw_reply": raw},
        )
        return TransportResult.failed(self.name, reason, detail)
