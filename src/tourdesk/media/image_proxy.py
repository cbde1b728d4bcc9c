"""Fetch hosted customer images on behalf of the back-office UI."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

import httpx

from .public_asset_links import is_public_asset_url

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = "image/jpeg"


class ImageProxyError(Exception):
    """Base class for proxy failures."""


class ForbiddenImageUrlError(ImageProxyError):
    """Raised when the URL is outside the public asset base."""


class ImageNotFoundError(ImageProxyError):
    """Raised when hosting does not answer with a success status."""


class ImageFetchError(ImageProxyError):
    """Raised when hosting cannot be reached."""


@dataclass(slots=True)
class ProxiedImage:
    content: bytes
    content_type: str


@dataclass(slots=True)
class ImageProxyService:
    """Download images that live under the public asset base URL only."""

    public_base_url: str
    timeout_seconds: float = 15.0
    log: logging.Logger = field(default_factory=lambda: logger)

    async def fetch(self, url: str) -> ProxiedImage:
        if not is_public_asset_url(self.public_base_url, url):
            self.log.warning("media.proxy.forbidden", extra={"url": url})
            raise ForbiddenImageUrlError(url)

        try:
            async with httpx.AsyncClient(timeout=self.timeout_seconds) as client:
                response = await client.get(url)
        except httpx.HTTPError as exc:
            self.log.warning("media.proxy.fetch_failed", extra={"url": url, "detail": str(exc)})
            raise ImageFetchError(str(exc)) from exc

        if not 200 <= response.status_code < 300:
            self.log.info(
                "media.proxy.not_found",
                extra={"url": url, "status_code": response.status_code},
            )
            raise ImageNotFoundError(url)

        content_type = response.headers.get("Content-Type") or DEFAULT_CONTENT_TYPE
        return ProxiedImage(content=response.content, content_type=content_type)
