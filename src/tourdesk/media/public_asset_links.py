"""Helpers for building public asset URLs."""

from __future__ import annotations

from urllib.parse import quote, urljoin, urlsplit


def build_public_asset_url(base_url: str, entity_id: str, file_name: str) -> str:
    base = base_url.rstrip("/") + "/"
    return urljoin(base, f"{quote(entity_id)}/{quote(file_name)}")


def is_public_asset_url(base_url: str, url: str) -> bool:
    """True when ``url`` points below ``base_url`` without dot segments."""
    if not url.startswith(base_url.rstrip("/") + "/"):
        return False
    return ".." not in urlsplit(url).path.split("/")
