"""Data structures for the media delivery pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from .delivery_errors import InvalidCategoryError


class AssetCategory(StrEnum):
    """Kinds of customer images the back office stores."""

    PROFILE = "profile"
    ID_FRONT = "id-front"
    ID_BACK = "id-back"

    @classmethod
    def parse(cls, value: str) -> "AssetCategory":
        """Return the category for ``value``, accepting legacy spellings."""
        normalized = (value or "").strip().lower()
        normalized = _LEGACY_CATEGORY_ALIASES.get(normalized, normalized)
        try:
            return cls(normalized)
        except ValueError as exc:
            raise InvalidCategoryError(value) from exc


_LEGACY_CATEGORY_ALIASES = {
    "nidfront": "id-front",
    "nidback": "id-back",
}


class TransportName(StrEnum):
    """Transports able to deliver a payload to remote hosting."""

    HTTP = "http"
    FTP = "ftp"


class TransportFailureReason(StrEnum):
    """Why a single transport attempt did not store the asset."""

    NETWORK = "network"
    REMOTE_REJECTED = "remote-rejected"
    UNPARSABLE_REPLY = "unparsable-reply"


@dataclass(slots=True, frozen=True)
class AssetRequest:
    """Binary asset handed over by an authenticated caller."""

    payload: bytes
    original_filename: str
    content_type: str
    entity_id: str
    category: AssetCategory

    @property
    def size_bytes(self) -> int:
        return len(self.payload)


@dataclass(slots=True, frozen=True)
class DeliveryOutcome:
    """Where an asset ended up; the caller persists ``url`` in its own record."""

    file_name: str
    url: str
    transport: TransportName


@dataclass(slots=True, frozen=True)
class TransportResult:
    """Outcome of one transport attempt."""

    transport: TransportName
    success: bool
    file_name: str | None = None
    url: str | None = None
    reason: TransportFailureReason | None = None
    detail: str = ""

    @classmethod
    def stored(
        cls, transport: TransportName, *, file_name: str, url: str
    ) -> "TransportResult":
        return cls(transport=transport, success=True, file_name=file_name, url=url)

    @classmethod
    def failed(
        cls,
        transport: TransportName,
        reason: TransportFailureReason,
        detail: str,
    ) -> "TransportResult":
        return cls(transport=transport, success=False, reason=reason, detail=detail)
