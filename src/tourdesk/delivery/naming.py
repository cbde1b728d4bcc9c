"""Stored asset naming.

Names have the shape ``{entity}_{category}_{epoch_ms}_{salt}.{ext}``. The
separator is removed from the entity id and never occurs in the other
components, so a stored name splits back into its parts.
"""

from __future__ import annotations

import re
import secrets
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import PurePosixPath

from .delivery_errors import InvalidCategoryError
from .delivery_models import AssetCategory

SEPARATOR = "_"
FALLBACK_EXTENSION = "bin"
SALT_UPPER_BOUND = 1_000_000_000

_EXTENSION_RE = re.compile(r"^[a-z0-9]{1,8}$")


@dataclass(slots=True, frozen=True)
class StoredAssetName:
    """Components of a remote file name.

    ``entity_id`` is the separator-free form used inside the name;
    ``owner_id`` keeps the caller's id, which names the remote directory,
    the public URL segment and the handler's ``customerId`` field.
    """

    entity_id: str
    category: AssetCategory
    timestamp_ms: int
    salt: int
    extension: str
    owner_id: str = field(default="", compare=False)

    @property
    def owner(self) -> str:
        return self.owner_id or self.entity_id

    @property
    def file_name(self) -> str:
        stem = SEPARATOR.join(
            (
                self.entity_id,
                self.category.value,
                str(self.timestamp_ms),
                str(self.salt),
            )
        )
        return f"{stem}.{self.extension}"

    def __str__(self) -> str:
        return self.file_name

    @classmethod
    def parse(cls, file_name: str) -> "StoredAssetName":
        """Split a stored file name back into its components."""
        stem, dot, extension = file_name.rpartition(".")
        if not dot or not stem:
            raise ValueError(f"stored name has no extension: {file_name!r}")
        parts = stem.split(SEPARATOR)
        if len(parts) != 4:
            raise ValueError(f"stored name has unexpected shape: {file_name!r}")
        entity_id, raw_category, timestamp, salt = parts
        if not entity_id or not timestamp.isdigit() or not salt.isdigit():
            raise ValueError(f"stored name has unexpected shape: {file_name!r}")
        try:
            category = AssetCategory.parse(raw_category)
        except InvalidCategoryError as exc:
            raise ValueError(f"stored name has unknown category: {file_name!r}") from exc
        return cls(
            entity_id=entity_id,
            category=category,
            timestamp_ms=int(timestamp),
            salt=int(salt),
            extension=extension,
        )


def sanitize_entity_id(entity_id: str) -> str:
    return entity_id.strip().replace(SEPARATOR, "")


def normalize_extension(original_filename: str | None) -> str:
    """Lowercase extension of ``original_filename`` or the generic fallback."""
    suffix = PurePosixPath((original_filename or "").replace("\\", "/")).suffix
    extension = suffix.lstrip(".").lower()
    if not _EXTENSION_RE.match(extension):
        return FALLBACK_EXTENSION
    return extension


@dataclass(slots=True)
class AssetNamer:
    """Derive collision-resistant names from the clock and a random salt."""

    clock: Callable[[], float] = time.time
    randbelow: Callable[[int], int] = secrets.randbelow

    def name(
        self,
        entity_id: str,
        category: AssetCategory,
        original_filename: str | None,
    ) -> StoredAssetName:
        owner = entity_id.strip()
        entity = sanitize_entity_id(owner)
        if not entity:
            raise ValueError("entity id is empty")
        return StoredAssetName(
            entity_id=entity,
            owner_id=owner,
            category=category,
            timestamp_ms=int(self.clock() * 1000),
            salt=self.randbelow(SALT_UPPER_BOUND),
            extension=normalize_extension(original_filename),
        )
