"""Removal of stored assets."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Protocol

from .delivery_errors import InvalidEntityIdError
from .validation import check_entity_id

logger = logging.getLogger(__name__)


class AssetRemover(Protocol):
    async def remove(self, entity_id: str, file_name: str) -> bool:
        ...


@dataclass(slots=True)
class AssetDeletionService:
    """Delete ``<entity_id>/<file_name>`` from hosting; reports a plain bool.

    ``False`` covers every failure: missing file, refused connection, timeout
    and unsafe names alike.
    """

    remover: AssetRemover
    log: logging.Logger = field(default_factory=lambda: logger)

    async def remove(self, entity_id: str, file_name: str) -> bool:
        try:
            entity = check_entity_id(entity_id)
        except InvalidEntityIdError:
            self.log.warning("delivery.delete.invalid_entity", extra={"entity_id": entity_id})
            return False
        if not _is_plain_file_name(file_name):
            self.log.warning("delivery.delete.invalid_name", extra={"stored_name": file_name})
            return False

        try:
            deleted = await self.remover.remove(entity, file_name)
        except Exception:
            self.log.exception(
                "delivery.delete.unexpected_error",
                extra={"entity_id": entity, "stored_name": file_name},
            )
            return False
        self.log.info(
            "delivery.delete.done",
            extra={"entity_id": entity, "stored_name": file_name, "deleted": deleted},
        )
        return deleted


def _is_plain_file_name(file_name: str) -> bool:
    return (
        bool(file_name)
        and file_name not in {".", ".."}
        and "/" not in file_name
        and "\\" not in file_name
    )
