"""FTP delivery to the hosting account.

Every operation opens its own session, logs in, does its work and closes the
session on every exit path. Sessions are never shared between requests.
"""

from __future__ import annotations

import asyncio
import ftplib
import io
import logging
import posixpath
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field

from ..delivery.delivery_models import (
    TransportFailureReason,
    TransportName,
    TransportResult,
)
from ..delivery.naming import StoredAssetName
from ..media.public_asset_links import build_public_asset_url

logger = logging.getLogger(__name__)

_STAGE_LABELS = {
    "connect": "FTP connection failed",
    "mkdir": "FTP directory creation failed",
    "transfer": "FTP upload failed",
}


@dataclass(slots=True)
class FtpTransport:
    """Store and delete assets under ``<root_dir>/<entity_id>/`` over FTP."""

    host: str
    user: str
    password: str
    root_dir: str
    public_base_url: str
    port: int = 21
    connect_timeout_seconds: float = 20.0
    idle_timeout_seconds: float = 20.0
    delete_timeout_seconds: float = 10.0
    use_tls: bool = False
    ftp_factory: Callable[[], ftplib.FTP] | None = None
    name: TransportName = TransportName.FTP
    log: logging.Logger = field(default_factory=lambda: logger)

    def entity_dir(self, entity_id: str) -> str:
        return posixpath.join(self.root_dir, entity_id)

    def remote_path(self, entity_id: str, file_name: str) -> str:
        return posixpath.join(self.entity_dir(entity_id), file_name)

    async def deliver(
        self, payload: bytes, stored: StoredAssetName
    ) -> TransportResult:
        return await asyncio.to_thread(self._deliver_sync, payload, stored)

    async def remove(self, entity_id: str, file_name: str) -> bool:
        return await asyncio.to_thread(self._remove_sync, entity_id, file_name)

    def _deliver_sync(self, payload: bytes, stored: StoredAssetName) -> TransportResult:
        remote_dir = self.entity_dir(stored.owner)
        remote_path = posixpath.join(remote_dir, stored.file_name)
        stage = "connect"
        try:
            with self.session(
                connect_timeout=self.connect_timeout_seconds,
                idle_timeout=self.idle_timeout_seconds,
            ) as ftp:
                stage = "mkdir"
                self._ensure_directory(ftp, remote_dir)
                stage = "transfer"
                ftp.storbinary(f"STOR {remote_path}", io.BytesIO(payload))
        except ftplib.all_errors as exc:
            detail = f"{_STAGE_LABELS[stage]}: {exc}"
            self.log.warning(
                "delivery.ftp.failed",
                extra={"stage": stage, "remote_path": remote_path, "detail": str(exc)},
            )
            return TransportResult.failed(self.name, TransportFailureReason.NETWORK, detail)

        url = build_public_asset_url(
            self.public_base_url, stored.owner, stored.file_name
        )
        self.log.info(
            "delivery.ftp.stored",
            extra={"remote_path": remote_path, "url": url, "size_bytes": len(payload)},
        )
        return TransportResult.stored(self.name, file_name=stored.file_name, url=url)

    def _remove_sync(self, entity_id: str, file_name: str) -> bool:
        remote_path = self.remote_path(entity_id, file_name)
        try:
            with self.session(
                connect_timeout=self.delete_timeout_seconds,
                idle_timeout=self.delete_timeout_seconds,
            ) as ftp:
                ftp.delete(remote_path)
        except ftplib.all_errors as exc:
            self.log.warning(
                "delivery.ftp.delete_failed",
                extra={"remote_path": remote_path, "detail": str(exc)},
            )
            return False
        self.log.info("delivery.ftp.deleted", extra={"remote_path": remote_path})
        return True

    @contextmanager
    def session(self, *, connect_timeout: float, idle_timeout: float) -> Iterator[ftplib.FTP]:
        """Yield a logged-in client; the connection is closed on exit."""
        ftp = self._new_client()
        try:
            ftp.connect(self.host, self.port, timeout=connect_timeout)
            ftp.timeout = idle_timeout
            if ftp.sock is not None:
                ftp.sock.settimeout(idle_timeout)
            ftp.login(self.user, self.password)
            if isinstance(ftp, ftplib.FTP_TLS):
                ftp.prot_p()
            yield ftp
        finally:
            self._close(ftp)

    def _new_client(self) -> ftplib.FTP:
        if self.ftp_factory is not None:
            return self.ftp_factory()
        return ftplib.FTP_TLS() if self.use_tls else ftplib.FTP()

    def _ensure_directory(self, ftp: ftplib.FTP, remote_dir: str) -> None:
        # Each segment is created in turn; a permanent reply means it exists.
        current = "/" if remote_dir.startswith("/") else ""
        for part in (segment for segment in remote_dir.split("/") if segment):
            current = posixpath.join(current, part)
            try:
                ftp.mkd(current)
            except ftplib.error_perm as exc:
                self.log.debug(
                    "delivery.ftp.mkdir_skipped",
                    extra={"remote_dir": current, "detail": str(exc)},
                )

    def _close(self, ftp: ftplib.FTP) -> None:
        if ftp.sock is None:
            return
        try:
            ftp.quit()
        except ftplib.all_errors:
            ftp.close()
