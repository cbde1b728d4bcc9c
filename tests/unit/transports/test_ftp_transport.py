from __future__ import annotations

import ftplib
from typing import BinaryIO

import pytest

from src.tourdesk.delivery.delivery_models import (
    AssetCategory,
    TransportFailureReason,
    TransportName,
)
from src.tourdesk.delivery.naming import StoredAssetName
from src.tourdesk.transports.transports_ftp import FtpTransport

ROOT = "/public_html/uploads/customers"
PUBLIC_BASE = "https://hosting.test/uploads/customers"


class FakeSocket:
    def __init__(self) -> None:
        self.timeout: float | None = None

    def settimeout(self, value: float) -> None:
        self.timeout = value


class FakeFTP:
    """In-memory stand-in for ``ftplib.FTP`` recording every call."""

    def __init__(
        self,
        *,
        existing_dirs: set[str] | None = None,
        files: dict[str, bytes] | None = None,
        connect_error: Exception | None = None,
        stor_error: Exception | None = None,
    ) -> None:
        self.dirs = set(existing_dirs or set())
        self.files = dict(files or {})
        self.connect_error = connect_error
        self.stor_error = stor_error
        self.sock: FakeSocket | None = None
        self.timeout: float | None = None
        self.connected_with: tuple[str, int, float] | None = None
        self.logged_in_as: tuple[str, str] | None = None
        self.quit_called = False

    def connect(self, host: str, port: int, timeout: float) -> str:
        if self.connect_error is not None:
            raise self.connect_error
        self.connected_with = (host, port, timeout)
        self.sock = FakeSocket()
        return "220 ready"

    def login(self, user: str, passwd: str) -> str:
        self.logged_in_as = (user, passwd)
        return "230 logged in"

    def mkd(self, path: str) -> str:
        if path in self.dirs:
            raise ftplib.error_perm(f"550 {path}: File exists")
        self.dirs.add(path)
        return path

    def storbinary(self, cmd: str, fp: BinaryIO) -> str:
        if self.stor_error is not None:
            raise self.stor_error
        _, path = cmd.split(" ", 1)
        self.files[path] = fp.read()
        return "226 transfer complete"

    def delete(self, path: str) -> str:
        if path not in self.files:
            raise ftplib.error_perm(f"550 {path}: No such file")
        del self.files[path]
        return "250 deleted"

    def quit(self) -> str:
        self.quit_called = True
        self.sock = None
        return "221 bye"

    def close(self) -> None:
        self.sock = None


@pytest.fixture
def stored() -> StoredAssetName:
    return StoredAssetName(
        entity_id="CUST-1",
        category=AssetCategory.ID_FRONT,
        timestamp_ms=1_700_000_000_000,
        salt=7,
        extension="jpg",
    )


def build_transport(fake: FakeFTP) -> FtpTransport:
    return FtpTransport(
        host="ftp.hosting.test",
        port=2121,
        user="tourdesk",
        password="pw",
        root_dir=ROOT,
        public_base_url=PUBLIC_BASE,
        connect_timeout_seconds=5.0,
        idle_timeout_seconds=7.0,
        delete_timeout_seconds=3.0,
        ftp_factory=lambda: fake,
    )


@pytest.mark.asyncio
async def test_deliver_creates_entity_dir_and_stores_payload(stored: StoredAssetName) -> None:
    fake = FakeFTP()
    transport = build_transport(fake)

    result = await transport.deliver(b"jpeg-bytes", stored)

    remote_path = f"{ROOT}/CUST-1/{stored.file_name}"
    assert result.success
    assert result.transport is TransportName.FTP
    assert result.file_name == stored.file_name
    assert result.url == f"{PUBLIC_BASE}/CUST-1/{stored.file_name}"
    assert fake.files[remote_path] == b"jpeg-bytes"
    assert f"{ROOT}/CUST-1" in fake.dirs
    assert fake.connected_with == ("ftp.hosting.test", 2121, 5.0)
    assert fake.logged_in_as == ("tourdesk", "pw")
    assert fake.timeout == 7.0
    assert fake.quit_called


@pytest.mark.asyncio
async def test_deliver_ignores_existing_directories(stored: StoredAssetName) -> None:
    existing = {"/public_html", "/public_html/uploads", ROOT, f"{ROOT}/CUST-1"}
    fake = FakeFTP(existing_dirs=existing)

    result = await build_transport(fake).deliver(b"data", stored)

    assert result.success
    assert fake.quit_called


@pytest.mark.asyncio
async def test_deliver_maps_transfer_error_to_network_and_closes(stored: StoredAssetName) -> None:
    fake = FakeFTP(stor_error=ftplib.error_perm("553 Could not create file"))

    result = await build_transport(fake).deliver(b"data", stored)

    assert not result.success
    assert result.reason is TransportFailureReason.NETWORK
    assert result.detail.startswith("FTP upload failed")
    assert fake.quit_called


@pytest.mark.asyncio
async def test_deliver_maps_connection_error_to_network(stored: StoredAssetName) -> None:
    fake = FakeFTP(connect_error=TimeoutError("timed out"))

    result = await build_transport(fake).deliver(b"data", stored)

    assert not result.success
    assert result.reason is TransportFailureReason.NETWORK
    assert result.detail.startswith("FTP connection failed")
    assert not fake.quit_called


@pytest.mark.asyncio
async def test_remove_deletes_existing_file() -> None:
    path = f"{ROOT}/CUST-1/old.jpg"
    fake = FakeFTP(files={path: b"x"})

    deleted = await build_transport(fake).remove("CUST-1", "old.jpg")

    assert deleted is True
    assert path not in fake.files
    assert fake.connected_with == ("ftp.hosting.test", 2121, 3.0)
    assert fake.quit_called


@pytest.mark.asyncio
async def test_remove_missing_file_returns_false() -> None:
    fake = FakeFTP()

    deleted = await build_transport(fake).remove("CUST-1", "missing.jpg")

    assert deleted is False
    assert fake.quit_called


@pytest.mark.asyncio
async def test_remove_connection_refused_returns_false() -> None:
    fake = FakeFTP(connect_error=ConnectionRefusedError("refused"))

    assert await build_transport(fake).remove("CUST-1", "a.jpg") is False


@pytest.mark.asyncio
async def test_deliver_reports_directory_creation_failure(stored: StoredAssetName) -> None:
    fake = FakeFTP()

    def refuse_mkd(path: str) -> str:
        raise ftplib.error_temp("421 Service not available")

    fake.mkd = refuse_mkd

    result = await build_transport(fake).deliver(b"data", stored)

    assert not result.success
    assert result.reason is TransportFailureReason.NETWORK
    assert result.detail.startswith("FTP directory creation failed")
    assert fake.files == {}
    assert fake.quit_called


@pytest.mark.asyncio
async def test_deliver_and_remove_use_caller_entity_directory() -> None:
    stored = StoredAssetName(
        entity_id="CUST1",
        category=AssetCategory.PROFILE,
        timestamp_ms=1_700_000_000_000,
        salt=11,
        extension="jpg",
        owner_id="CUST_1",
    )
    fake = FakeFTP()
    transport = build_transport(fake)

    result = await transport.deliver(b"data", stored)

    assert result.url == f"{PUBLIC_BASE}/CUST_1/{stored.file_name}"
    assert f"{ROOT}/CUST_1/{stored.file_name}" in fake.files
    assert await transport.remove("CUST_1", stored.file_name) is True
    assert fake.files == {}
