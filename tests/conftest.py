from __future__ import annotations

import os
from pathlib import Path


TEST_CREDENTIALS = Path(__file__).resolve().parent / "data" / "staff_credentials.json"
PUBLIC_BASE_URL = "https://hosting.test/uploads/customers"

os.environ.setdefault("JWT_SIGNING_KEY", "test-signing-key")
os.environ.setdefault("STAFF_CREDENTIALS_PATH", str(TEST_CREDENTIALS))
os.environ.setdefault("UPLOAD_HANDLER_URL", "https://hosting.test/upload-handler.php")
os.environ.setdefault("UPLOAD_AUTH_TOKEN", "test-upload-token")
os.environ.setdefault("FTP_HOST", "ftp.hosting.test")
os.environ.setdefault("FTP_USER", "tourdesk")
os.environ.setdefault("FTP_PASSWORD", "test-ftp-password")
os.environ.setdefault("PUBLIC_ASSET_BASE_URL", PUBLIC_BASE_URL)
