"""Back-office staff accounts and bearer tokens.

Accounts come from a JSON file shaped like::

    {"staff": [{"username": "desk", "password_hash": "<sha256 hex>",
                "role": "staff", "disabled": false}]}

Tokens are HS256 JWTs carrying ``sub``, ``role``, ``iat`` and ``exp``.
"""

from __future__ import annotations

import hashlib
import hmac
import json
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import StrEnum
from pathlib import Path
from typing import Any, Callable, Collection

import jwt
import structlog

logger = structlog.get_logger(__name__)

TOKEN_ALGORITHM = "HS256"


class StaffRole(StrEnum):
    STAFF = "staff"
    ADMIN = "admin"


# Both roles may manage customer media.
DESK_ROLES: frozenset[str] = frozenset({StaffRole.STAFF, StaffRole.ADMIN})


class AuthError(Exception):
    """Base class for auth failures."""


class InvalidCredentialsError(AuthError):
    """Unknown user, wrong password or disabled account."""


class InvalidTokenError(AuthError):
    """Token is malformed, badly signed or misses a claim."""


class TokenExpiredError(AuthError):
    """Token ``exp`` is in the past."""


class RoleNotAllowedError(AuthError):
    """Token role is not accepted by the route."""


def hash_password(value: str) -> str:
    return hashlib.sha256(value.encode("utf-8")).hexdigest()


def _utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)


@dataclass(frozen=True, slots=True)
class StaffAccount:
    username: str
    password_hash: str
    role: StaffRole = StaffRole.STAFF
    disabled: bool = False

    def accepts(self, password: str) -> bool:
        if self.disabled:
            return False
        return hmac.compare_digest(self.password_hash, hash_password(password))


@dataclass(frozen=True, slots=True)
class IssuedToken:
    access_token: str
    expires_in: int
    username: str
    role: StaffRole


def load_staff_accounts(path: Path) -> dict[str, StaffAccount]:
    """Parse the staff file, failing loudly on any malformed entry."""
    if not path.exists():
        raise FileNotFoundError(f"Staff credentials file not found: {path}")
    document = json.loads(path.read_text(encoding="utf-8"))
    entries = document.get("staff") if isinstance(document, dict) else None
    if not isinstance(entries, list):
        raise ValueError("Staff credentials file must hold a 'staff' array")

    accounts: dict[str, StaffAccount] = {}
    for position, entry in enumerate(entries):
        if not isinstance(entry, dict):
            raise ValueError(f"Staff entry #{position} must be an object")
        username = (entry.get("username") or "").strip()
        password_hash = (entry.get("password_hash") or "").strip().lower()
        if not username or not password_hash:
            raise ValueError(f"Staff entry #{position} needs username and password_hash")
        try:
            role = StaffRole(entry.get("role", StaffRole.STAFF))
        except ValueError as exc:
            raise ValueError(f"Staff entry {username!r} has unknown role") from exc
        accounts[username] = StaffAccount(
            username=username,
            password_hash=password_hash,
            role=role,
            disabled=bool(entry.get("disabled", False)),
        )
    if not accounts:
        raise ValueError("No staff accounts configured")
    return accounts


@dataclass(slots=True)
class AuthService:
    """Issue and check bearer tokens for back-office staff."""

    accounts: dict[str, StaffAccount]
    signing_key: str
    token_ttl: timedelta
    clock: Callable[[], datetime] = field(default=_utcnow)

    @classmethod
    def from_file(
        cls, path: Path, signing_key: str, token_ttl_hours: int
    ) -> "AuthService":
        if not signing_key:
            raise RuntimeError("JWT_SIGNING_KEY is not configured")
        return cls(
            accounts=load_staff_accounts(path),
            signing_key=signing_key,
            token_ttl=timedelta(hours=token_ttl_hours),
        )

    def authenticate(
        self, username: str, password: str, client_ip: str | None = None
    ) -> IssuedToken:
        account = self.accounts.get(username)
        if account is None or not account.accepts(password):
            logger.warning(
                "auth.login.rejected",
                username=username,
                client_ip=client_ip,
                disabled=bool(account and account.disabled),
            )
            raise InvalidCredentialsError("Invalid username or password")

        issued_at = self.clock()
        expires_in = int(self.token_ttl.total_seconds())
        claims = {
            "sub": account.username,
            "role": account.role.value,
            "iat": int(issued_at.timestamp()),
            "exp": int(issued_at.timestamp()) + expires_in,
        }
        token = jwt.encode(claims, self.signing_key, algorithm=TOKEN_ALGORITHM)
        logger.info(
            "auth.login.accepted",
            username=account.username,
            role=account.role.value,
            client_ip=client_ip,
        )
        return IssuedToken(
            access_token=token,
            expires_in=expires_in,
            username=account.username,
            role=account.role,
        )

    def validate_token(
        self, token: str, allowed_roles: Collection[str] = DESK_ROLES
    ) -> dict[str, Any]:
        """Return the token claims or raise an :class:`AuthError`."""
        try:
            claims: dict[str, Any] = jwt.decode(
                token,
                self.signing_key,
                algorithms=[TOKEN_ALGORITHM],
                options={"require": ["exp", "iat", "sub", "role"]},
            )
        except jwt.ExpiredSignatureError as exc:
            raise TokenExpiredError("Token expired") from exc
        except jwt.InvalidTokenError as exc:
            raise InvalidTokenError("Invalid token") from exc

        if claims["role"] not in allowed_roles:
            logger.warning("auth.token.role_rejected", username=claims["sub"], role=claims["role"])
            raise RoleNotAllowedError(claims["role"])
        return claims


__all__ = [
    "AuthError",
    "AuthService",
    "DESK_ROLES",
    "InvalidCredentialsError",
    "InvalidTokenError",
    "IssuedToken",
    "RoleNotAllowedError",
    "StaffAccount",
    "StaffRole",
    "TokenExpiredError",
    "hash_password",
    "load_staff_accounts",
]
