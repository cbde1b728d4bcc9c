"""FastAPI dependencies guarding the back-office routes."""

from __future__ import annotations

from typing import Any

import structlog
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from .auth_service import (
    AuthService,
    InvalidTokenError,
    RoleNotAllowedError,
    TokenExpiredError,
)

bearer_scheme = HTTPBearer(auto_error=False)


def get_auth_service(request: Request) -> AuthService:
    try:
        return request.app.state.auth_service  # type: ignore[attr-defined]
    except AttributeError as exc:  # pragma: no cover - defensive path
        raise RuntimeError("AuthService is not configured") from exc


def _rejected(reason: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail={"status": "error", "failure_reason": reason},
        headers={"WWW-Authenticate": "Bearer"},
    )


async def require_staff_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    service: AuthService = Depends(get_auth_service),
) -> dict[str, Any]:
    """Return the claims of a valid token held by staff or an admin.

    Async so FastAPI awaits it on the request task: the structlog context var
    binding of the staff username then stays visible to the route and to
    every event it logs.
    """
    if credentials is None:
        raise _rejected("missing_token")

    try:
        claims = service.validate_token(credentials.credentials)
    except TokenExpiredError as exc:
        raise _rejected("token_expired") from exc
    except InvalidTokenError as exc:
        raise _rejected("invalid_token") from exc
    except RoleNotAllowedError as exc:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail={"status": "error", "failure_reason": "role_not_allowed"},
        ) from exc

    structlog.contextvars.bind_contextvars(staff_user=claims["sub"])
    return claims


__all__ = ["bearer_scheme", "get_auth_service", "require_staff_user"]
