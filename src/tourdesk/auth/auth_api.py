"""Staff login and session endpoints."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Request, status
from pydantic import BaseModel

from .auth_dependencies import get_auth_service, require_staff_user
from .auth_service import AuthService, InvalidCredentialsError

router = APIRouter(prefix="/api", tags=["auth"])


class StaffLogin(BaseModel):
    username: str
    password: str


class StaffToken(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int
    username: str
    role: str


class StaffSession(BaseModel):
    username: str
    role: str
    expires_at: int


@router.post("/login", response_model=StaffToken)
def login(
    payload: StaffLogin,
    request: Request,
    service: AuthService = Depends(get_auth_service),
) -> StaffToken:
    """Exchange desk staff credentials for a bearer token."""
    client_ip = request.client.host if request.client else None
    try:
        issued = service.authenticate(
            username=payload.username.strip(),
            password=payload.password,
            client_ip=client_ip,
        )
    except InvalidCredentialsError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"status": "error", "failure_reason": "invalid_credentials"},
        ) from exc
    return StaffToken(
        access_token=issued.access_token,
        expires_in=issued.expires_in,
        username=issued.username,
        role=issued.role.value,
    )


@router.get("/session", response_model=StaffSession)
def current_session(staff: dict[str, Any] = Depends(require_staff_user)) -> StaffSession:
    return StaffSession(
        username=staff["sub"], role=staff["role"], expires_at=int(staff["exp"])
    )
