# src/chili_cookoff/api/v1/endpoints/admin.py
"""Admin session endpoints."""

import logging

from fastapi import APIRouter, HTTPException, status

from chili_cookoff.schemas.admin import AdminLoginRequest, AdminLoginResponse, AdminSessionInfo

from ..dependencies import AdminServiceDep, AdminTokenDep, BearerTokenDep

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"])


@router.post("/login", response_model=AdminLoginResponse)
async def login(credentials: AdminLoginRequest, admin_service: AdminServiceDep) -> AdminLoginResponse:
    """Exchange the admin password for a session token."""
    if not admin_service.verify_password(credentials.password):
        logger.warning("Rejected admin login attempt")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid admin password",
        )
    session = admin_service.create_session()
    return AdminLoginResponse(access_token=session.token, expires_at=session.expires_at)


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(token: AdminTokenDep, admin_service: AdminServiceDep) -> None:
    """Invalidate the current admin session."""
    admin_service.clear_session(token)


@router.get("/session", response_model=AdminSessionInfo)
async def session_info(token: BearerTokenDep, admin_service: AdminServiceDep) -> AdminSessionInfo:
    """Report whether the caller holds a valid admin session."""
    session = admin_service.session_info(token)
    if session is None:
        return AdminSessionInfo(authenticated=False)
    return AdminSessionInfo(authenticated=True, expires_at=session.expires_at)
