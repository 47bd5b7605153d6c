# src/chili_cookoff/schemas/admin.py
"""Admin session Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, Field


class AdminLoginRequest(BaseModel):
    """Password submitted at the admin login form."""

    password: str = Field(..., min_length=1)


class AdminLoginResponse(BaseModel):
    """Bearer token for a privileged session."""

    access_token: str
    token_type: str = "bearer"
    expires_at: datetime


class AdminSessionInfo(BaseModel):
    """State of the caller's privileged session."""

    authenticated: bool
    expires_at: datetime | None = None
