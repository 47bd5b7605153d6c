"""Explicit request context handed to the voting core."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class IdentityBundle:
    """Identity signals attached to a vote for duplicate detection."""

    session_id: str
    device_fingerprint: str | None = None
    ip_address: str | None = None


@dataclass(frozen=True)
class AuthContext:
    """Privilege level of the caller submitting a vote."""

    is_admin: bool = False


ANONYMOUS = AuthContext()
ADMIN = AuthContext(is_admin=True)
