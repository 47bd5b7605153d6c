"""Privileged operator sessions.

An authenticated admin may cast votes without any duplicate checks (for
corrections and seeding test data) and manage entries. Sessions are signed
JWTs that expire a fixed time after creation; logging out revokes the token
for the rest of its lifetime.
"""

from __future__ import annotations

import hmac
import logging
import secrets
import time
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from threading import Lock
from typing import Final

from jose import JWTError, jwt

from chili_cookoff.core.context import ADMIN, ANONYMOUS, AuthContext
from chili_cookoff.core.settings import settings

logger = logging.getLogger(__name__)

_ADMIN_SUBJECT: Final[str] = "admin"


@dataclass(frozen=True)
class AdminSession:
    """A privileged session token and its expiry."""

    token: str
    expires_at: datetime


class AdminSessionService:
    """Create, check and clear privileged sessions."""

    def __init__(
        self,
        *,
        secret_key: str | None = None,
        password: str | None = None,
        algorithm: str | None = None,
        session_duration: timedelta | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.secret_key = secret_key or settings.secret_key
        self.password = password if password is not None else settings.admin_password
        self.algorithm = algorithm or settings.jwt_algorithm
        self.session_duration = session_duration or timedelta(hours=settings.admin_session_hours)
        self.clock = clock
        self._revoked: dict[str, int] = {}
        self._lock = Lock()

    def verify_password(self, password: str) -> bool:
        """Return True if ``password`` matches the configured admin password."""
        if not self.password:
            logger.warning("Admin login attempted but ADMIN_PASSWORD is not configured")
            return False
        return hmac.compare_digest(password.encode("utf-8"), self.password.encode("utf-8"))

    def create_session(self) -> AdminSession:
        """Issue a new privileged session token."""
        issued = int(self.clock())
        expires = issued + int(self.session_duration.total_seconds())
        claims = {
            "sub": _ADMIN_SUBJECT,
            "iat": issued,
            "exp": expires,
            "jti": secrets.token_urlsafe(16),
        }
        token = jwt.encode(claims, self.secret_key, algorithm=self.algorithm)
        return AdminSession(token=token, expires_at=datetime.fromtimestamp(expires, UTC))

    def _claims(self, token: str | None) -> dict[str, object] | None:
        if not token:
            return None
        try:
            claims = jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
                options={"verify_exp": False},
            )
        except JWTError:
            return None

        if claims.get("sub") != _ADMIN_SUBJECT:
            return None
        expires = claims.get("exp")
        if not isinstance(expires, int) or expires <= self.clock():
            return None
        jti = claims.get("jti")
        with self._lock:
            self._purge_revoked()
            if jti in self._revoked:
                return None
        return claims

    def is_authenticated(self, token: str | None) -> bool:
        """Return True only for a valid, unexpired, not revoked session token."""
        return self._claims(token) is not None

    def auth_context(self, token: str | None) -> AuthContext:
        """Translate a (possibly missing) token into an explicit auth context."""
        return ADMIN if self.is_authenticated(token) else ANONYMOUS

    def session_info(self, token: str | None) -> AdminSession | None:
        """Return the session's expiry if it is still valid."""
        claims = self._claims(token)
        if claims is None or token is None:
            return None
        return AdminSession(
            token=token,
            expires_at=datetime.fromtimestamp(int(claims["exp"]), UTC),  # type: ignore[arg-type]
        )

    def clear_session(self, token: str | None) -> None:
        """Revoke a session token (logout). Unknown or invalid tokens are ignored."""
        claims = self._claims(token)
        if claims is None:
            return
        with self._lock:
            self._revoked[str(claims["jti"])] = int(claims["exp"])  # type: ignore[arg-type]

    def _purge_revoked(self) -> None:
        now = self.clock()
        for jti in [key for key, expiry in self._revoked.items() if expiry <= now]:
            self._revoked.pop(jti, None)


_ADMIN_SERVICE: AdminSessionService | None = None


def get_admin_session_service() -> AdminSessionService:
    """Return the process-wide admin session service."""
    global _ADMIN_SERVICE
    if _ADMIN_SERVICE is None:
        _ADMIN_SERVICE = AdminSessionService()
    return _ADMIN_SERVICE
