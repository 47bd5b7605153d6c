"""Shared API dependencies for authentication and the voting core."""

from datetime import timedelta
from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from chili_cookoff.core.context import AuthContext
from chili_cookoff.core.settings import settings
from chili_cookoff.db.session import get_db
from chili_cookoff.services.admin_auth import AdminSessionService, get_admin_session_service
from chili_cookoff.services.entries import EntryService
from chili_cookoff.services.recorder import VoteRecorder
from chili_cookoff.services.validator import VoteValidator
from chili_cookoff.services.vote_store import SqlAlchemyVoteStore

# Bearer token is optional: anonymous voters never send one.
bearer_scheme = HTTPBearer(auto_error=False)

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]


def get_admin_service_dep() -> AdminSessionService:
    """Return the shared admin session service."""
    return get_admin_session_service()


AdminServiceDep = Annotated[AdminSessionService, Depends(get_admin_service_dep)]


def get_bearer_token(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
) -> str | None:
    """Return the raw bearer token, if one was sent."""
    if credentials is None:
        return None
    return credentials.credentials


BearerTokenDep = Annotated[str | None, Depends(get_bearer_token)]


def get_auth_context(token: BearerTokenDep, admin_service: AdminServiceDep) -> AuthContext:
    """Resolve the caller's privilege level; invalid tokens count as anonymous."""
    return admin_service.auth_context(token)


def require_admin(token: BearerTokenDep, admin_service: AdminServiceDep) -> str:
    """Ensure the request carries a valid admin session token.

    Returns:
        The validated token.

    Raises:
        HTTPException: If the token is missing, expired or revoked.
    """
    if token is None or not admin_service.is_authenticated(token):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Admin authentication required",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return token


AuthContextDep = Annotated[AuthContext, Depends(get_auth_context)]
AdminTokenDep = Annotated[str, Depends(require_admin)]


def client_ip(request: Request) -> str | None:
    """Return the address the vote came from.

    The socket peer is used unless ``TRUST_FORWARDED_FOR`` is set and the peer
    is one of ``TRUSTED_PROXIES``. In that case the last ``X-Forwarded-For``
    hop, the one appended by the proxy itself, is used; earlier hops are
    client-supplied and ignored.
    """
    peer = request.client.host if request.client is not None else None
    if settings.trust_forwarded_for and peer in settings.trusted_proxies:
        forwarded = request.headers.get("x-forwarded-for", "")
        hops = [hop.strip() for hop in forwarded.split(",") if hop.strip()]
        if hops:
            return hops[-1]
    return peer


def get_entry_service(db: SessionDep) -> EntryService:
    return EntryService(db)


def get_vote_recorder(db: SessionDep) -> VoteRecorder:
    """Build the voting core for one request."""
    store = SqlAlchemyVoteStore(db)
    validator = VoteValidator(
        store,
        fail_open=settings.vote_validation_fail_open,
        ip_window=timedelta(seconds=settings.ip_vote_window_seconds),
    )
    return VoteRecorder(store, validator)


EntryServiceDep = Annotated[EntryService, Depends(get_entry_service)]
VoteRecorderDep = Annotated[VoteRecorder, Depends(get_vote_recorder)]
