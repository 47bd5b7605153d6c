"""Ballot-stuffing checks applied before a vote is stored.

Checks run in a fixed order and stop at the first rejection:

1. session: the same browser session already rated this entry.
2. fingerprint: the same device already rated this entry (only when a
   fingerprint was supplied).
3. network: the same IP address rated this entry within a short window
   (only when an address was supplied).

Checks are never weighted or combined. A storage failure during a check
allows the vote when ``fail_open`` is set.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum

from chili_cookoff.core.context import IdentityBundle
from chili_cookoff.core.errors import VoteStoreError
from chili_cookoff.db.time import utcnow
from chili_cookoff.services.vote_store import VoteStore

logger = logging.getLogger(__name__)

DEFAULT_IP_WINDOW = timedelta(minutes=5)

SESSION_REJECTION = "You have already voted for this chili"
DEVICE_REJECTION = "This device has already voted for this chili"
NETWORK_REJECTION = "Multiple votes detected from this network. Please wait a few minutes."
UNAVAILABLE_REJECTION = "Voting is temporarily unavailable. Please try again in a few minutes."


class VoteCheck(str, Enum):
    """Name of the check that produced a decision."""

    SESSION = "session"
    FINGERPRINT = "fingerprint"
    NETWORK = "network"
    UNAVAILABLE = "unavailable"


@dataclass(frozen=True)
class ValidationResult:
    """Accept/reject decision with a voter-facing reason."""

    allowed: bool
    reason: str | None = None
    check: VoteCheck | None = None

    @classmethod
    def accept(cls) -> ValidationResult:
        return cls(allowed=True)

    @classmethod
    def reject(cls, check: VoteCheck, reason: str) -> ValidationResult:
        return cls(allowed=False, reason=reason, check=check)


class VoteValidator:
    """Decides whether an identity may vote for an entry."""

    def __init__(
        self,
        store: VoteStore,
        *,
        fail_open: bool = True,
        ip_window: timedelta = DEFAULT_IP_WINDOW,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self.store = store
        self.fail_open = fail_open
        self.ip_window = ip_window
        self.clock = clock

    def validate(self, entry_id: str, identity: IdentityBundle) -> ValidationResult:
        """Run the ordered checks for ``identity`` against stored votes for ``entry_id``."""
        try:
            result = self._run_checks(entry_id, identity)
        except VoteStoreError as exc:
            if self.fail_open:
                logger.warning(
                    "Duplicate-vote lookup failed for entry %s, allowing vote: %s",
                    entry_id,
                    exc,
                )
                return ValidationResult.accept()
            logger.warning(
                "Duplicate-vote lookup failed for entry %s, rejecting vote: %s",
                entry_id,
                exc,
            )
            return ValidationResult.reject(VoteCheck.UNAVAILABLE, UNAVAILABLE_REJECTION)

        if not result.allowed:
            logger.info("Vote for entry %s rejected by %s check", entry_id, result.check.value)
        return result

    def _run_checks(self, entry_id: str, identity: IdentityBundle) -> ValidationResult:
        if self.store.session_vote_exists(entry_id, identity.session_id):
            return ValidationResult.reject(VoteCheck.SESSION, SESSION_REJECTION)

        if identity.device_fingerprint and self.store.fingerprint_vote_exists(
            entry_id, identity.device_fingerprint
        ):
            return ValidationResult.reject(VoteCheck.FINGERPRINT, DEVICE_REJECTION)

        if identity.ip_address:
            since = self.clock() - self.ip_window
            if self.store.recent_ip_vote_exists(entry_id, identity.ip_address, since):
                return ValidationResult.reject(VoteCheck.NETWORK, NETWORK_REJECTION)

        return ValidationResult.accept()
