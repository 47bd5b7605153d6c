"""Vote submission: bypass gate, validation, insert, then statistics."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from chili_cookoff.core.context import ANONYMOUS, AuthContext
from chili_cookoff.core.errors import VoteStoreError, VoteSubmissionError
from chili_cookoff.schemas.vote import VoteResult, VoteSubmission
from chili_cookoff.services.stats import EntryStats, StatsMaintainer
from chili_cookoff.services.validator import ValidationResult, VoteValidator
from chili_cookoff.services.vote_store import VoteStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VoteOutcome:
    """Result of one submission attempt."""

    accepted: bool
    reason: str | None = None
    vote_id: int | None = None
    stats: EntryStats | None = None

    def to_result(self) -> VoteResult:
        return VoteResult(accepted=self.accepted, reason=self.reason)


class VoteRecorder:
    """Stores votes that pass validation and keeps entry aggregates current."""

    def __init__(
        self,
        store: VoteStore,
        validator: VoteValidator,
        stats: StatsMaintainer | None = None,
    ) -> None:
        self.store = store
        self.validator = validator
        self.stats = stats or StatsMaintainer(store)

    def submit_vote(self, submission: VoteSubmission, auth: AuthContext = ANONYMOUS) -> VoteOutcome:
        """Validate (unless bypassed), insert and re-aggregate.

        Returns a rejected outcome for duplicate votes; those are not errors.

        Raises:
            VoteSubmissionError: If the vote row could not be stored. No
                statistics update is attempted in that case.
        """
        if auth.is_admin:
            logger.info("Privileged vote for entry %s skips validation", submission.entry_id)
        else:
            decision: ValidationResult = self.validator.validate(
                submission.entry_id, submission.identity
            )
            if not decision.allowed:
                return VoteOutcome(accepted=False, reason=decision.reason)

        try:
            vote = self.store.insert_vote(_vote_values(submission, bypassed=auth.is_admin))
        except VoteStoreError as exc:
            logger.exception("Error submitting vote for entry %s", submission.entry_id)
            raise VoteSubmissionError() from exc

        stats: EntryStats | None = None
        try:
            stats = self.stats.recompute(submission.entry_id)
        except VoteStoreError:
            # The vote is durable; aggregates catch up on the next recompute.
            logger.exception("Error updating stats for entry %s", submission.entry_id)

        logger.info("Recorded vote %s for entry %s", vote.id, submission.entry_id)
        return VoteOutcome(accepted=True, vote_id=vote.id, stats=stats)


def _vote_values(submission: VoteSubmission, *, bypassed: bool) -> dict[str, object]:
    ratings = submission.category_ratings
    return {
        "chili_id": submission.entry_id,
        "session_id": submission.session_id,
        "device_fingerprint": submission.device_fingerprint,
        "ip_address": submission.ip_address,
        "overall_rating": submission.overall_rating,
        "taste_rating": ratings.taste,
        "presentation_rating": ratings.presentation,
        "creativity_rating": ratings.creativity,
        "spice_balance_rating": ratings.spice_balance,
        "comments": submission.comments,
        "bypassed": bypassed,
    }
