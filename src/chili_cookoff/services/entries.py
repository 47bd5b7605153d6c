"""Entry management: leaderboard reads, webhook intake and admin deletions."""

from __future__ import annotations

import logging
from datetime import UTC, datetime

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from chili_cookoff.core.errors import EntryCodeGenerationError, EntryNotFoundError, VoteStoreError
from chili_cookoff.core.settings import settings
from chili_cookoff.db.time import utcnow
from chili_cookoff.models import ChiliEntry, Vote
from chili_cookoff.schemas.entry import ChiliSubmission, EntryUpdate, split_list
from chili_cookoff.schemas.vote import VotingStats
from chili_cookoff.services.entry_codes import generate_entry_code
from chili_cookoff.services.stats import round_rating
from chili_cookoff.services.vote_store import SqlAlchemyVoteStore

logger = logging.getLogger(__name__)

TEST_ENTRY_PREFIX = "Test"


class EntryService:
    """Entry reads and writes outside the voting core."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def list_entries(self) -> list[ChiliEntry]:
        """Return all entries, best rated first."""
        stmt = select(ChiliEntry).order_by(
            ChiliEntry.average_rating.desc(),
            ChiliEntry.vote_count.desc(),
            ChiliEntry.name,
        )
        return list(self.db.scalars(stmt))

    def get_entry(self, entry_id: str) -> ChiliEntry:
        entry = self.db.get(ChiliEntry, entry_id)
        if entry is None:
            raise EntryNotFoundError(entry_id)
        return entry

    def get_by_code(self, entry_code: str) -> ChiliEntry:
        entry = self.db.scalars(
            select(ChiliEntry).where(ChiliEntry.entry_code == entry_code)
        ).first()
        if entry is None:
            raise EntryNotFoundError(entry_code)
        return entry

    def _unique_entry_code(self) -> str:
        for _ in range(max(settings.entry_code_max_attempts, 1)):
            code = generate_entry_code()
            taken = self.db.scalar(
                select(func.count()).select_from(ChiliEntry).where(ChiliEntry.entry_code == code)
            )
            if not taken:
                return code
        raise EntryCodeGenerationError("Failed to generate unique entry code")

    def create_entry(self, submission: ChiliSubmission) -> ChiliEntry:
        """Create an entry with a fresh entry code and zeroed aggregates."""
        entry = ChiliEntry(
            name=submission.name,
            contestant_name=submission.contestant_name,
            recipe=submission.recipe,
            ingredients=split_list(submission.ingredients),
            allergens=split_list(submission.allergens),
            spice_level=submission.spice_level,
            description=submission.description,
            entry_code=self._unique_entry_code(),
            vote_count=0,
            total_score=0,
            average_rating=0.0,
        )
        self.db.add(entry)
        self.db.commit()
        self.db.refresh(entry)
        logger.info("Created entry %s (%s)", entry.id, entry.entry_code)
        return entry

    @staticmethod
    def updates_allowed(now: datetime | None = None) -> bool:
        """Return True while entrant edits are still accepted (before the event date)."""
        deadline = settings.event_date
        if deadline is None:
            return True
        if deadline.tzinfo is None:
            deadline = deadline.replace(tzinfo=UTC)
        return (now or utcnow()) < deadline

    def update_by_code(self, entry_code: str, changes: EntryUpdate) -> ChiliEntry:
        """Apply an entrant's edits. Aggregate fields are never touched here."""
        entry = self.get_by_code(entry_code)
        provided = changes.model_fields_set

        if "name" in provided and changes.name is not None:
            entry.name = changes.name
        if "recipe" in provided:
            entry.recipe = changes.recipe
        if "ingredients" in provided:
            entry.ingredients = split_list(changes.ingredients)
        if "allergens" in provided:
            entry.allergens = split_list(changes.allergens)
        if "spice_level" in provided and changes.spice_level is not None:
            entry.spice_level = changes.spice_level
        if "description" in provided:
            entry.description = changes.description

        self.db.commit()
        self.db.refresh(entry)
        return entry

    def delete_entry(self, entry_id: str) -> None:
        """Delete an entry together with its votes."""
        self.db.delete(self.get_entry(entry_id))
        self.db.commit()

    def bulk_delete(self, entry_ids: list[str]) -> int:
        entries = list(self.db.scalars(select(ChiliEntry).where(ChiliEntry.id.in_(entry_ids))))
        for entry in entries:
            self.db.delete(entry)
        self.db.commit()
        return len(entries)

    def delete_test_entries(self) -> int:
        """Delete every entry whose name starts with "Test"."""
        ids = list(
            self.db.scalars(
                select(ChiliEntry.id).where(ChiliEntry.name.ilike(f"{TEST_ENTRY_PREFIX}%"))
            )
        )
        if not ids:
            return 0
        return self.bulk_delete(ids)

    def has_voted(self, session_id: str, entry_id: str) -> bool:
        """Return True if the session already has a stored vote for the entry."""
        try:
            return SqlAlchemyVoteStore(self.db).session_vote_exists(entry_id, session_id)
        except VoteStoreError as exc:
            logger.warning("Error checking vote status for entry %s: %s", entry_id, exc)
            return False

    def voting_stats(self) -> VotingStats:
        total_entries = self.db.scalar(select(func.count()).select_from(ChiliEntry)) or 0
        total_votes = self.db.scalar(select(func.count()).select_from(Vote)) or 0
        return VotingStats(
            total_entries=total_entries,
            total_votes=total_votes,
            average_votes_per_entry=round_rating(total_votes, total_entries),
        )
