"""Persistence collaborator used by the voting core.

The validator, recorder and statistics maintainer only talk to storage
through the :class:`VoteStore` protocol. Every method raises
:class:`~chili_cookoff.core.errors.VoteStoreError` on infrastructure failure.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime
from typing import Any, Protocol, TypeVar

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from chili_cookoff.core.errors import VoteStoreError
from chili_cookoff.models import ChiliEntry, Vote

logger = logging.getLogger(__name__)

T = TypeVar("T")


class VoteStore(Protocol):
    """Read/write operations the voting core needs from storage."""

    def insert_vote(self, values: dict[str, Any]) -> Vote: ...

    def session_vote_exists(self, entry_id: str, session_id: str) -> bool: ...

    def fingerprint_vote_exists(self, entry_id: str, device_fingerprint: str) -> bool: ...

    def recent_ip_vote_exists(self, entry_id: str, ip_address: str, since: datetime) -> bool: ...

    def overall_ratings(self, entry_id: str) -> list[int]: ...

    def update_entry_stats(
        self, entry_id: str, *, vote_count: int, total_score: int, average_rating: float
    ) -> None: ...


class SqlAlchemyVoteStore:
    """VoteStore backed by a SQLAlchemy session."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def _run(self, operation: str, fn: Callable[[], T]) -> T:
        try:
            return fn()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.debug("Vote store operation %s failed: %s", operation, exc)
            raise VoteStoreError(f"{operation} failed") from exc

    def _exists(self, operation: str, *criteria: Any) -> bool:
        stmt = select(Vote.id).where(*criteria).limit(1)
        return self._run(operation, lambda: self.db.execute(stmt).first() is not None)

    def insert_vote(self, values: dict[str, Any]) -> Vote:
        """Insert and commit one vote row."""

        def _insert() -> Vote:
            vote = Vote(**values)
            self.db.add(vote)
            self.db.commit()
            return vote

        return self._run("insert_vote", _insert)

    def session_vote_exists(self, entry_id: str, session_id: str) -> bool:
        return self._exists(
            "session_vote_exists",
            Vote.chili_id == entry_id,
            Vote.session_id == session_id,
        )

    def fingerprint_vote_exists(self, entry_id: str, device_fingerprint: str) -> bool:
        return self._exists(
            "fingerprint_vote_exists",
            Vote.chili_id == entry_id,
            Vote.device_fingerprint == device_fingerprint,
        )

    def recent_ip_vote_exists(self, entry_id: str, ip_address: str, since: datetime) -> bool:
        return self._exists(
            "recent_ip_vote_exists",
            Vote.chili_id == entry_id,
            Vote.ip_address == ip_address,
            Vote.created_at >= since,
        )

    def overall_ratings(self, entry_id: str) -> list[int]:
        stmt = select(Vote.overall_rating).where(Vote.chili_id == entry_id)
        return self._run("overall_ratings", lambda: list(self.db.scalars(stmt)))

    def update_entry_stats(
        self, entry_id: str, *, vote_count: int, total_score: int, average_rating: float
    ) -> None:
        stmt = (
            update(ChiliEntry)
            .where(ChiliEntry.id == entry_id)
            .values(
                vote_count=vote_count,
                total_score=total_score,
                average_rating=average_rating,
            )
        )

        def _update() -> None:
            self.db.execute(stmt)
            self.db.commit()

        self._run("update_entry_stats", _update)

