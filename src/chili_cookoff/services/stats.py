"""Recompute an entry's vote aggregates from its stored votes."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from chili_cookoff.services.vote_store import VoteStore

_ONE_DECIMAL = Decimal("0.1")


def round_rating(total: int, count: int) -> float:
    """Return ``total / count`` rounded half-up to one decimal, or 0.0 with no votes."""
    if count <= 0:
        return 0.0
    return float((Decimal(total) / Decimal(count)).quantize(_ONE_DECIMAL, rounding=ROUND_HALF_UP))


@dataclass(frozen=True)
class EntryStats:
    """Aggregate figures stored on an entry."""

    vote_count: int
    total_score: int
    average_rating: float

    @classmethod
    def from_ratings(cls, ratings: list[int]) -> EntryStats:
        total = sum(ratings)
        return cls(
            vote_count=len(ratings),
            total_score=total,
            average_rating=round_rating(total, len(ratings)),
        )


class StatsMaintainer:
    """Full re-aggregation of an entry's statistics.

    Aggregates are always rebuilt from every stored vote rather than
    incremented, so a failed update is repaired by the next successful one.
    """

    def __init__(self, store: VoteStore) -> None:
        self.store = store

    def recompute(self, entry_id: str) -> EntryStats:
        """Rebuild and persist the aggregates for ``entry_id``.

        Raises:
            VoteStoreError: If the ratings cannot be read or the entry cannot be updated.
        """
        stats = EntryStats.from_ratings(self.store.overall_ratings(entry_id))
        self.store.update_entry_stats(
            entry_id,
            vote_count=stats.vote_count,
            total_score=stats.total_score,
            average_rating=stats.average_rating,
        )
        return stats
