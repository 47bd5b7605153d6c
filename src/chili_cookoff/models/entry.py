# src/chili_cookoff/models/entry.py
"""SQLAlchemy model for chili entries and their vote aggregates."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import JSON, CheckConstraint, DateTime, Float, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from chili_cookoff.db.session import Base
from chili_cookoff.db.time import utcnow

if TYPE_CHECKING:
    from .vote import Vote


def _new_entry_id() -> str:
    return str(uuid.uuid4())


class ChiliEntry(Base):
    """A chili submitted to the cook-off.

    The aggregate columns are derived from the entry's votes and are only
    written by the statistics maintainer.
    """

    __tablename__ = "chili_entry"
    __table_args__ = (
        CheckConstraint("spice_level BETWEEN 1 AND 5", name="ck_chili_entry_spice_level"),
        CheckConstraint("vote_count >= 0", name="ck_chili_entry_vote_count"),
        CheckConstraint("total_score >= 0", name="ck_chili_entry_total_score"),
        Index("ix_chili_entry_average_rating", "average_rating"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_entry_id)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    contestant_name: Mapped[str] = mapped_column(Text, nullable=False)
    recipe: Mapped[str | None] = mapped_column(Text, nullable=True)
    ingredients: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    allergens: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    spice_level: Mapped[int] = mapped_column(Integer, nullable=False, default=3)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Format CHILI-XXXX; lets entrants edit their entry without an account.
    entry_code: Mapped[str | None] = mapped_column(String(10), nullable=True, unique=True)

    vote_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_score: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    average_rating: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    votes: Mapped[list[Vote]] = relationship(
        back_populates="entry",
        cascade="all, delete-orphan",
    )
