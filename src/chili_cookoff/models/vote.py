# src/chili_cookoff/models/vote.py
"""Models capturing star-rating votes on chili entries."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    SmallInteger,
    String,
    Text,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from chili_cookoff.db.session import Base
from chili_cookoff.db.time import utcnow

if TYPE_CHECKING:
    from .entry import ChiliEntry

RATING_COLUMNS = (
    "overall_rating",
    "taste_rating",
    "presentation_rating",
    "creativity_rating",
    "spice_balance_rating",
)


class Vote(Base):
    """One anonymous rating of one chili.

    Votes are never updated after insert. The identity columns are kept only
    for duplicate detection against later submissions.
    """

    __tablename__ = "vote"
    __table_args__ = (
        *(
            CheckConstraint(f"{column} BETWEEN 1 AND 5", name=f"ck_vote_{column}")
            for column in RATING_COLUMNS
        ),
        Index("ix_vote_chili_id", "chili_id"),
        Index("ix_vote_fingerprint_chili", "device_fingerprint", "chili_id"),
        Index("ix_vote_ip_chili", "ip_address", "chili_id"),
        # Backstop for the session check; privileged votes are exempt.
        Index(
            "uq_vote_chili_session",
            "chili_id",
            "session_id",
            unique=True,
            sqlite_where=text("bypassed = 0"),
            postgresql_where=text("bypassed = false"),
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    chili_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("chili_entry.id", ondelete="CASCADE"),
        nullable=False,
    )

    overall_rating: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    taste_rating: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    presentation_rating: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    creativity_rating: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    spice_balance_rating: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    comments: Mapped[str | None] = mapped_column(Text, nullable=True)

    session_id: Mapped[str] = mapped_column(Text, nullable=False)
    device_fingerprint: Mapped[str | None] = mapped_column(Text, nullable=True)
    ip_address: Mapped[str | None] = mapped_column(String(45), nullable=True)

    # Set when an operator cast the vote through the privileged bypass.
    bypassed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    entry: Mapped[ChiliEntry] = relationship(back_populates="votes")
