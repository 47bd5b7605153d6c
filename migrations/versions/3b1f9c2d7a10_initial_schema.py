"""initial schema: chili entries and votes

Revision ID: 3b1f9c2d7a10
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from __future__ import annotations

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "3b1f9c2d7a10"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

RATING_COLUMNS = (
    "overall_rating",
    "taste_rating",
    "presentation_rating",
    "creativity_rating",
    "spice_balance_rating",
)


def upgrade() -> None:
    """Create entry and vote tables with duplicate-detection indexes."""
    op.create_table(
        "chili_entry",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("contestant_name", sa.Text(), nullable=False),
        sa.Column("recipe", sa.Text(), nullable=True),
        sa.Column("ingredients", sa.JSON(), nullable=False),
        sa.Column("allergens", sa.JSON(), nullable=False),
        sa.Column("spice_level", sa.Integer(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("entry_code", sa.String(length=10), nullable=True),
        sa.Column("vote_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("total_score", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("average_rating", sa.Float(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint("spice_level BETWEEN 1 AND 5", name="ck_chili_entry_spice_level"),
        sa.CheckConstraint("vote_count >= 0", name="ck_chili_entry_vote_count"),
        sa.CheckConstraint("total_score >= 0", name="ck_chili_entry_total_score"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("entry_code"),
    )
    op.create_index("ix_chili_entry_average_rating", "chili_entry", ["average_rating"])

    op.create_table(
        "vote",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("chili_id", sa.String(length=36), nullable=False),
        *(sa.Column(column, sa.SmallInteger(), nullable=False) for column in RATING_COLUMNS),
        sa.Column("comments", sa.Text(), nullable=True),
        sa.Column("session_id", sa.Text(), nullable=False),
        sa.Column("device_fingerprint", sa.Text(), nullable=True),
        sa.Column("ip_address", sa.String(length=45), nullable=True),
        sa.Column("bypassed", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        *(
            sa.CheckConstraint(f"{column} BETWEEN 1 AND 5", name=f"ck_vote_{column}")
            for column in RATING_COLUMNS
        ),
        sa.ForeignKeyConstraint(["chili_id"], ["chili_entry.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_vote_chili_id", "vote", ["chili_id"])
    op.create_index("ix_vote_fingerprint_chili", "vote", ["device_fingerprint", "chili_id"])
    op.create_index("ix_vote_ip_chili", "vote", ["ip_address", "chili_id"])
    op.create_index(
        "uq_vote_chili_session",
        "vote",
        ["chili_id", "session_id"],
        unique=True,
        sqlite_where=sa.text("bypassed = 0"),
        postgresql_where=sa.text("bypassed = false"),
    )


def downgrade() -> None:
    """Drop the voting schema."""
    op.drop_index("uq_vote_chili_session", table_name="vote")
    op.drop_index("ix_vote_ip_chili", table_name="vote")
    op.drop_index("ix_vote_fingerprint_chili", table_name="vote")
    op.drop_index("ix_vote_chili_id", table_name="vote")
    op.drop_table("vote")
    op.drop_index("ix_chili_entry_average_rating", table_name="chili_entry")
    op.drop_table("chili_entry")
