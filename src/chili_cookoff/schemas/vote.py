# src/chili_cookoff/schemas/vote.py
"""Vote-related Pydantic schemas."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from chili_cookoff.core.context import IdentityBundle

from .common import Rating, clean_optional_text

MAX_COMMENT_LENGTH = 500


class CategoryRatings(BaseModel):
    """Per-category star ratings accompanying the overall rating."""

    taste: Rating
    presentation: Rating
    creativity: Rating
    spice_balance: Rating

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class VoteSubmission(BaseModel):
    """Schema for a vote crossing into the voting core.

    Accepts both snake_case and camelCase keys. Ratings outside 1..5 fail
    here, before any duplicate checking happens.
    """

    entry_id: str = Field(..., min_length=1, description="Chili entry being rated")
    overall_rating: Rating
    category_ratings: CategoryRatings
    comments: str | None = Field(None, max_length=MAX_COMMENT_LENGTH)
    session_id: str = Field(..., min_length=1, description="Per-browser session token")
    device_fingerprint: str | None = Field(None, description="Per-device fingerprint")
    ip_address: str | None = Field(None, max_length=45, description="Origin network address")

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    @field_validator("comments")
    @classmethod
    def _check_comments(cls, value: str | None) -> str | None:
        return clean_optional_text(value, field="comments")

    @field_validator("device_fingerprint", "ip_address")
    @classmethod
    def _blank_to_none(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return value.strip() or None

    @property
    def identity(self) -> IdentityBundle:
        """Return the identity bundle attached to this submission."""
        return IdentityBundle(
            session_id=self.session_id,
            device_fingerprint=self.device_fingerprint,
            ip_address=self.ip_address,
        )


class VoteResult(BaseModel):
    """Outcome returned to the voter."""

    accepted: bool
    reason: str | None = None


class HasVotedResponse(BaseModel):
    """Whether a session already has a stored vote for an entry."""

    has_voted: bool


class VotingStats(BaseModel):
    """Event-wide participation figures."""

    total_entries: int
    total_votes: int
    average_votes_per_entry: float
