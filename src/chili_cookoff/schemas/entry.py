# src/chili_cookoff/schemas/entry.py
"""Chili entry Pydantic schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator
from pydantic.alias_generators import to_camel

from .common import clean_optional_text, contains_malicious_content


def split_list(value: str | None) -> list[str]:
    """Split a comma-separated form field into trimmed, non-empty items."""
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


class EntryResponse(BaseModel):
    """Schema for chili entry information returned by the API."""

    id: str
    name: str
    contestant_name: str
    recipe: str | None
    ingredients: list[str]
    allergens: list[str]
    spice_level: int
    description: str | None
    vote_count: int
    total_score: int
    average_rating: float
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class EntryWithCodeResponse(EntryResponse):
    """Entry view that includes the private entry code."""

    entry_code: str | None


class _EntryText(BaseModel):
    """Free-text fields shared by entry submission and update."""

    recipe: str | None = Field(None, max_length=5000)
    ingredients: str | None = Field(None, max_length=2000)
    allergens: str | None = Field(None, max_length=500)
    description: str | None = Field(None, max_length=1000)

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    @field_validator("recipe", "ingredients", "allergens", "description")
    @classmethod
    def _check_text(cls, value: str | None, info: ValidationInfo) -> str | None:
        return clean_optional_text(value, field=info.field_name)


class ChiliSubmission(_EntryText):
    """Entry payload posted by the Google Forms webhook."""

    name: str = Field(..., min_length=3, max_length=100)
    contestant_name: str = Field(..., min_length=2, max_length=100)
    spice_level: int = Field(3, ge=1, le=5)

    @field_validator("name", "contestant_name")
    @classmethod
    def _check_names(cls, value: str) -> str:
        value = value.strip()
        if contains_malicious_content(value):
            raise ValueError("Invalid characters detected")
        return value


class EntryUpdate(_EntryText):
    """Partial update an entrant may apply using their entry code."""

    name: str | None = Field(None, min_length=3, max_length=100)
    spice_level: int | None = Field(None, ge=1, le=5)

    @field_validator("name")
    @classmethod
    def _check_name(cls, value: str | None) -> str | None:
        if value is None:
            return None
        value = value.strip()
        if not value:
            raise ValueError("Chili name is required")
        if contains_malicious_content(value):
            raise ValueError("Invalid characters detected")
        return value


class BulkDeleteRequest(BaseModel):
    """Identifiers of entries to delete in one operation."""

    ids: list[str] = Field(..., min_length=1)


class DeleteResponse(BaseModel):
    """Number of entries removed."""

    deleted: int
