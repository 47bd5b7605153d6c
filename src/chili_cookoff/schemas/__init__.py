# src/chili_cookoff/schemas/__init__.py
"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .admin import AdminLoginRequest, AdminLoginResponse, AdminSessionInfo
from .entry import (
    BulkDeleteRequest,
    ChiliSubmission,
    DeleteResponse,
    EntryResponse,
    EntryUpdate,
    EntryWithCodeResponse,
)
from .vote import CategoryRatings, HasVotedResponse, VoteResult, VoteSubmission, VotingStats

__all__ = [
    "AdminLoginRequest", "AdminLoginResponse", "AdminSessionInfo",
    "BulkDeleteRequest", "ChiliSubmission", "DeleteResponse",
    "EntryResponse", "EntryUpdate", "EntryWithCodeResponse",
    "CategoryRatings", "HasVotedResponse", "VoteResult", "VoteSubmission", "VotingStats",
]
