# src/chili_cookoff/services/__init__.py
"""Business logic services for the chili cook-off application."""

from chili_cookoff.core.context import AuthContext, IdentityBundle
from .recorder import VoteOutcome, VoteRecorder
from .stats import EntryStats, StatsMaintainer
from .validator import ValidationResult, VoteValidator
from .vote_store import SqlAlchemyVoteStore, VoteStore

__all__ = [
    "AuthContext", "IdentityBundle",
    "VoteOutcome", "VoteRecorder",
    "EntryStats", "StatsMaintainer",
    "ValidationResult", "VoteValidator",
    "SqlAlchemyVoteStore", "VoteStore",
]
