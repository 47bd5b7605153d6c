# src/chili_cookoff/models/__init__.py
"""SQLAlchemy models for the chili cook-off application."""

from .entry import ChiliEntry
from .vote import Vote

__all__ = ["ChiliEntry", "Vote"]
