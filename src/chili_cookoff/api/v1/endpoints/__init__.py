# src/chili_cookoff/api/v1/endpoints/__init__.py
"""API endpoint modules for version 1."""

from .admin import router as admin_router
from .entries import router as entries_router
from .votes import router as votes_router

__all__ = [
    "admin_router",
    "entries_router",
    "votes_router",
]
