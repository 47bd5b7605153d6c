"""Version 1 API endpoints."""

from .endpoints import admin_router, entries_router, votes_router

__all__ = [
    "admin_router",
    "entries_router",
    "votes_router",
]
