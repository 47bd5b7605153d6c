# src/chili_cookoff/main.py
"""Main entry point for the chili cook-off voting API."""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware

from chili_cookoff.api.v1 import admin_router, entries_router, votes_router
from chili_cookoff.core.logging import configure_logging
from chili_cookoff.core.settings import settings
from chili_cookoff.db.session import create_tables

configure_logging()

# Initialize FastAPI app
app = FastAPI(
    title="Chili Cook-off API",
    description="Anonymous star-rating votes and live leaderboard for a chili cook-off",
    version=settings.app_version,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)

# Add GZip middleware for compression
app.add_middleware(GZipMiddleware)

# Include API routers
app.include_router(entries_router, prefix="/api/v1")
app.include_router(votes_router, prefix="/api/v1")
app.include_router(admin_router, prefix="/api/v1")


@app.on_event("startup")
async def on_startup() -> None:
    create_tables()


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint to verify the service is running."""
    return {"status": "ok"}


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint with basic information about the API."""
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "description": "Anonymous chili cook-off voting API",
        "docs": "/docs",
        "redoc": "/redoc",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("chili_cookoff.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
