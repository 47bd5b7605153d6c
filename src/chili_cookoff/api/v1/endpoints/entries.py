# src/chili_cookoff/api/v1/endpoints/entries.py
"""Chili entry endpoints: leaderboard, webhook intake and admin management."""

import hmac
import logging
from typing import Annotated

from fastapi import APIRouter, Header, HTTPException, status

from chili_cookoff.core.errors import EntryCodeGenerationError, EntryNotFoundError
from chili_cookoff.core.settings import settings
from chili_cookoff.models import ChiliEntry
from chili_cookoff.schemas.entry import (
    BulkDeleteRequest,
    ChiliSubmission,
    DeleteResponse,
    EntryResponse,
    EntryUpdate,
    EntryWithCodeResponse,
)
from chili_cookoff.services.entries import EntryService
from chili_cookoff.services.entry_codes import format_entry_code, is_valid_entry_code

from ..dependencies import AdminTokenDep, EntryServiceDep

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/entries", tags=["entries"])


def _verify_api_key(api_key: str | None) -> None:
    expected = settings.google_forms_api_key
    if not expected:
        logger.error("GOOGLE_FORMS_API_KEY not configured")
    if not expected or api_key is None or not hmac.compare_digest(api_key, expected):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized - Invalid API key",
        )


def _normalized_code(entry_code: str) -> str:
    code = format_entry_code(entry_code)
    if not is_valid_entry_code(code):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid entry code format",
        )
    return code


def _entry_or_404(entries: EntryService, entry_id: str) -> ChiliEntry:
    try:
        return entries.get_entry(entry_id)
    except EntryNotFoundError as err:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Chili entry not found"
        ) from err


@router.get("/", response_model=list[EntryResponse])
async def list_entries(entries: EntryServiceDep) -> list[ChiliEntry]:
    """Leaderboard: all entries, highest average rating first."""
    return entries.list_entries()


@router.post(
    "/submission",
    status_code=status.HTTP_201_CREATED,
    response_model=EntryWithCodeResponse,
)
async def receive_submission(
    submission: ChiliSubmission,
    entries: EntryServiceDep,
    x_api_key: Annotated[str | None, Header()] = None,
) -> ChiliEntry:
    """Create an entry from the Google Forms webhook."""
    _verify_api_key(x_api_key)
    try:
        return entries.create_entry(submission)
    except EntryCodeGenerationError as err:
        logger.error("Failed to generate unique entry code after maximum attempts")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(err),
        ) from err


@router.get("/code/{entry_code}", response_model=EntryWithCodeResponse)
async def get_entry_by_code(entry_code: str, entries: EntryServiceDep) -> ChiliEntry:
    """Look up an entry by its entrant code."""
    try:
        return entries.get_by_code(_normalized_code(entry_code))
    except EntryNotFoundError as err:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Entry not found with this code"
        ) from err


@router.patch("/code/{entry_code}", response_model=EntryWithCodeResponse)
async def update_entry_by_code(
    entry_code: str,
    changes: EntryUpdate,
    entries: EntryServiceDep,
) -> ChiliEntry:
    """Let an entrant edit their entry until the event starts."""
    code = _normalized_code(entry_code)
    if not entries.updates_allowed():
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Update deadline has passed. Entry details can no longer be modified.",
        )
    try:
        return entries.update_by_code(code, changes)
    except EntryNotFoundError as err:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Entry not found with this code"
        ) from err


@router.post("/bulk-delete", response_model=DeleteResponse)
async def bulk_delete_entries(
    payload: BulkDeleteRequest,
    entries: EntryServiceDep,
    _admin: AdminTokenDep,
) -> DeleteResponse:
    """Delete several entries (and their votes)."""
    return DeleteResponse(deleted=entries.bulk_delete(payload.ids))


@router.delete("/test-entries", response_model=DeleteResponse)
async def delete_test_entries(entries: EntryServiceDep, _admin: AdminTokenDep) -> DeleteResponse:
    """Delete every entry whose name starts with "Test"."""
    return DeleteResponse(deleted=entries.delete_test_entries())


@router.get("/{entry_id}", response_model=EntryResponse)
async def get_entry(entry_id: str, entries: EntryServiceDep) -> ChiliEntry:
    return _entry_or_404(entries, entry_id)


@router.delete("/{entry_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_entry(entry_id: str, entries: EntryServiceDep, _admin: AdminTokenDep) -> None:
    """Delete one entry and all votes cast for it."""
    _entry_or_404(entries, entry_id)
    entries.delete_entry(entry_id)
