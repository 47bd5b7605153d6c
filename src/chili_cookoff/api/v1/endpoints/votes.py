# src/chili_cookoff/api/v1/endpoints/votes.py
"""Vote-related endpoints for the chili cook-off API."""

from typing import Annotated

from fastapi import APIRouter, HTTPException, Query, Request, Response, status

from chili_cookoff.core.errors import EntryNotFoundError, VoteSubmissionError
from chili_cookoff.schemas.vote import HasVotedResponse, VoteResult, VoteSubmission, VotingStats

from ..dependencies import AuthContextDep, EntryServiceDep, VoteRecorderDep, client_ip

router = APIRouter(prefix="/votes", tags=["votes"])


@router.post(
    "/",
    status_code=status.HTTP_201_CREATED,
    response_model=VoteResult,
    response_model_exclude_none=True,
    responses={status.HTTP_409_CONFLICT: {"model": VoteResult}},
)
async def submit_vote(
    submission: VoteSubmission,
    request: Request,
    response: Response,
    auth: AuthContextDep,
    entries: EntryServiceDep,
    recorder: VoteRecorderDep,
) -> VoteResult:
    """Rate a chili. Duplicate votes are answered with 409 and a reason."""
    try:
        entries.get_entry(submission.entry_id)
    except EntryNotFoundError as err:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Chili entry not found"
        ) from err

    origin = client_ip(request)
    if origin:
        submission = submission.model_copy(update={"ip_address": origin})

    try:
        outcome = recorder.submit_vote(submission, auth)
    except VoteSubmissionError as err:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(err),
        ) from err

    if not outcome.accepted:
        response.status_code = status.HTTP_409_CONFLICT
    return outcome.to_result()


@router.get("/status", response_model=HasVotedResponse)
async def vote_status(
    session_id: Annotated[str, Query(min_length=1)],
    entry_id: Annotated[str, Query(min_length=1)],
    entries: EntryServiceDep,
) -> HasVotedResponse:
    """Report whether a session already voted for an entry."""
    return HasVotedResponse(has_voted=entries.has_voted(session_id, entry_id))


@router.get("/stats", response_model=VotingStats)
async def voting_stats(entries: EntryServiceDep) -> VotingStats:
    """Event-wide participation numbers."""
    return entries.voting_stats()
