"""HTTP client for submitting votes to the cook-off API."""

from __future__ import annotations

import logging
from threading import Lock
from typing import Any

import httpx

from chili_cookoff.client.identity import IdentityProvider
from chili_cookoff.core.errors import ChiliCookoffError
from chili_cookoff.schemas.vote import VoteResult

logger = logging.getLogger(__name__)

HTTP_CREATED = 201
HTTP_CONFLICT = 409

ALREADY_VOTED = "You have already voted for this chili"
SUBMISSION_IN_PROGRESS = "Your vote for this chili is still being submitted"


class VotingClientError(ChiliCookoffError):
    """Raised when the API fails a submission for a reason other than a duplicate."""


class VotingClient:
    """Builds vote submissions from a client identity and posts them."""

    def __init__(
        self,
        identity: IdentityProvider,
        *,
        base_url: str = "http://localhost:8000",
        http_client: httpx.Client | None = None,
        admin_token: str | None = None,
        timeout: float = 10.0,
    ) -> None:
        self.identity = identity
        self.admin_token = admin_token
        self._http = http_client or httpx.Client(base_url=base_url, timeout=timeout)
        self._in_flight: set[str] = set()
        self._lock = Lock()

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> VotingClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def submit_vote(
        self,
        entry_id: str,
        *,
        overall: int,
        taste: int,
        presentation: int,
        creativity: int,
        spice_balance: int,
        comments: str | None = None,
    ) -> VoteResult:
        """Submit one vote; returns the server's decision.

        Raises:
            VotingClientError: If the server could not process the submission.
        """
        if self.admin_token is None and self.identity.has_voted(entry_id):
            return VoteResult(accepted=False, reason=ALREADY_VOTED)

        with self._lock:
            if entry_id in self._in_flight:
                return VoteResult(accepted=False, reason=SUBMISSION_IN_PROGRESS)
            self._in_flight.add(entry_id)

        try:
            result = self._post(
                {
                    "entry_id": entry_id,
                    "overall_rating": overall,
                    "category_ratings": {
                        "taste": taste,
                        "presentation": presentation,
                        "creativity": creativity,
                        "spice_balance": spice_balance,
                    },
                    "comments": comments,
                    "session_id": self.identity.get_session_id(),
                    "device_fingerprint": self.identity.get_device_fingerprint(),
                }
            )
        finally:
            with self._lock:
                self._in_flight.discard(entry_id)

        if result.accepted:
            self.identity.mark_voted(entry_id)
        return result

    def _post(self, payload: dict[str, Any]) -> VoteResult:
        headers = {}
        if self.admin_token:
            headers["Authorization"] = f"Bearer {self.admin_token}"
        try:
            response = self._http.post("/api/v1/votes/", json=payload, headers=headers)
        except httpx.HTTPError as exc:
            logger.warning("Vote submission failed: %s", exc)
            raise VotingClientError("Failed to submit vote") from exc

        if response.status_code in (HTTP_CREATED, HTTP_CONFLICT):
            return VoteResult.model_validate(response.json())

        try:
            body = response.json()
        except ValueError:
            body = None
        detail = body.get("detail") if isinstance(body, dict) else None
        logger.warning("Vote submission returned %s: %s", response.status_code, detail)
        raise VotingClientError(detail if isinstance(detail, str) else "Failed to submit vote")
