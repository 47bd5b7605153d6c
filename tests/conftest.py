# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Callable, Generator, Iterator
from datetime import datetime
from itertools import count
from typing import Any

import pytest

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("ADMIN_PASSWORD", "chili-admin")
os.environ.setdefault("GOOGLE_FORMS_API_KEY", "forms-test-key")

from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from chili_cookoff.core.errors import VoteStoreError
from chili_cookoff.db.session import Base
from chili_cookoff.db.session import get_db as app_get_session
from chili_cookoff.db.time import utcnow
from chili_cookoff.main import app as fastapi_app
from chili_cookoff.models import ChiliEntry, Vote
from chili_cookoff.schemas.vote import VoteSubmission
from chili_cookoff.services.admin_auth import get_admin_session_service

TEST_DB_URL = "sqlite://"

_ENTRY_CODE_COUNTER = count(1)


@pytest.fixture()
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    SessionLocal = sessionmaker(
        bind=engine,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
    )
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture(autouse=True)
def override_session_dependency(app: FastAPI, db_session: Session) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[app_get_session] = _get_session_override
    try:
        yield
    finally:
        app.dependency_overrides.pop(app_get_session, None)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture()
def make_entry(db_session: Session) -> Callable[..., ChiliEntry]:
    """Return a factory persisting chili entries with zeroed aggregates."""

    def _make_entry(name: str = "Texas Red", **fields: Any) -> ChiliEntry:
        values: dict[str, Any] = {
            "name": name,
            "contestant_name": "Pat Smith",
            "spice_level": 3,
            "entry_code": f"CHILI-{next(_ENTRY_CODE_COUNTER):04d}".replace("0", "A"),
        }
        values.update(fields)
        entry = ChiliEntry(**values)
        db_session.add(entry)
        db_session.commit()
        db_session.refresh(entry)
        return entry

    return _make_entry


@pytest.fixture()
def texas_red(make_entry: Callable[..., ChiliEntry]) -> ChiliEntry:
    return make_entry("Texas Red")


@pytest.fixture()
def submission_factory() -> Callable[..., VoteSubmission]:
    """Return a factory for valid vote submissions."""

    def _build(
        entry_id: str,
        *,
        session_id: str = "S1",
        fingerprint: str | None = None,
        ip_address: str | None = None,
        overall: int = 5,
        comments: str | None = None,
    ) -> VoteSubmission:
        return VoteSubmission(
            entry_id=entry_id,
            overall_rating=overall,
            category_ratings={
                "taste": 4,
                "presentation": 3,
                "creativity": 4,
                "spice_balance": 5,
            },
            comments=comments,
            session_id=session_id,
            device_fingerprint=fingerprint,
            ip_address=ip_address,
        )

    return _build


@pytest.fixture()
def vote_payload() -> Callable[..., dict[str, Any]]:
    """Return a factory for JSON vote bodies as the web frontend sends them."""

    def _payload(entry_id: str, **overrides: Any) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "entryId": entry_id,
            "overallRating": 5,
            "categoryRatings": {
                "taste": 5,
                "presentation": 4,
                "creativity": 4,
                "spiceBalance": 3,
            },
            "comments": "Great heat",
            "sessionId": "session_1_abc",
            "deviceFingerprint": "fp-one",
        }
        payload.update(overrides)
        return payload

    return _payload


@pytest.fixture()
def admin_token() -> str:
    """Return a fresh privileged session token."""
    return get_admin_session_service().create_session().token


@pytest.fixture()
def admin_headers(admin_token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {admin_token}"}


class InMemoryVoteStore:
    """VoteStore fake recording calls, with switchable failures."""

    def __init__(self) -> None:
        self.votes: list[dict[str, Any]] = []
        self.entry_stats: dict[str, dict[str, Any]] = {}
        self.calls: list[str] = []
        self.fail_reads = False
        self.fail_insert = False
        self.fail_stats = False

    def _read(self, name: str) -> None:
        self.calls.append(name)
        if self.fail_reads:
            raise VoteStoreError(f"{name} failed")

    def insert_vote(self, values: dict[str, Any]) -> Vote:
        self.calls.append("insert_vote")
        if self.fail_insert:
            raise VoteStoreError("insert_vote failed")
        row = {"created_at": utcnow(), **values, "id": len(self.votes) + 1}
        self.votes.append(row)
        return Vote(**row)

    def session_vote_exists(self, entry_id: str, session_id: str) -> bool:
        self._read("session_vote_exists")
        return any(v["chili_id"] == entry_id and v["session_id"] == session_id for v in self.votes)

    def fingerprint_vote_exists(self, entry_id: str, device_fingerprint: str) -> bool:
        self._read("fingerprint_vote_exists")
        return any(
            v["chili_id"] == entry_id and v["device_fingerprint"] == device_fingerprint
            for v in self.votes
        )

    def recent_ip_vote_exists(self, entry_id: str, ip_address: str, since: datetime) -> bool:
        self._read("recent_ip_vote_exists")
        return any(
            v["chili_id"] == entry_id and v["ip_address"] == ip_address and v["created_at"] >= since
            for v in self.votes
        )

    def overall_ratings(self, entry_id: str) -> list[int]:
        self.calls.append("overall_ratings")
        if self.fail_stats:
            raise VoteStoreError("overall_ratings failed")
        return [v["overall_rating"] for v in self.votes if v["chili_id"] == entry_id]

    def update_entry_stats(
        self, entry_id: str, *, vote_count: int, total_score: int, average_rating: float
    ) -> None:
        self.calls.append("update_entry_stats")
        self.entry_stats[entry_id] = {
            "vote_count": vote_count,
            "total_score": total_score,
            "average_rating": average_rating,
        }


@pytest.fixture()
def fake_store() -> InMemoryVoteStore:
    return InMemoryVoteStore()
