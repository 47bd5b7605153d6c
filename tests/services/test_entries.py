# tests/services/test_entries.py
"""Tests for entry management outside the voting core."""

from datetime import UTC, datetime
from unittest.mock import patch

import pytest
from sqlalchemy import func, select

from chili_cookoff.core.errors import EntryCodeGenerationError, EntryNotFoundError
from chili_cookoff.core.settings import settings
from chili_cookoff.models import Vote
from chili_cookoff.schemas.entry import ChiliSubmission, EntryUpdate
from chili_cookoff.services.entries import EntryService
from chili_cookoff.services.entry_codes import is_valid_entry_code
from chili_cookoff.services.recorder import VoteRecorder
from chili_cookoff.services.validator import VoteValidator
from chili_cookoff.services.vote_store import SqlAlchemyVoteStore


@pytest.fixture()
def service(db_session):
    return EntryService(db_session)


def _vote_count(db_session) -> int:
    return db_session.scalar(select(func.count()).select_from(Vote))


def _cast(db_session, entry_id, session_id, submission_factory) -> None:
    store = SqlAlchemyVoteStore(db_session)
    VoteRecorder(store, VoteValidator(store)).submit_vote(
        submission_factory(entry_id, session_id=session_id, fingerprint=session_id)
    )


def test_create_entry_assigns_code_and_zero_stats(service) -> None:
    entry = service.create_entry(
        ChiliSubmission(
            name="  Smoky Brisket Chili ",
            contestant_name="Jordan",
            ingredients="brisket, chipotle , ,beans",
            allergens="",
            spice_level=4,
        )
    )

    assert entry.name == "Smoky Brisket Chili"
    assert entry.ingredients == ["brisket", "chipotle", "beans"]
    assert entry.allergens == []
    assert is_valid_entry_code(entry.entry_code)
    assert (entry.vote_count, entry.total_score, entry.average_rating) == (0, 0, 0.0)


def test_create_entry_gives_up_after_max_attempts(service, make_entry) -> None:
    make_entry("Taken", entry_code="CHILI-AAAA")
    with (
        patch("chili_cookoff.services.entries.generate_entry_code", return_value="CHILI-AAAA"),
        pytest.raises(EntryCodeGenerationError),
    ):
        service.create_entry(ChiliSubmission(name="Another", contestant_name="Sam"))


def test_list_entries_is_a_leaderboard(service, make_entry) -> None:
    make_entry("Mild", average_rating=2.5, vote_count=2, total_score=5)
    make_entry("Hot", average_rating=4.5, vote_count=2, total_score=9)
    make_entry("New")

    assert [entry.name for entry in service.list_entries()] == ["Hot", "Mild", "New"]


def test_get_entry_raises_for_unknown_id(service) -> None:
    with pytest.raises(EntryNotFoundError):
        service.get_entry("missing")


def test_delete_entry_cascades_to_votes(service, db_session, make_entry, submission_factory) -> None:
    doomed, kept = make_entry("Doomed"), make_entry("Kept")
    _cast(db_session, doomed.id, "S1", submission_factory)
    _cast(db_session, doomed.id, "S2", submission_factory)
    _cast(db_session, kept.id, "S1", submission_factory)

    service.delete_entry(doomed.id)

    assert _vote_count(db_session) == 1
    with pytest.raises(EntryNotFoundError):
        service.get_entry(doomed.id)


def test_delete_test_entries(service, make_entry) -> None:
    make_entry("Test Chili 1")
    make_entry("test chili 2")
    make_entry("Championship Red")

    assert service.delete_test_entries() == 2
    assert [entry.name for entry in service.list_entries()] == ["Championship Red"]
    assert service.delete_test_entries() == 0


def test_bulk_delete_counts_existing_entries(service, make_entry) -> None:
    first, second = make_entry("One"), make_entry("Two")
    assert service.bulk_delete([first.id, second.id, "missing"]) == 2


def test_update_by_code_only_touches_provided_fields(service, make_entry) -> None:
    entry = make_entry("Old Name", recipe="Secret", entry_code="CHILI-BBBB", vote_count=3)

    updated = service.update_by_code(
        "CHILI-BBBB", EntryUpdate.model_validate({"name": "New Name", "spiceLevel": 5})
    )

    assert updated.id == entry.id
    assert updated.name == "New Name"
    assert updated.spice_level == 5
    assert updated.recipe == "Secret"
    assert updated.vote_count == 3


def test_updates_allowed_until_event_date(monkeypatch) -> None:
    monkeypatch.setattr(settings, "event_date", datetime(2026, 11, 1, 12, 0))
    assert EntryService.updates_allowed(datetime(2026, 11, 1, 11, 59, tzinfo=UTC)) is True
    assert EntryService.updates_allowed(datetime(2026, 11, 1, 12, 0, tzinfo=UTC)) is False


def test_has_voted_and_voting_stats(service, db_session, make_entry, submission_factory) -> None:
    first, _second = make_entry("One"), make_entry("Two")
    _cast(db_session, first.id, "S1", submission_factory)
    _cast(db_session, first.id, "S2", submission_factory)
    _cast(db_session, first.id, "S3", submission_factory)

    assert service.has_voted("S1", first.id) is True
    assert service.has_voted("S1", _second.id) is False
    stats = service.voting_stats()
    assert (stats.total_entries, stats.total_votes, stats.average_votes_per_entry) == (2, 3, 1.5)
