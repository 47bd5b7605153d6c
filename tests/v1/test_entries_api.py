# tests/v1/test_entries_api.py
"""Tests for chili entry endpoints."""

from datetime import datetime

from fastapi import status

from chili_cookoff.core.settings import settings
from chili_cookoff.services.entry_codes import is_valid_entry_code

FORMS_HEADERS = {"X-API-Key": "forms-test-key"}

SUBMISSION = {
    "name": "Five Alarm Red",
    "contestantName": "Robin Diaz",
    "recipe": "Brown the beef, add everything else, wait.",
    "ingredients": "beef, ancho, cumin",
    "allergens": "none",
    "spiceLevel": 5,
    "description": "Not for the faint of heart",
}


def test_list_entries(client, make_entry) -> None:
    make_entry("Mild", average_rating=2.0, vote_count=1, total_score=2)
    make_entry("Hot", average_rating=4.0, vote_count=1, total_score=4)

    response = client.get("/api/v1/entries/")

    assert response.status_code == status.HTTP_200_OK
    body = response.json()
    assert [entry["name"] for entry in body] == ["Hot", "Mild"]
    assert "entry_code" not in body[0]


def test_get_entry(client, texas_red) -> None:
    response = client.get(f"/api/v1/entries/{texas_red.id}")

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["name"] == "Texas Red"


def test_get_nonexistent_entry(client) -> None:
    assert client.get("/api/v1/entries/missing").status_code == status.HTTP_404_NOT_FOUND


def test_submission_webhook_creates_entry(client) -> None:
    response = client.post("/api/v1/entries/submission", json=SUBMISSION, headers=FORMS_HEADERS)

    assert response.status_code == status.HTTP_201_CREATED
    body = response.json()
    assert is_valid_entry_code(body["entry_code"])
    assert body["ingredients"] == ["beef", "ancho", "cumin"]
    assert body["vote_count"] == 0
    assert body["average_rating"] == 0.0


def test_submission_webhook_requires_api_key(client) -> None:
    response = client.post(
        "/api/v1/entries/submission", json=SUBMISSION, headers={"X-API-Key": "wrong"}
    )
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert client.post("/api/v1/entries/submission", json=SUBMISSION).status_code == 401


def test_submission_webhook_validates_payload(client) -> None:
    payload = {**SUBMISSION, "name": "<script>x</script>"}
    response = client.post("/api/v1/entries/submission", json=payload, headers=FORMS_HEADERS)
    assert response.status_code == 422


def test_lookup_by_code_accepts_sloppy_input(client, make_entry) -> None:
    entry = make_entry("Verde", entry_code="CHILI-7X2M")

    response = client.get("/api/v1/entries/code/chili 7x2m")

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["id"] == entry.id
    assert response.json()["entry_code"] == "CHILI-7X2M"


def test_lookup_by_code_errors(client) -> None:
    assert client.get("/api/v1/entries/code/CHILI-0000").status_code == 400
    assert client.get("/api/v1/entries/code/CHILI-9999").status_code == 404


def test_update_by_code(client, make_entry) -> None:
    make_entry("Verde", entry_code="CHILI-7X2M")

    response = client.patch(
        "/api/v1/entries/code/CHILI-7X2M",
        json={"description": "Tomatillo based", "spiceLevel": 2},
    )

    assert response.status_code == status.HTTP_200_OK
    body = response.json()
    assert body["description"] == "Tomatillo based"
    assert body["spice_level"] == 2
    assert body["name"] == "Verde"


def test_update_after_deadline_is_forbidden(client, make_entry, monkeypatch) -> None:
    make_entry("Verde", entry_code="CHILI-7X2M")
    monkeypatch.setattr(settings, "event_date", datetime(2000, 1, 1))

    response = client.patch("/api/v1/entries/code/CHILI-7X2M", json={"spiceLevel": 2})

    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_delete_entry_requires_admin(client, texas_red) -> None:
    response = client.delete(f"/api/v1/entries/{texas_red.id}")
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_delete_entry_removes_its_votes(client, texas_red, vote_payload, admin_headers) -> None:
    client.post("/api/v1/votes/", json=vote_payload(texas_red.id))

    response = client.delete(f"/api/v1/entries/{texas_red.id}", headers=admin_headers)

    assert response.status_code == status.HTTP_204_NO_CONTENT
    assert client.get(f"/api/v1/entries/{texas_red.id}").status_code == 404
    assert client.get("/api/v1/votes/stats").json()["total_votes"] == 0


def test_bulk_delete(client, make_entry, admin_headers) -> None:
    ids = [make_entry("One").id, make_entry("Two").id]
    make_entry("Three")

    response = client.post("/api/v1/entries/bulk-delete", json={"ids": ids}, headers=admin_headers)

    assert response.json() == {"deleted": 2}
    assert [entry["name"] for entry in client.get("/api/v1/entries/").json()] == ["Three"]


def test_bulk_delete_needs_ids(client, admin_headers) -> None:
    response = client.post("/api/v1/entries/bulk-delete", json={"ids": []}, headers=admin_headers)
    assert response.status_code == 422


def test_delete_test_entries(client, make_entry, admin_headers) -> None:
    make_entry("Test Entry A")
    make_entry("Real Entry")

    response = client.delete("/api/v1/entries/test-entries", headers=admin_headers)

    assert response.json() == {"deleted": 1}
