import pytest

from tests.conftest import add_medication, register


def test_add_and_list(auth_client):
    created = add_medication(auth_client, times=["20:00", "08:00"], instructions="  Take with food ")

    assert created["name"] == "Lisinopril"
    assert created["times"] == ["20:00", "08:00"]
    assert created["unit"] == "mg"
    assert created["end_date"] is None
    assert created["instructions"] == "Take with food"

    listed = auth_client.get("/api/v1/medications").json()
    assert [m["id"] for m in listed] == [created["id"]]

    one = auth_client.get(f"/api/v1/medications/{created['id']}")
    assert one.status_code == 200
    assert one.json()["times"] == ["20:00", "08:00"]


def test_start_date_defaults_to_today(auth_client):
    created = add_medication(auth_client, start_date=None)

    assert created["start_date"] == "2026-10-18"


def test_ongoing_clears_end_date(auth_client):
    created = add_medication(auth_client, end_date="2026-12-01", is_ongoing=True)

    assert created["end_date"] is None


def test_end_date_kept_when_not_ongoing(auth_client):
    created = add_medication(auth_client, end_date="2026-12-01", is_ongoing=False)

    assert created["end_date"] == "2026-12-01"


def test_end_before_default_start_is_rejected(auth_client):
    resp = auth_client.post(
        "/api/v1/medications",
        json={"name": "Amoxicillin", "dosage": 500, "times": ["08:00"], "end_date": "2026-10-01"},
    )

    assert resp.status_code == 400
    assert resp.json()["message"] == "End date cannot be before start date"


@pytest.mark.parametrize(
    "overrides",
    [
        {"name": "   "},
        {"dosage": 0},
        {"unit": "drops"},
        {"times": []},
        {"times": ["8:00"]},
        {"times": ["24:00"]},
        {"times": ["08:00", "08:00"]},
        {"start_date": "2026-10-10", "end_date": "2026-10-01", "is_ongoing": False},
    ],
)
def test_invalid_payloads(auth_client, overrides):
    payload = {"name": "Metformin", "dosage": 500, "unit": "mg", "times": ["08:00"]}
    payload.update(overrides)

    resp = auth_client.post("/api/v1/medications", json=payload)

    assert resp.status_code == 422
    assert resp.json()["success"] is False


def test_other_users_medication_is_not_found(auth_client):
    created = add_medication(auth_client)

    auth_client.cookies.clear()
    register(auth_client, email="mallory@example.com")

    assert auth_client.get(f"/api/v1/medications/{created['id']}").status_code == 404
    assert auth_client.get("/api/v1/medications").json() == []


def test_missing_medication(auth_client):
    assert auth_client.get("/api/v1/medications/999").status_code == 404
