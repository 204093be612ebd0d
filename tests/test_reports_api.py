from tests.conftest import add_medication


def mark(client, medication_id, scheduled_time, day=None, status="taken"):
    body = {"medication_id": medication_id, "scheduled_time": scheduled_time}
    if day:
        body["date"] = day
    resp = client.post(f"/api/v1/doses/{status}", json=body)
    assert resp.status_code == 200, resp.text


def test_empty_account(auth_client):
    today = auth_client.get("/api/v1/reports/today").json()
    assert today["entries"] == []
    assert today["progress"] == 0
    assert today["all_taken"] is False

    series = auth_client.get("/api/v1/reports/adherence").json()
    assert [p["adherence"] for p in series] == [0] * 7

    assert auth_client.get("/api/v1/reports/streak").json() == {"streak": 0}


def test_todays_schedule(auth_client):
    med = add_medication(auth_client, times=["20:00", "08:00"])
    mark(auth_client, med["id"], "08:00")

    today = auth_client.get("/api/v1/reports/today").json()

    assert today["date"] == "2026-10-18"
    assert [(e["scheduled_time"], e["status"]) for e in today["entries"]] == [
        ("08:00", "taken"),
        ("20:00", "pending"),
    ]
    assert today["progress"] == 50
    assert today["entries"][0]["unit"] == "mg"


def test_adherence_series(auth_client):
    first = add_medication(auth_client, times=["08:00", "20:00"])
    second = add_medication(auth_client, name="Metformin", dosage=500, times=["09:00", "21:00"])
    mark(auth_client, first["id"], "08:00", "2026-10-15")
    mark(auth_client, second["id"], "21:00", "2026-10-15")
    mark(auth_client, second["id"], "09:00", "2026-10-15", status="missed")

    series = auth_client.get("/api/v1/reports/adherence").json()

    assert [p["label"] for p in series] == [
        "Oct 12", "Oct 13", "Oct 14", "Oct 15", "Oct 16", "Oct 17", "Oct 18",
    ]
    point = series[3]
    assert point["date"] == "2026-10-15"
    assert (point["taken"], point["scheduled"], point["adherence"]) == (2, 4, 50)


def test_streak(auth_client):
    med = add_medication(auth_client)
    mark(auth_client, med["id"], "08:00", "2026-10-17")
    mark(auth_client, med["id"], "08:00", "2026-10-16")
    mark(auth_client, med["id"], "08:00", "2026-10-14")

    assert auth_client.get("/api/v1/reports/streak").json() == {"streak": 2}


def test_summary(auth_client):
    med = add_medication(auth_client, times=["08:00"])
    mark(auth_client, med["id"], "08:00")
    mark(auth_client, med["id"], "08:00", "2026-10-17")

    summary = auth_client.get("/api/v1/reports/summary").json()

    assert summary["active_medications"] == 1
    assert summary["daily_doses"] == 1
    assert summary["streak"] == 2
    assert summary["today"]["all_taken"] is True
    assert len(summary["adherence"]) == 7
    # 2 taken of 7 scheduled
    assert summary["overall_adherence"] == 29
