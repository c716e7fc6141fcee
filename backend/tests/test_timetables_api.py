from sqlalchemy import select

from app.db.seed import seed_demo_catalog
from app.models.timeslot import Timeslot

FAST_CONFIG = {"populationSize": 20, "maxGenerations": 10, "randomSeed": 42, "evaluationWorkers": 1}


def generate(client, **overrides):
    payload = {
        "academicYear": "2026-2027",
        "semester": 3,
        "department": "CSE",
        "config": FAST_CONFIG,
        **overrides,
    }
    return client.post("/api/timetables/generate", json=payload)


def test_generate_and_fetch_timetable(client, db_session):
    seed_demo_catalog(db_session)

    response = generate(client)

    assert response.status_code == 201
    body = response.json()
    assert set(body) == {"timetableId", "generation", "fitness", "metrics"}
    assert 0 <= body["generation"] <= 10
    assert set(body["metrics"]) == {
        "classroomUtilization",
        "facultyWorkloadBalance",
        "conflictCount",
        "preferenceSatisfaction",
    }
    assert body["metrics"]["conflictCount"] >= 0

    stored = client.get(f"/api/timetables/{body['timetableId']}")
    assert stored.status_code == 200
    timetable = stored.json()
    assert timetable["status"] == "generated"
    assert timetable["academicYear"] == "2026-2027"
    assert timetable["randomSeed"] == 42
    assert timetable["generation"] == body["generation"]
    assert len(timetable["entries"]) == 19
    assert {entry["department"] for entry in timetable["entries"]} == {"CSE"}
    assert timetable["metrics"] == body["metrics"]


def test_generate_without_catalog_reports_every_gap(client):
    response = generate(client, department="Physics")

    assert response.status_code == 422
    body = response.json()
    assert body["message"] == "Insufficient data for timetable generation"
    assert len(body["details"]["problems"]) == 4


def test_generate_rejects_out_of_range_config(client, db_session):
    seed_demo_catalog(db_session)

    response = generate(client, config={"populationSize": 0})

    assert response.status_code == 422
    body = response.json()
    assert body["message"] == "Invalid request"
    assert ["body", "config", "populationSize"] in [error["loc"] for error in body["details"]["errors"]]


def test_generate_rejects_unknown_semester(client):
    response = generate(client, semester=12)

    assert response.status_code == 422
    assert set(response.json()) == {"message", "details"}


def test_missing_timetable_returns_404(client):
    response = client.get("/api/timetables/does-not-exist")

    assert response.status_code == 404
    assert response.json() == {"message": "Timetable with id does-not-exist not found", "details": {}}


def test_oversized_request_is_rejected(client):
    response = client.post(
        "/api/timetables/generate",
        content=b"x" * 2_000_000,
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 413
    assert response.json()["message"] == "Request body too large"


def test_responses_carry_hardening_headers(client):
    response = client.get("/api/health")

    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert "X-Process-Time-Ms" in response.headers


def test_malformed_stored_timeslot_returns_422(client, db_session):
    seed_demo_catalog(db_session)
    slot = db_session.execute(select(Timeslot).where(Timeslot.slot_code == "MON-1")).scalar_one()
    slot.start_time = "9:00"
    db_session.commit()

    response = generate(client)

    assert response.status_code == 422
    body = response.json()
    assert body["message"] == "Catalog cannot support timetable generation"
    assert any("malformed times" in problem for problem in body["details"]["problems"])
