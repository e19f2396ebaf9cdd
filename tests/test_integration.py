from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from wasteroute.api.dependencies import get_clock, get_collector_repository, get_report_repository
from wasteroute.clock import FixedClock
from wasteroute.main import create_app
from wasteroute.models.domain import Collector, Location, Report, ReportStatus, Urgency, WasteType
from wasteroute.repositories.memory import InMemoryCollectorRepository, InMemoryReportRepository

NOW = datetime(2026, 10, 16, 9, 0, tzinfo=timezone.utc)


def _report(rid: str, lat: float, lon: float, urgency: Urgency = Urgency.MEDIUM, minute: int = 0) -> Report:
    return Report(
        id=rid,
        location=Location(lat, lon),
        created_at=NOW.replace(hour=7, minute=minute),
        urgency=urgency,
        waste_type=WasteType.MIXED,
    )


@pytest.fixture
def repositories():
    reports = InMemoryReportRepository(
        [
            _report("R1", 0.0, 0.02, Urgency.HIGH, minute=0),
            _report("R2", 0.0, 0.01, Urgency.LOW, minute=1),
            _report("R3", 0.0, 0.03, Urgency.CRITICAL, minute=2),
        ]
    )
    collectors = InMemoryCollectorRepository([Collector(id="A", name="Ada"), Collector(id="B", name="Bola")])
    return reports, collectors


@pytest.fixture
def api_client(repositories) -> TestClient:
    reports, collectors = repositories
    app = create_app()
    app.dependency_overrides[get_report_repository] = lambda: reports
    app.dependency_overrides[get_collector_repository] = lambda: collectors
    app.dependency_overrides[get_clock] = lambda: FixedClock(NOW)
    return TestClient(app)


def test_health(api_client: TestClient):
    response = api_client.get("/api/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_auto_assign_then_route(api_client: TestClient):
    response = api_client.post("/api/assignments/auto", json={"max_assignments_per_collector": 2})

    assert response.status_code == 200
    payload = response.json()
    assert payload["assigned_count"] == 3
    assert payload["unassigned"] == 0
    assert payload["reason"] == "assigned"
    assert payload["workloads"] == {"A": 2, "B": 1}
    assert payload["settings"]["max_assignments_per_collector"] == 2
    assert [a["report_id"] for a in payload["assignments"]] == ["R3", "R1", "R2"]

    route = api_client.get("/api/collectors/A/route", params={"start_lat": 0.0, "start_lng": 0.0})
    assert route.status_code == 200
    body = route.json()
    assert [stop["report"]["id"] for stop in body["route"]["stops"]] == ["R2", "R3"]
    assert body["route"]["total_time_min"] > 0
    assert body["statistics"]["pending"] == 2
    assert body["statistics"]["estimated_time_remaining"] == 40


def test_auto_assign_without_pending_reports(api_client: TestClient, repositories):
    reports, _ = repositories
    for rid in ("R1", "R2", "R3"):
        reports.try_transition(rid, ReportStatus.PENDING, ReportStatus.CANCELLED)

    response = api_client.post("/api/assignments/auto", json={})

    assert response.status_code == 200
    assert response.json()["reason"] == "no_pending_reports"
    assert response.json()["message"] == "No pending reports to assign"


def test_pickup_flow_and_errors(api_client: TestClient):
    assert api_client.post("/api/collectors/A/reports/R1/assign-self").status_code == 200

    conflict = api_client.post("/api/collectors/B/reports/R1/assign-self")
    assert conflict.status_code == 409

    forbidden = api_client.post("/api/collectors/B/reports/R1/start")
    assert forbidden.status_code == 403

    started = api_client.post("/api/collectors/A/reports/R1/start")
    assert started.status_code == 200
    assert started.json()["status"] == "in_progress"

    completed = api_client.post(
        "/api/collectors/A/reports/R1/complete",
        json={"actual_quantity": "3 bags", "waste_type_confirmed": "plastic", "notes": "ok"},
    )
    assert completed.status_code == 200
    assert completed.json()["status"] == "collected"
    assert completed.json()["waste_type_confirmed"] == "plastic"

    stats = api_client.get("/api/collectors/A/statistics")
    assert stats.json()["completed_today"] == 1

    missing = api_client.post("/api/collectors/A/reports/NOPE/start")
    assert missing.status_code == 404


def test_route_export_csv_and_unknown_collector(api_client: TestClient):
    api_client.post("/api/assignments", json={"report_id": "R2", "collector_id": "B"})

    export = api_client.get("/api/collectors/B/route/export")
    assert export.status_code == 200
    assert export.headers["content-type"].startswith("text/csv")
    assert export.text.splitlines()[1].startswith("B,1,R2")

    assert api_client.get("/api/collectors/ZZ/route").status_code == 404
    assert api_client.get("/api/collectors/B/route", params={"start_lat": 1.0}).status_code == 400


def test_create_and_find_nearby_reports(api_client: TestClient):
    created = api_client.post(
        "/api/reports",
        json={"id": "NEW", "location": {"lat": 0.0, "lng": 0.001}, "waste_type": "glass", "urgency": "high"},
    )
    assert created.status_code == 201
    assert created.json()["status"] == "pending"

    invalid = api_client.post("/api/reports", json={"location": {"lat": 95.0, "lng": 0.0}})
    assert invalid.status_code == 422

    nearby = api_client.get("/api/reports/nearby", params={"lat": 0.0, "lng": 0.0, "radius_km": 2})
    assert nearby.status_code == 200
    assert [item["report"]["id"] for item in nearby.json()["items"]] == ["NEW", "R2"]


def test_deactivating_collector_releases_reports_over_http(api_client: TestClient):
    api_client.post("/api/assignments", json={"report_id": "R1", "collector_id": "A"})

    response = api_client.put("/api/collectors/A/status", json={"active": False})

    assert response.status_code == 200
    assert response.json()["collector"]["active"] is False
    assert response.json()["released_report_ids"] == ["R1"]
    assert api_client.get("/api/reports/R1").json()["status"] == "pending"
    assert [c["id"] for c in api_client.get("/api/collectors/active").json()] == ["B"]
    assert api_client.put("/api/collectors/ZZ/status", json={"active": True}).status_code == 404


def test_duplicate_collector_registration_conflicts(api_client: TestClient):
    created = api_client.post("/api/collectors", json={"id": "C", "name": "Chi"})
    assert created.status_code == 201

    duplicate = api_client.post("/api/collectors", json={"id": "A", "name": "Impostor"})
    assert duplicate.status_code == 409


def test_report_statistics_and_pickup_history(api_client: TestClient):
    api_client.post("/api/collectors/A/reports/R3/assign-self")
    api_client.post("/api/collectors/A/reports/R3/start")
    api_client.post("/api/collectors/A/reports/R3/complete", json={})

    overall = api_client.get("/api/reports/statistics")
    assert overall.status_code == 200
    body = overall.json()
    assert body["total"] == 3
    assert body["by_status"]["pending"] == 2
    assert body["by_status"]["collected"] == 1
    assert body["critical"] == 1
    assert body["high_urgency"] == 1
    assert body["waste_types"] == [{"waste_type": "mixed", "count": 3}]

    scoped = api_client.get("/api/reports/statistics", params={"collector_id": "A"})
    assert scoped.json()["total"] == 1

    history = api_client.get("/api/collectors/A/history")
    assert history.status_code == 200
    assert [item["id"] for item in history.json()["items"]] == ["R3"]
    assert history.json()["total_pages"] == 1
