from datetime import datetime, timedelta, timezone

import pytest

from wasteroute.clock import FixedClock
from wasteroute.errors import CollectorNotFound, InvalidTransition
from wasteroute.models.domain import Collector, Location, Report, ReportStatus
from wasteroute.repositories.memory import InMemoryCollectorRepository, InMemoryReportRepository
from wasteroute.services import lifecycle
from wasteroute.services.assignment import AssignmentOptions, run_auto_assign
from wasteroute.services.collectors import set_collector_active

NOW = datetime(2026, 10, 16, 10, 0, tzinfo=timezone.utc)


def _report(rid: str, minutes: int = 0) -> Report:
    return Report(
        id=rid,
        location=Location(9.0579, 7.4951),
        created_at=NOW - timedelta(hours=3) + timedelta(minutes=minutes),
    )


@pytest.fixture
def repositories():
    reports = InMemoryReportRepository([_report("R1", 0), _report("R2", 1), _report("R3", 2)])
    collectors = InMemoryCollectorRepository([Collector(id="A"), Collector(id="B")])
    clock = FixedClock(NOW)
    lifecycle.assign_report(reports, collectors, "R1", "A", clock=clock)
    lifecycle.assign_report(reports, collectors, "R2", "A", clock=clock)
    lifecycle.start_pickup(reports, "R2", "A", clock=clock)
    lifecycle.assign_report(reports, collectors, "R3", "B", clock=clock)
    return reports, collectors


def test_deactivation_releases_open_reports_for_reassignment(repositories):
    reports, collectors = repositories

    change = set_collector_active(reports, collectors, "A", False)

    assert change.collector.active is False
    assert change.released_report_ids == ["R1", "R2"]
    for rid in ("R1", "R2"):
        released = reports.get(rid)
        assert released.status == ReportStatus.PENDING
        assert released.assigned_collector is None
        assert released.assigned_at is None
        assert released.started_at is None
    assert reports.get("R3").assigned_collector == "B"

    batch, _ = run_auto_assign(reports, collectors, AssignmentOptions(), clock=FixedClock(NOW))

    assert [(a.report_id, a.collector_id) for a in batch.assignments] == [("R1", "B"), ("R2", "B")]
    assert reports.count_by_collector_and_status("A", [ReportStatus.ASSIGNED, ReportStatus.IN_PROGRESS]) == 0


def test_reactivation_keeps_reports_and_unknown_collector_fails(repositories):
    reports, collectors = repositories

    change = set_collector_active(reports, collectors, "B", True)

    assert change.released_report_ids == []
    assert reports.get("R3").status == ReportStatus.ASSIGNED
    with pytest.raises(CollectorNotFound):
        set_collector_active(reports, collectors, "GHOST", False)


def test_completed_work_is_not_released(repositories):
    reports, collectors = repositories
    lifecycle.complete_pickup(reports, "R2", "A", clock=FixedClock(NOW))

    change = set_collector_active(reports, collectors, "A", False)

    assert change.released_report_ids == ["R1"]
    assert reports.get("R2").status == ReportStatus.COLLECTED


def test_release_is_not_a_regular_transition():
    assert not lifecycle.can_transition(ReportStatus.ASSIGNED, ReportStatus.PENDING)
    reports = InMemoryReportRepository([_report("R1")])

    with pytest.raises(InvalidTransition):
        lifecycle.release_report(reports, reports.get("R1"))


def test_registering_a_collector_twice_is_rejected():
    collectors = InMemoryCollectorRepository([Collector(id="A", name="Ada")])

    with pytest.raises(ValueError):
        collectors.add(Collector(id="A", name="Someone else"))

    assert collectors.get("A").name == "Ada"
