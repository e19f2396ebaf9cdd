from datetime import datetime, timezone
from types import SimpleNamespace

import pytest

from wasteroute.models.domain import Collector, ReportStatus, Urgency, WasteType
from wasteroute.repositories.supabase import (
    SupabaseCollectorRepository,
    SupabaseReportRepository,
    report_from_row,
    report_to_row,
)

ROW = {
    "id": "R1",
    "latitude": 6.5244,
    "longitude": 3.3792,
    "created_at": "2026-10-16T07:00:00Z",
    "waste_type": "plastic",
    "urgency": "high",
    "status": "pending",
    "assigned_collector": None,
}


class FakeQuery:
    """Records chained PostgREST calls and replays canned rows."""

    def __init__(self, table: "FakeTable") -> None:
        self.table = table
        self.filters: list[tuple[str, str, object]] = []
        self.payload = None
        self.action = "select"

    def select(self, *columns, count=None):
        return self

    def insert(self, payload):
        self.action, self.payload = "insert", payload
        return self

    def upsert(self, payload):
        self.action, self.payload = "upsert", payload
        return self

    def update(self, payload):
        self.action, self.payload = "update", payload
        return self

    def eq(self, column, value):
        self.filters.append(("eq", column, value))
        return self

    def in_(self, column, values):
        self.filters.append(("in", column, values))
        return self

    def limit(self, _):
        return self

    def order(self, _):
        return self

    def _matches(self, row) -> bool:
        for op, column, value in self.filters:
            if op == "eq" and row.get(column) != value:
                return False
            if op == "in" and row.get(column) not in value:
                return False
        return True

    def execute(self):
        self.table.calls.append(self)
        if self.action in ("insert", "upsert"):
            self.table.rows.append(dict(self.payload))
            return SimpleNamespace(data=[self.payload], count=None)
        matched = [row for row in self.table.rows if self._matches(row)]
        if self.action == "update":
            for row in matched:
                row.update(self.payload)
        return SimpleNamespace(data=[dict(row) for row in matched], count=len(matched))


class FakeTable:
    def __init__(self, rows) -> None:
        self.rows = [dict(row) for row in rows]
        self.calls: list[FakeQuery] = []


class FakeClient:
    def __init__(self, **tables) -> None:
        self.tables = {name: FakeTable(rows) for name, rows in tables.items()}

    def table(self, name):
        return FakeQuery(self.tables[name])


def test_row_conversion_parses_enums_and_utc_timestamps():
    report = report_from_row(ROW)

    assert report.waste_type == WasteType.PLASTIC
    assert report.urgency == Urgency.HIGH
    assert report.created_at == datetime(2026, 10, 16, 7, 0, tzinfo=timezone.utc)
    assert report.waste_type_confirmed is None

    row = report_to_row(report)
    assert row["status"] == "pending"
    assert row["created_at"] == "2026-10-16T07:00:00+00:00"

    # PostgREST drops trailing zeros from the fraction
    trimmed = report_from_row(
        dict(ROW, created_at="2026-10-16T09:00:00.12+00:00", assigned_at="2026-10-16T09:30:00.5Z")
    )
    assert trimmed.created_at == datetime(2026, 10, 16, 9, 0, 0, 120000, tzinfo=timezone.utc)
    assert trimmed.assigned_at == datetime(2026, 10, 16, 9, 30, 0, 500000, tzinfo=timezone.utc)


def test_conditional_update_applies_only_from_expected_status():
    client = FakeClient(reports=[ROW])
    repository = SupabaseReportRepository(client, table="reports")
    assigned_at = datetime(2026, 10, 16, 9, 0, tzinfo=timezone.utc)

    first = repository.try_transition(
        "R1", ReportStatus.PENDING, ReportStatus.ASSIGNED, {"assigned_collector": "A", "assigned_at": assigned_at}
    )
    second = repository.try_transition(
        "R1", ReportStatus.PENDING, ReportStatus.ASSIGNED, {"assigned_collector": "B", "assigned_at": assigned_at}
    )

    assert first is True
    assert second is False
    stored = repository.get("R1")
    assert stored.status == ReportStatus.ASSIGNED
    assert stored.assigned_collector == "A"
    assert stored.assigned_at == assigned_at
    update = client.tables["reports"].calls[0]
    assert ("eq", "status", "pending") in update.filters


def test_workload_count_uses_status_filter():
    rows = [
        dict(ROW, id="R1", status="assigned", assigned_collector="A"),
        dict(ROW, id="R2", status="in_progress", assigned_collector="A"),
        dict(ROW, id="R3", status="collected", assigned_collector="A"),
    ]
    repository = SupabaseReportRepository(FakeClient(reports=rows), table="reports")

    assert repository.count_by_collector_and_status("A", [ReportStatus.ASSIGNED, ReportStatus.IN_PROGRESS]) == 2
    assert [r.id for r in repository.find_open_by_collector("A")] == ["R1", "R2"]
    assert repository.find_by_statuses([]) == []


def test_collector_repository_reads_active_flag():
    client = FakeClient(
        collectors=[
            {"id": "B", "name": "Bola", "is_active": True},
            {"id": "C", "name": "Chi", "is_active": False},
        ]
    )
    repository = SupabaseCollectorRepository(client, table="collectors")

    assert [c.id for c in repository.find_active()] == ["B"]
    assert repository.get("C").active is False
    assert repository.get("missing") is None


def test_collector_repository_rejects_duplicates_and_toggles_active():
    client = FakeClient(collectors=[{"id": "A", "name": "Ada", "is_active": True}])
    repository = SupabaseCollectorRepository(client, table="collectors")

    with pytest.raises(ValueError):
        repository.add(Collector(id="A", name="Another Ada"))

    updated = repository.set_active("A", False)
    assert updated.active is False
    assert repository.find_active() == []
    assert repository.set_active("missing", True) is None
