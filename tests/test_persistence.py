import json
from datetime import datetime, timezone
from pathlib import Path

from wasteroute.models.domain import Collector, Location, Report
from wasteroute.persistence.filesystem import FileStorage
from wasteroute.repositories.memory import InMemoryCollectorRepository, InMemoryReportRepository
from wasteroute.services.assignment import service as assignment_service
from wasteroute.services.assignment.balancer import AssignmentOptions


def test_file_storage_creates_run_directory(tmp_path: Path) -> None:
    storage = FileStorage(root=tmp_path)
    run_dir = storage.make_run_directory(prefix="assign_test")

    assert run_dir.exists()
    assert run_dir.is_dir()
    assert run_dir.parent == tmp_path / "runs"


def test_file_storage_writes_json_and_csv(tmp_path: Path) -> None:
    storage = FileStorage(root=tmp_path)
    run_dir = storage.make_run_directory(prefix="assign_test")

    summary_path = run_dir / "summary.json"
    assignments_path = run_dir / "assignments.csv"

    storage.write_json(summary_path, {"hello": "world"})
    storage.write_csv(assignments_path, "a,b\n1,2\n")

    assert summary_path.read_text(encoding="utf-8") == '{\n  "hello": "world"\n}'
    assert assignments_path.read_text(encoding="utf-8") == "a,b\n1,2\n"


def test_run_auto_assign_persists_outputs(monkeypatch, tmp_path: Path) -> None:
    created = datetime(2026, 10, 16, 8, 0, tzinfo=timezone.utc)
    reports = InMemoryReportRepository(
        [Report(id=f"R{i}", location=Location(0.0, 0.01 * i), created_at=created) for i in range(3)]
    )
    collectors = InMemoryCollectorRepository([Collector(id="A"), Collector(id="B")])
    monkeypatch.setattr(assignment_service, "FileStorage", lambda: FileStorage(root=tmp_path))

    batch, metadata = assignment_service.run_auto_assign(reports, collectors, AssignmentOptions(), persist=True)

    assert batch.assigned_count == 3
    assert metadata["pending_before"] == 3
    run_dir = Path(metadata["output_dir"])
    summary = json.loads((run_dir / "summary.json").read_text(encoding="utf-8"))
    assert summary["assigned_count"] == 3
    assert summary["settings"]["prioritize_proximity"] is True
    assignments = (run_dir / "assignments.csv").read_text(encoding="utf-8")
    assert assignments.startswith("report_id,collector_id")
    assert "R0" in assignments and "R2" in assignments


def test_save_run_writes_json_and_csv_artifacts(tmp_path: Path) -> None:
    storage = FileStorage(root=tmp_path)

    run_dir = storage.save_run("route", {"route.json": {"stops": []}, "route.csv": "sequence\n"})

    assert run_dir.name.startswith("route_")
    assert json.loads((run_dir / "route.json").read_text(encoding="utf-8")) == {"stops": []}
    assert (run_dir / "route.csv").read_text(encoding="utf-8") == "sequence\n"
