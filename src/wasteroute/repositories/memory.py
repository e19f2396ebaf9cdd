"""In-process repositories used when no database is configured, and by tests."""

from __future__ import annotations

import threading
from dataclasses import replace
from typing import Any, Iterable, Mapping, Optional

from ..models.domain import Collector, Report, ReportStatus
from .base import CollectorRepository, ReportRepository


class InMemoryReportRepository(ReportRepository):
    """Dictionary-backed report store guarded by a single lock.

    Reads return copies so callers cannot change stored state without going
    through ``try_transition``.
    """

    def __init__(self, reports: Iterable[Report] = ()) -> None:
        self._lock = threading.Lock()
        self._reports: dict[str, Report] = {}
        for report in reports:
            self.add(report)

    def get(self, report_id: str) -> Optional[Report]:
        with self._lock:
            report = self._reports.get(report_id)
            return replace(report) if report else None

    def add(self, report: Report) -> Report:
        with self._lock:
            if report.id in self._reports:
                raise ValueError(f"Report {report.id} already exists.")
            self._reports[report.id] = replace(report)
        return report

    def find_by_collector(self, collector_id: str) -> list[Report]:
        with self._lock:
            return [replace(r) for r in self._reports.values() if r.assigned_collector == collector_id]

    def find_by_statuses(self, statuses: Iterable[ReportStatus]) -> list[Report]:
        wanted = set(statuses)
        with self._lock:
            return [replace(r) for r in self._reports.values() if r.status in wanted]

    def try_transition(
        self,
        report_id: str,
        from_status: ReportStatus,
        to_status: ReportStatus,
        fields: Mapping[str, Any] | None = None,
    ) -> bool:
        with self._lock:
            report = self._reports.get(report_id)
            if report is None or report.status != from_status:
                return False
            updates = dict(fields or {})
            invalid = [name for name in updates if name in {"id", "status"} or not hasattr(report, name)]
            if invalid:
                raise ValueError(f"Unknown report field(s): {', '.join(invalid)}")
            for name, value in updates.items():
                setattr(report, name, value)
            report.status = to_status
            return True


class InMemoryCollectorRepository(CollectorRepository):
    def __init__(self, collectors: Iterable[Collector] = ()) -> None:
        self._lock = threading.Lock()
        self._collectors: dict[str, Collector] = {}
        for collector in collectors:
            self.add(collector)

    def get(self, collector_id: str) -> Optional[Collector]:
        with self._lock:
            collector = self._collectors.get(collector_id)
            return replace(collector) if collector else None

    def add(self, collector: Collector) -> Collector:
        with self._lock:
            if collector.id in self._collectors:
                raise ValueError(f"Collector {collector.id} already exists.")
            self._collectors[collector.id] = replace(collector)
        return collector

    def find_active(self) -> list[Collector]:
        with self._lock:
            return sorted(
                (replace(c) for c in self._collectors.values() if c.active),
                key=lambda collector: collector.id,
            )

    def set_active(self, collector_id: str, active: bool) -> Optional[Collector]:
        with self._lock:
            collector = self._collectors.get(collector_id)
            if collector is None:
                return None
            collector.active = active
            return replace(collector)
