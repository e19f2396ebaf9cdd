"""Repository contracts consumed by the routing and assignment engine."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Iterable, Mapping, Optional, Sequence

from ..models.domain import OPEN_STATUSES, Collector, Report, ReportStatus


class ReportRepository(ABC):
    """Contract for report storage backends.

    ``try_transition`` is the only write path for status changes. It must be an
    atomic check-and-set: the update applies only while the stored status still
    equals ``from_status``, and the return value says whether it applied.
    """

    @abstractmethod
    def get(self, report_id: str) -> Optional[Report]:
        raise NotImplementedError

    @abstractmethod
    def add(self, report: Report) -> Report:
        raise NotImplementedError

    @abstractmethod
    def find_by_collector(self, collector_id: str) -> list[Report]:
        raise NotImplementedError

    @abstractmethod
    def find_by_statuses(self, statuses: Iterable[ReportStatus]) -> list[Report]:
        raise NotImplementedError

    @abstractmethod
    def try_transition(
        self,
        report_id: str,
        from_status: ReportStatus,
        to_status: ReportStatus,
        fields: Mapping[str, Any] | None = None,
    ) -> bool:
        raise NotImplementedError

    def find_open_by_collector(self, collector_id: str) -> list[Report]:
        return [report for report in self.find_by_collector(collector_id) if report.status in OPEN_STATUSES]

    def find_pending(self) -> list[Report]:
        return self.find_by_statuses([ReportStatus.PENDING])

    def count_by_collector_and_status(self, collector_id: str, statuses: Sequence[ReportStatus]) -> int:
        wanted = set(statuses)
        return sum(1 for report in self.find_by_collector(collector_id) if report.status in wanted)


class CollectorRepository(ABC):
    """Contract for collector storage backends."""

    @abstractmethod
    def get(self, collector_id: str) -> Optional[Collector]:
        raise NotImplementedError

    @abstractmethod
    def add(self, collector: Collector) -> Collector:
        """Store a new collector; raises ``ValueError`` if the id is taken."""
        raise NotImplementedError

    @abstractmethod
    def find_active(self) -> list[Collector]:
        raise NotImplementedError

    @abstractmethod
    def set_active(self, collector_id: str, active: bool) -> Optional[Collector]:
        """Flip the active flag; returns the updated collector, or None if unknown."""
        raise NotImplementedError
