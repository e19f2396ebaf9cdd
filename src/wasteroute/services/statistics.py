"""Collector workload statistics and report lookups for dashboards."""

from __future__ import annotations

import math
from collections import Counter
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Tuple

from ..config import settings
from ..models.domain import OPEN_STATUSES, TERMINAL_STATUSES, Location, Report, ReportStatus, Urgency
from ..repositories.base import ReportRepository
from .geospatial import distance_km


@dataclass(slots=True)
class CollectorStatistics:
    total_assigned: int
    pending: int
    in_progress: int
    completed_today: int
    estimated_time_remaining: int


def _in_window(instant: Optional[datetime], window: Tuple[datetime, datetime]) -> bool:
    if instant is None:
        return False
    start, end = window
    return start <= instant < end


def compute_collector_statistics(
    reports: ReportRepository,
    collector_id: str,
    today: Tuple[datetime, datetime],
    *,
    minutes_per_report: int | None = None,
) -> CollectorStatistics:
    """Aggregate a collector's reports.

    ``pending`` counts reports waiting in ``assigned``. The remaining-time
    figure is a flat per-report average, coarser than the per-stop estimate
    used for routes.
    """

    owned = reports.find_by_collector(collector_id)
    pending = sum(1 for r in owned if r.status == ReportStatus.ASSIGNED)
    in_progress = sum(1 for r in owned if r.status == ReportStatus.IN_PROGRESS)
    completed_today = sum(
        1 for r in owned if r.status == ReportStatus.COLLECTED and _in_window(r.collected_at, today)
    )
    per_report = settings.stats_minutes_per_report if minutes_per_report is None else minutes_per_report
    return CollectorStatistics(
        total_assigned=len(owned),
        pending=pending,
        in_progress=in_progress,
        completed_today=completed_today,
        estimated_time_remaining=(pending + in_progress) * per_report,
    )


def sort_for_work_queue(reports: Iterable[Report]) -> List[Report]:
    return sorted(reports, key=lambda r: (-r.urgency.rank, r.created_at, r.id))


def collector_dashboard(
    reports: ReportRepository,
    collector_id: str,
    today: Tuple[datetime, datetime],
    *,
    limit: int | None = None,
) -> dict:
    if limit is None:
        limit = settings.dashboard_report_limit
    open_reports = [r for r in reports.find_open_by_collector(collector_id) if r.status in OPEN_STATUSES]
    return {
        "statistics": compute_collector_statistics(reports, collector_id, today),
        "open_reports": sort_for_work_queue(open_reports)[:limit],
    }


def find_reports_near(
    reports: ReportRepository,
    location: Location,
    radius_km: float | None = None,
    statuses: Iterable[ReportStatus] | None = None,
) -> list[tuple[Report, float]]:
    """Reports within ``radius_km`` of ``location``, closest first."""

    radius = settings.nearby_radius_km if radius_km is None else radius_km
    if radius <= 0:
        raise ValueError("radius_km must be > 0")
    wanted = list(statuses) if statuses else [s for s in ReportStatus if s not in TERMINAL_STATUSES]

    matches: list[tuple[Report, float]] = []
    for report in reports.find_by_statuses(wanted):
        distance = distance_km(location, report.location)
        if distance <= radius:
            matches.append((report, distance))
    return sorted(matches, key=lambda item: (item[1], item[0].id))


@dataclass(slots=True)
class ReportOverview:
    total: int
    by_status: Dict[str, int]
    critical: int
    high_urgency: int
    waste_types: List[Tuple[str, int]]


def report_overview(reports: ReportRepository, collector_id: str | None = None) -> ReportOverview:
    """Counts per status and urgency plus the waste-type distribution.

    Scoped to one collector's reports when ``collector_id`` is given. Every
    status appears in ``by_status``, with zero where nothing matches; waste
    types are listed most frequent first.
    """

    if collector_id is None:
        scope = reports.find_by_statuses(list(ReportStatus))
    else:
        scope = reports.find_by_collector(collector_id)

    by_status = {status.value: 0 for status in ReportStatus}
    waste_counts: Counter = Counter()
    for report in scope:
        by_status[report.status.value] += 1
        waste_counts[report.waste_type.value] += 1

    return ReportOverview(
        total=len(scope),
        by_status=by_status,
        critical=sum(1 for r in scope if r.urgency == Urgency.CRITICAL),
        high_urgency=sum(1 for r in scope if r.urgency == Urgency.HIGH),
        waste_types=sorted(waste_counts.items(), key=lambda item: (-item[1], item[0])),
    )


@dataclass(slots=True)
class PickupHistoryPage:
    items: List[Report]
    page: int
    limit: int
    total: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit)

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    @property
    def has_prev(self) -> bool:
        return self.page > 1


def _finished_at(report: Report) -> Optional[datetime]:
    return report.collected_at or report.resolved_at


def pickup_history(
    reports: ReportRepository,
    collector_id: str,
    *,
    status: ReportStatus | None = None,
    start: datetime | None = None,
    end: datetime | None = None,
    page: int = 1,
    limit: int = 10,
) -> PickupHistoryPage:
    """Finished pickups of a collector, most recent first.

    Defaults to ``collected`` and ``resolved`` reports; ``start``/``end`` bound
    the finish time inclusively.
    """

    if page < 1 or limit < 1:
        raise ValueError("page and limit must be >= 1")
    wanted = {status} if status is not None else {ReportStatus.COLLECTED, ReportStatus.RESOLVED}

    done = []
    for report in reports.find_by_collector(collector_id):
        if report.status not in wanted:
            continue
        finished = _finished_at(report)
        if start is not None and (finished is None or finished < start):
            continue
        if end is not None and (finished is None or finished > end):
            continue
        done.append(report)

    done.sort(key=lambda r: (_finished_at(r) is not None, _finished_at(r) or r.created_at, r.id), reverse=True)
    offset = (page - 1) * limit
    return PickupHistoryPage(items=done[offset : offset + limit], page=page, limit=limit, total=len(done))
