"""Assignment of pending reports to active collectors."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from ...clock import Clock, SystemClock
from ...models.domain import OPEN_STATUSES, Collector, Report, ReportStatus
from ...repositories.base import ReportRepository
from ..lifecycle import assignment_fields

logger = logging.getLogger(__name__)

REASON_ASSIGNED = "assigned"
REASON_NO_PENDING_REPORTS = "no_pending_reports"
REASON_NO_ACTIVE_COLLECTORS = "no_active_collectors"
REASON_ALL_AT_CAPACITY = "all_collectors_at_capacity"
REASON_CLAIMED_CONCURRENTLY = "claimed_concurrently"


@dataclass(slots=True)
class AssignmentOptions:
    consider_urgency: bool = True
    balance_workload: bool = True
    max_assignments_per_collector: int = 5
    # Accepted and echoed back; candidate ordering does not use it yet.
    prioritize_proximity: bool = True

    def __post_init__(self) -> None:
        if self.max_assignments_per_collector < 1:
            raise ValueError("max_assignments_per_collector must be >= 1")


@dataclass(slots=True)
class Assignment:
    report_id: str
    collector_id: str


@dataclass(slots=True)
class AssignmentBatch:
    assignments: List[Assignment]
    unassigned: int
    reason: str
    options: AssignmentOptions
    workloads_before: Dict[str, int] = field(default_factory=dict)
    workloads_after: Dict[str, int] = field(default_factory=dict)

    @property
    def assigned_count(self) -> int:
        return len(self.assignments)


def order_pending(reports: Sequence[Report], consider_urgency: bool) -> list[Report]:
    """Most urgent first when asked, oldest first otherwise; report id breaks remaining ties."""

    if consider_urgency:
        return sorted(reports, key=lambda r: (-r.urgency.rank, r.created_at, r.id))
    return sorted(reports, key=lambda r: (r.created_at, r.id))


def _pick_least_loaded(collector_ids: Sequence[str], workloads: Dict[str, int], cap: int) -> Optional[str]:
    eligible = [cid for cid in collector_ids if workloads[cid] < cap]
    if not eligible:
        return None
    return min(eligible, key=lambda cid: (workloads[cid], cid))


def _pick_round_robin(
    collector_ids: Sequence[str], workloads: Dict[str, int], cap: int, cursor: int
) -> tuple[Optional[str], int]:
    """Next collector below cap starting at ``cursor``; returns it with its index."""

    count = len(collector_ids)
    for offset in range(count):
        index = (cursor + offset) % count
        if workloads[collector_ids[index]] < cap:
            return collector_ids[index], index
    return None, cursor


def auto_assign(
    reports: ReportRepository,
    pending_reports: Sequence[Report],
    active_collectors: Sequence[Collector],
    options: AssignmentOptions | None = None,
    *,
    clock: Clock | None = None,
) -> AssignmentBatch:
    """Assign pending reports to collectors, one conditional update per report.

    A report whose update fails (someone else claimed it first) is skipped and
    counted as unassigned; assignments already made stay in place.
    """

    options = options or AssignmentOptions()
    clock = clock or SystemClock()

    candidates = [report for report in pending_reports if report.status == ReportStatus.PENDING]
    collector_ids = sorted({collector.id for collector in active_collectors if collector.active})

    if not candidates:
        logger.info("Auto-assign: no pending reports to assign")
        return AssignmentBatch(assignments=[], unassigned=0, reason=REASON_NO_PENDING_REPORTS, options=options)
    if not collector_ids:
        logger.info(f"Auto-assign: no active collectors for {len(candidates)} pending reports")
        return AssignmentBatch(
            assignments=[], unassigned=len(candidates), reason=REASON_NO_ACTIVE_COLLECTORS, options=options
        )

    workloads = {cid: reports.count_by_collector_and_status(cid, list(OPEN_STATUSES)) for cid in collector_ids}
    workloads_before = dict(workloads)
    cap = options.max_assignments_per_collector
    cursor = 0
    assignments: list[Assignment] = []
    at_capacity = 0
    lost_races = 0

    for report in order_pending(candidates, options.consider_urgency):
        if options.balance_workload:
            collector_id = _pick_least_loaded(collector_ids, workloads, cap)
            index = None
        else:
            collector_id, index = _pick_round_robin(collector_ids, workloads, cap, cursor)

        if collector_id is None:
            at_capacity += 1
            continue

        claimed = reports.try_transition(
            report.id,
            ReportStatus.PENDING,
            ReportStatus.ASSIGNED,
            assignment_fields(collector_id, clock.now()),
        )
        if not claimed:
            logger.warning(f"Auto-assign: report {report.id} is no longer pending, skipping")
            lost_races += 1
            continue

        workloads[collector_id] += 1
        if index is not None:
            cursor = (index + 1) % len(collector_ids)
        assignments.append(Assignment(report_id=report.id, collector_id=collector_id))

    if assignments:
        reason = REASON_ASSIGNED
    elif at_capacity:
        reason = REASON_ALL_AT_CAPACITY
    else:
        reason = REASON_CLAIMED_CONCURRENTLY
    skipped = at_capacity + lost_races
    logger.info(
        f"Auto-assign: {len(assignments)} assigned, {at_capacity} left pending at capacity, "
        f"{lost_races} claimed elsewhere"
    )
    return AssignmentBatch(
        assignments=assignments,
        unassigned=skipped,
        reason=reason,
        options=options,
        workloads_before=workloads_before,
        workloads_after=workloads,
    )
