"""Report status state machine.

Every status change goes through ``transition``, which validates the move
against ``ALLOWED_TRANSITIONS`` and applies it with the repository's atomic
conditional update. A concurrent writer that changed the status first makes
the update fail, which surfaces here as ``InvalidTransition``.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Mapping, Optional

from ..clock import Clock, SystemClock
from ..errors import CollectorNotFound, Forbidden, InvalidTransition, ReportNotFound
from ..models.domain import Report, ReportStatus, WasteType
from ..repositories.base import CollectorRepository, ReportRepository

logger = logging.getLogger(__name__)

ALLOWED_TRANSITIONS: dict[ReportStatus, frozenset[ReportStatus]] = {
    ReportStatus.PENDING: frozenset({ReportStatus.ASSIGNED, ReportStatus.CANCELLED}),
    ReportStatus.ASSIGNED: frozenset({ReportStatus.IN_PROGRESS, ReportStatus.CANCELLED}),
    ReportStatus.IN_PROGRESS: frozenset(
        {ReportStatus.COLLECTED, ReportStatus.RESOLVED, ReportStatus.CANCELLED}
    ),
}

# Only used when a collector is deactivated and its open work goes back to the pool.
RELEASE_TRANSITIONS: dict[ReportStatus, frozenset[ReportStatus]] = {
    ReportStatus.ASSIGNED: frozenset({ReportStatus.PENDING}),
    ReportStatus.IN_PROGRESS: frozenset({ReportStatus.PENDING}),
}

RELEASE_FIELDS: dict[str, Any] = {"assigned_collector": None, "assigned_at": None, "started_at": None}


def can_transition(current: ReportStatus, target: ReportStatus) -> bool:
    return target in ALLOWED_TRANSITIONS.get(current, frozenset())


def assignment_fields(collector_id: str, now: datetime) -> dict[str, Any]:
    """Fields written by a ``pending -> assigned`` move."""

    return {"assigned_collector": collector_id, "assigned_at": now}


def _load(reports: ReportRepository, report_id: str) -> Report:
    report = reports.get(report_id)
    if report is None:
        raise ReportNotFound(report_id)
    return report


def transition(
    reports: ReportRepository,
    report_id: str,
    target: ReportStatus,
    *,
    fields: Mapping[str, Any] | None = None,
    expected: ReportStatus | None = None,
) -> Report:
    report = _load(reports, report_id)
    current = report.status
    if expected is not None and current != expected:
        raise InvalidTransition(report_id, current.value, target.value)
    if not can_transition(current, target):
        raise InvalidTransition(report_id, current.value, target.value)

    if not reports.try_transition(report_id, current, target, fields):
        latest = reports.get(report_id)
        logger.warning(f"Lost update on report {report_id}: expected '{current.value}' before moving to '{target.value}'")
        raise InvalidTransition(report_id, latest.status.value if latest else None, target.value)

    return _load(reports, report_id)


def assign_report(
    reports: ReportRepository,
    collectors: CollectorRepository,
    report_id: str,
    collector_id: str,
    *,
    clock: Clock | None = None,
) -> Report:
    """Assign a pending report to an active collector (admin or self-assignment)."""

    collector = collectors.get(collector_id)
    if collector is None:
        raise CollectorNotFound(collector_id)
    if not collector.active:
        raise ValueError(f"Collector {collector_id} is not active.")

    now = (clock or SystemClock()).now()
    report = transition(
        reports,
        report_id,
        ReportStatus.ASSIGNED,
        fields=assignment_fields(collector_id, now),
        expected=ReportStatus.PENDING,
    )
    logger.info(f"Report {report_id} assigned to collector {collector_id}")
    return report


def _require_assignee(report: Report, actor_id: str) -> None:
    if report.assigned_collector != actor_id:
        raise Forbidden(report.id, actor_id)


def start_pickup(
    reports: ReportRepository,
    report_id: str,
    actor_id: str,
    *,
    clock: Clock | None = None,
) -> Report:
    _require_assignee(_load(reports, report_id), actor_id)
    now = (clock or SystemClock()).now()
    return transition(
        reports,
        report_id,
        ReportStatus.IN_PROGRESS,
        fields={"started_at": now},
        expected=ReportStatus.ASSIGNED,
    )


def complete_pickup(
    reports: ReportRepository,
    report_id: str,
    actor_id: str,
    *,
    actual_quantity: Optional[str] = None,
    waste_type_confirmed: Optional[WasteType] = None,
    notes: Optional[str] = None,
    clock: Clock | None = None,
) -> Report:
    _require_assignee(_load(reports, report_id), actor_id)
    now = (clock or SystemClock()).now()
    return transition(
        reports,
        report_id,
        ReportStatus.COLLECTED,
        fields={
            "collected_at": now,
            "actual_quantity": actual_quantity,
            "waste_type_confirmed": waste_type_confirmed,
            "collector_notes": notes,
        },
        expected=ReportStatus.IN_PROGRESS,
    )


def resolve_report(reports: ReportRepository, report_id: str, *, clock: Clock | None = None) -> Report:
    now = (clock or SystemClock()).now()
    return transition(
        reports,
        report_id,
        ReportStatus.RESOLVED,
        fields={"resolved_at": now},
        expected=ReportStatus.IN_PROGRESS,
    )


def cancel_report(reports: ReportRepository, report_id: str) -> Report:
    return transition(reports, report_id, ReportStatus.CANCELLED)


def release_report(reports: ReportRepository, report: Report) -> bool:
    """Put an assigned or in-progress report back to ``pending`` with no collector.

    Returns False when the report moved on concurrently (for example it was
    completed in the meantime); the caller decides whether that matters.
    """
    if ReportStatus.PENDING not in RELEASE_TRANSITIONS.get(report.status, frozenset()):
        raise InvalidTransition(report.id, report.status.value, ReportStatus.PENDING.value)
    released = reports.try_transition(report.id, report.status, ReportStatus.PENDING, RELEASE_FIELDS)
    if not released:
        logger.warning(f"Report {report.id} changed before it could be released from {report.assigned_collector}")
    return released
