"""Assignment endpoints."""

from __future__ import annotations

import logging
from dataclasses import asdict

from fastapi import APIRouter, Depends, HTTPException, status

from ...clock import Clock
from ...repositories.base import CollectorRepository, ReportRepository
from ...schemas.assignments import (
    AssignmentModel,
    AssignReportRequest,
    AutoAssignRequest,
    AutoAssignResponse,
)
from ...schemas.reports import ReportModel
from ...services import lifecycle
from ...services.assignment.balancer import (
    REASON_ALL_AT_CAPACITY,
    REASON_CLAIMED_CONCURRENTLY,
    REASON_NO_ACTIVE_COLLECTORS,
    REASON_NO_PENDING_REPORTS,
)
from ...services.assignment.service import run_auto_assign
from ..dependencies import get_clock, get_collector_repository, get_report_repository
from ..errors import to_http_exception

router = APIRouter(prefix="/assignments", tags=["assignments"])

_MESSAGES = {
    REASON_NO_PENDING_REPORTS: "No pending reports to assign",
    REASON_NO_ACTIVE_COLLECTORS: "No active collectors available",
    REASON_ALL_AT_CAPACITY: "All collectors have reached their assignment limit",
    REASON_CLAIMED_CONCURRENTLY: "Pending reports were claimed by another assignment run",
}


@router.post("/auto", response_model=AutoAssignResponse, status_code=status.HTTP_200_OK)
def auto_assign_reports(
    payload: AutoAssignRequest,
    reports: ReportRepository = Depends(get_report_repository),
    collectors: CollectorRepository = Depends(get_collector_repository),
    clock: Clock = Depends(get_clock),
) -> AutoAssignResponse:
    try:
        batch, metadata = run_auto_assign(
            reports,
            collectors,
            payload.to_options(),
            clock=clock,
            persist=payload.persist,
        )
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except Exception as exc:
        logging.exception(f"Error auto-assigning reports: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to auto-assign reports: {str(exc)}",
        ) from exc

    message = _MESSAGES.get(batch.reason, f"Successfully auto-assigned {batch.assigned_count} reports")
    return AutoAssignResponse(
        message=message,
        assigned_count=batch.assigned_count,
        unassigned=batch.unassigned,
        reason=batch.reason,
        assignments=[AssignmentModel(**asdict(item)) for item in batch.assignments],
        workloads=batch.workloads_after,
        settings=asdict(batch.options),
        metadata=metadata,
    )


@router.post("", response_model=ReportModel, status_code=status.HTTP_200_OK)
def assign_report(
    payload: AssignReportRequest,
    reports: ReportRepository = Depends(get_report_repository),
    collectors: CollectorRepository = Depends(get_collector_repository),
    clock: Clock = Depends(get_clock),
) -> ReportModel:
    """Assign a single pending report to a collector."""
    try:
        report = lifecycle.assign_report(reports, collectors, payload.report_id, payload.collector_id, clock=clock)
    except Exception as exc:
        raise to_http_exception(exc) from exc
    return ReportModel.from_report(report)
