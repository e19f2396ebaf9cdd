"""Collector route, statistics and pickup endpoints."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from ...clock import Clock, today_window
from ...errors import CollectorNotFound
from ...models.domain import Collector, Location, ReportStatus
from ...repositories.base import CollectorRepository, ReportRepository
from ...schemas.collectors import (
    CollectorModel,
    CollectorStatusRequest,
    CollectorStatusResponse,
    PickupHistoryResponse,
)
from ...schemas.reports import CompletePickupRequest, ReportModel
from ...schemas.routing import (
    CollectorDashboardResponse,
    CollectorRouteResponse,
    CollectorStatisticsModel,
    RouteModel,
)
from ...services import lifecycle
from ...services.collectors import set_collector_active
from ...services.outputs.formatter import route_to_csv, route_to_json
from ...services.routing.builder import build_route
from ...services.statistics import collector_dashboard, compute_collector_statistics, pickup_history
from ..dependencies import get_clock, get_collector_repository, get_report_repository
from ..errors import to_http_exception

router = APIRouter(prefix="/collectors", tags=["collectors"])


def _require_collector(collectors: CollectorRepository, collector_id: str) -> Collector:
    collector = collectors.get(collector_id)
    if collector is None:
        raise to_http_exception(CollectorNotFound(collector_id))
    return collector


def _start_location(start_lat: float | None, start_lng: float | None) -> Location | None:
    if start_lat is None and start_lng is None:
        return None
    if start_lat is None or start_lng is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="start_lat and start_lng must be provided together.",
        )
    try:
        return Location(start_lat, start_lng)
    except ValueError as exc:
        raise to_http_exception(exc) from exc


@router.post("", response_model=CollectorModel, status_code=status.HTTP_201_CREATED)
def register_collector(
    payload: CollectorModel,
    collectors: CollectorRepository = Depends(get_collector_repository),
) -> CollectorModel:
    try:
        collectors.add(payload.to_collector())
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    return payload


@router.get("/active", response_model=list[CollectorModel])
def list_active_collectors(
    collectors: CollectorRepository = Depends(get_collector_repository),
) -> list[CollectorModel]:
    return [CollectorModel.from_collector(c) for c in collectors.find_active()]


@router.put("/{collector_id}/status", response_model=CollectorStatusResponse)
def update_collector_status(
    collector_id: str,
    payload: CollectorStatusRequest,
    reports: ReportRepository = Depends(get_report_repository),
    collectors: CollectorRepository = Depends(get_collector_repository),
) -> CollectorStatusResponse:
    """Activate or deactivate a collector; deactivation returns their open reports to pending."""
    try:
        change = set_collector_active(reports, collectors, collector_id, payload.active)
    except Exception as exc:
        raise to_http_exception(exc) from exc
    return CollectorStatusResponse(
        message=f"Collector {collector_id} {'activated' if payload.active else 'deactivated'}",
        collector=CollectorModel.from_collector(change.collector),
        released_report_ids=change.released_report_ids,
    )


@router.get("/{collector_id}/route", response_model=CollectorRouteResponse)
def get_collector_route(
    collector_id: str,
    start_lat: float | None = Query(default=None, description="Starting latitude"),
    start_lng: float | None = Query(default=None, description="Starting longitude"),
    reports: ReportRepository = Depends(get_report_repository),
    collectors: CollectorRepository = Depends(get_collector_repository),
    clock: Clock = Depends(get_clock),
) -> CollectorRouteResponse:
    _require_collector(collectors, collector_id)
    route = build_route(reports, collector_id, _start_location(start_lat, start_lng))
    stats = compute_collector_statistics(reports, collector_id, today_window(clock))
    return CollectorRouteResponse(
        route=RouteModel.from_route(route),
        statistics=CollectorStatisticsModel.from_stats(stats),
    )


@router.get("/{collector_id}/route/export")
def export_collector_route(
    collector_id: str,
    format: Literal["csv", "json"] = Query(default="csv"),
    start_lat: float | None = Query(default=None),
    start_lng: float | None = Query(default=None),
    reports: ReportRepository = Depends(get_report_repository),
    collectors: CollectorRepository = Depends(get_collector_repository),
):
    _require_collector(collectors, collector_id)
    route = build_route(reports, collector_id, _start_location(start_lat, start_lng))
    if format == "json":
        return route_to_json(route)
    return Response(
        content=route_to_csv(route),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="route_{collector_id}.csv"'},
    )


@router.get("/{collector_id}/statistics", response_model=CollectorStatisticsModel)
def get_collector_statistics(
    collector_id: str,
    reports: ReportRepository = Depends(get_report_repository),
    collectors: CollectorRepository = Depends(get_collector_repository),
    clock: Clock = Depends(get_clock),
) -> CollectorStatisticsModel:
    _require_collector(collectors, collector_id)
    stats = compute_collector_statistics(reports, collector_id, today_window(clock))
    return CollectorStatisticsModel.from_stats(stats)


@router.get("/{collector_id}/dashboard", response_model=CollectorDashboardResponse)
def get_collector_dashboard(
    collector_id: str,
    limit: int | None = Query(default=None, gt=0, description="Maximum number of open reports to return"),
    reports: ReportRepository = Depends(get_report_repository),
    collectors: CollectorRepository = Depends(get_collector_repository),
    clock: Clock = Depends(get_clock),
) -> CollectorDashboardResponse:
    _require_collector(collectors, collector_id)
    dashboard = collector_dashboard(reports, collector_id, today_window(clock), limit=limit)
    return CollectorDashboardResponse(
        collector_id=collector_id,
        statistics=CollectorStatisticsModel.from_stats(dashboard["statistics"]),
        open_reports=[ReportModel.from_report(report) for report in dashboard["open_reports"]],
    )


@router.post("/{collector_id}/reports/{report_id}/assign-self", response_model=ReportModel)
def assign_self(
    collector_id: str,
    report_id: str,
    reports: ReportRepository = Depends(get_report_repository),
    collectors: CollectorRepository = Depends(get_collector_repository),
    clock: Clock = Depends(get_clock),
) -> ReportModel:
    try:
        report = lifecycle.assign_report(reports, collectors, report_id, collector_id, clock=clock)
    except Exception as exc:
        raise to_http_exception(exc) from exc
    return ReportModel.from_report(report)


@router.post("/{collector_id}/reports/{report_id}/start", response_model=ReportModel)
def start_pickup(
    collector_id: str,
    report_id: str,
    reports: ReportRepository = Depends(get_report_repository),
    clock: Clock = Depends(get_clock),
) -> ReportModel:
    try:
        report = lifecycle.start_pickup(reports, report_id, collector_id, clock=clock)
    except Exception as exc:
        raise to_http_exception(exc) from exc
    return ReportModel.from_report(report)


@router.post("/{collector_id}/reports/{report_id}/complete", response_model=ReportModel)
def complete_pickup(
    collector_id: str,
    report_id: str,
    payload: CompletePickupRequest,
    reports: ReportRepository = Depends(get_report_repository),
    clock: Clock = Depends(get_clock),
) -> ReportModel:
    try:
        report = lifecycle.complete_pickup(
            reports,
            report_id,
            collector_id,
            actual_quantity=payload.actual_quantity,
            waste_type_confirmed=payload.waste_type_confirmed,
            notes=payload.notes,
            clock=clock,
        )
    except Exception as exc:
        raise to_http_exception(exc) from exc
    return ReportModel.from_report(report)


@router.get("/{collector_id}/history", response_model=PickupHistoryResponse)
def get_pickup_history(
    collector_id: str,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
    report_status: ReportStatus | None = Query(default=None, alias="status"),
    start: datetime | None = Query(default=None, description="Earliest finish time (inclusive)"),
    end: datetime | None = Query(default=None, description="Latest finish time (inclusive)"),
    reports: ReportRepository = Depends(get_report_repository),
    collectors: CollectorRepository = Depends(get_collector_repository),
) -> PickupHistoryResponse:
    _require_collector(collectors, collector_id)
    history = pickup_history(
        reports, collector_id, status=report_status, start=start, end=end, page=page, limit=limit
    )
    return PickupHistoryResponse(
        collector_id=collector_id,
        items=[ReportModel.from_report(report) for report in history.items],
        page=history.page,
        limit=history.limit,
        total=history.total,
        total_pages=history.total_pages,
        has_next=history.has_next,
        has_prev=history.has_prev,
    )
