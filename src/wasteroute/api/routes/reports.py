"""Report intake, lookup and administrative status endpoints."""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, HTTPException, Query, status

from ...clock import Clock
from ...config import settings
from ...errors import ReportNotFound
from ...models.domain import Location, Report, ReportStatus
from ...repositories.base import ReportRepository
from ...schemas.reports import (
    LocationModel,
    NearbyReportModel,
    NearbyReportsResponse,
    ReportCreateRequest,
    ReportModel,
    ReportOverviewResponse,
    WasteTypeCount,
)
from ...services import lifecycle
from ...services.statistics import find_reports_near, report_overview
from ..dependencies import get_clock, get_report_repository
from ..errors import to_http_exception

router = APIRouter(prefix="/reports", tags=["reports"])


@router.post("", response_model=ReportModel, status_code=status.HTTP_201_CREATED)
def create_report(
    payload: ReportCreateRequest,
    reports: ReportRepository = Depends(get_report_repository),
    clock: Clock = Depends(get_clock),
) -> ReportModel:
    report = Report(
        id=payload.id or uuid.uuid4().hex,
        location=Location(payload.location.lat, payload.location.lng),
        created_at=clock.now(),
        waste_type=payload.waste_type,
        urgency=payload.urgency,
        description=payload.description,
        address=payload.address,
    )
    try:
        reports.add(report)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    return ReportModel.from_report(report)


@router.get("/nearby", response_model=NearbyReportsResponse)
def get_reports_nearby(
    lat: float = Query(..., ge=-90, le=90),
    lng: float = Query(..., ge=-180, le=180),
    radius_km: float | None = Query(default=None, gt=0, description="Search radius in kilometres"),
    report_status: list[ReportStatus] | None = Query(default=None, alias="status"),
    reports: ReportRepository = Depends(get_report_repository),
) -> NearbyReportsResponse:
    center = Location(lat, lng)
    matches = find_reports_near(reports, center, radius_km, report_status)
    return NearbyReportsResponse(
        center=LocationModel(lat=lat, lng=lng),
        radius_km=radius_km if radius_km is not None else settings.nearby_radius_km,
        items=[NearbyReportModel(report=ReportModel.from_report(r), distance_km=d) for r, d in matches],
    )


@router.get("/statistics", response_model=ReportOverviewResponse)
def get_report_statistics(
    collector_id: str | None = Query(default=None, description="Limit the counts to one collector's reports"),
    reports: ReportRepository = Depends(get_report_repository),
) -> ReportOverviewResponse:
    overview = report_overview(reports, collector_id)
    return ReportOverviewResponse(
        collector_id=collector_id,
        total=overview.total,
        by_status=overview.by_status,
        critical=overview.critical,
        high_urgency=overview.high_urgency,
        waste_types=[WasteTypeCount(waste_type=name, count=count) for name, count in overview.waste_types],
    )


@router.get("/{report_id}", response_model=ReportModel)
def get_report(
    report_id: str,
    reports: ReportRepository = Depends(get_report_repository),
) -> ReportModel:
    report = reports.get(report_id)
    if report is None:
        raise to_http_exception(ReportNotFound(report_id))
    return ReportModel.from_report(report)


@router.post("/{report_id}/cancel", response_model=ReportModel)
def cancel_report(
    report_id: str,
    reports: ReportRepository = Depends(get_report_repository),
) -> ReportModel:
    try:
        report = lifecycle.cancel_report(reports, report_id)
    except Exception as exc:
        raise to_http_exception(exc) from exc
    return ReportModel.from_report(report)


@router.post("/{report_id}/resolve", response_model=ReportModel)
def resolve_report(
    report_id: str,
    reports: ReportRepository = Depends(get_report_repository),
    clock: Clock = Depends(get_clock),
) -> ReportModel:
    try:
        report = lifecycle.resolve_report(reports, report_id, clock=clock)
    except Exception as exc:
        raise to_http_exception(exc) from exc
    return ReportModel.from_report(report)
