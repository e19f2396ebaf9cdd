"""Report request/response schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from ..models.domain import Report, ReportStatus, Urgency, WasteType


class LocationModel(BaseModel):
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)


class ReportCreateRequest(BaseModel):
    location: LocationModel
    waste_type: WasteType = WasteType.OTHER
    urgency: Urgency = Urgency.MEDIUM
    description: Optional[str] = Field(default=None, max_length=500)
    address: Optional[str] = Field(default=None, max_length=200)
    id: Optional[str] = Field(default=None, description="Client-supplied id; generated when omitted.")


class ReportModel(BaseModel):
    id: str
    location: LocationModel
    waste_type: WasteType
    urgency: Urgency
    status: ReportStatus
    assigned_collector: Optional[str] = None
    created_at: datetime
    assigned_at: Optional[datetime] = None
    started_at: Optional[datetime] = None
    collected_at: Optional[datetime] = None
    resolved_at: Optional[datetime] = None
    description: Optional[str] = None
    address: Optional[str] = None
    actual_quantity: Optional[str] = None
    waste_type_confirmed: Optional[WasteType] = None
    collector_notes: Optional[str] = None

    @classmethod
    def from_report(cls, report: Report) -> "ReportModel":
        return cls(
            id=report.id,
            location=LocationModel(lat=report.location.latitude, lng=report.location.longitude),
            waste_type=report.waste_type,
            urgency=report.urgency,
            status=report.status,
            assigned_collector=report.assigned_collector,
            created_at=report.created_at,
            assigned_at=report.assigned_at,
            started_at=report.started_at,
            collected_at=report.collected_at,
            resolved_at=report.resolved_at,
            description=report.description,
            address=report.address,
            actual_quantity=report.actual_quantity,
            waste_type_confirmed=report.waste_type_confirmed,
            collector_notes=report.collector_notes,
        )


class CompletePickupRequest(BaseModel):
    actual_quantity: Optional[str] = Field(default=None, max_length=100)
    waste_type_confirmed: Optional[WasteType] = None
    notes: Optional[str] = Field(default=None, max_length=500)


class NearbyReportModel(BaseModel):
    report: ReportModel
    distance_km: float


class NearbyReportsResponse(BaseModel):
    center: LocationModel
    radius_km: float
    items: List[NearbyReportModel]


class WasteTypeCount(BaseModel):
    waste_type: WasteType
    count: int


class ReportOverviewResponse(BaseModel):
    collector_id: Optional[str] = None
    total: int
    by_status: Dict[str, int]
    critical: int
    high_urgency: int
    waste_types: List[WasteTypeCount]
