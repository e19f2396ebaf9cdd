"""Route and collector statistics schemas."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel

from ..services.routing.models import Route
from ..services.statistics import CollectorStatistics
from .reports import LocationModel, ReportModel


class RouteStopModel(BaseModel):
    sequence: int
    report: ReportModel
    distance_from_prev_km: float
    service_time_min: int
    cumulative_time_min: int


class RouteModel(BaseModel):
    collector_id: str
    total_distance_km: float
    total_time_min: int
    start_location: Optional[LocationModel] = None
    stops: List[RouteStopModel]

    @classmethod
    def from_route(cls, route: Route) -> "RouteModel":
        start = route.start_location
        return cls(
            collector_id=route.collector_id,
            total_distance_km=route.total_distance_km,
            total_time_min=route.total_time_min,
            start_location=LocationModel(lat=start.latitude, lng=start.longitude) if start else None,
            stops=[
                RouteStopModel(
                    sequence=stop.sequence,
                    report=ReportModel.from_report(stop.report),
                    distance_from_prev_km=stop.distance_from_prev_km,
                    service_time_min=stop.service_time_min,
                    cumulative_time_min=stop.cumulative_time_min,
                )
                for stop in route.stops
            ],
        )


class CollectorStatisticsModel(BaseModel):
    total_assigned: int
    pending: int
    in_progress: int
    completed_today: int
    estimated_time_remaining: int

    @classmethod
    def from_stats(cls, stats: CollectorStatistics) -> "CollectorStatisticsModel":
        return cls(
            total_assigned=stats.total_assigned,
            pending=stats.pending,
            in_progress=stats.in_progress,
            completed_today=stats.completed_today,
            estimated_time_remaining=stats.estimated_time_remaining,
        )


class CollectorRouteResponse(BaseModel):
    route: RouteModel
    statistics: CollectorStatisticsModel


class CollectorDashboardResponse(BaseModel):
    collector_id: str
    statistics: CollectorStatisticsModel
    open_reports: List[ReportModel]
