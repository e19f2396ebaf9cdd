"""Nearest-neighbour route construction for a collector's open reports."""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from ...models.domain import OPEN_STATUSES, Location, Report
from ...repositories.base import ReportRepository
from ..geospatial import distance_km, travel_time_minutes
from .estimator import estimate_collection_minutes
from .models import Route, RouteStop

logger = logging.getLogger(__name__)


def order_nearest_neighbor(
    collector_id: str,
    reports: Sequence[Report],
    *,
    start_location: Optional[Location] = None,
    speed_kmh: float | None = None,
) -> Route:
    """Greedy visiting order: always step to the closest unvisited report.

    Exact distance ties go to the lowest report id. Without ``start_location``
    the walk starts at the report with the lowest id, which is then the first
    stop at distance zero. Runs in O(n^2), fine for per-collector volumes.
    """

    route = Route(collector_id=collector_id, start_location=start_location)
    if not reports:
        return route

    remaining = sorted(reports, key=lambda report: report.id)
    current = start_location or remaining[0].location
    total_distance = 0.0
    elapsed = 0

    while remaining:
        legs = [(distance_km(current, report.location), report.id, index) for index, report in enumerate(remaining)]
        leg_km, _, index = min(legs)
        report = remaining.pop(index)

        service_time = travel_time_minutes(leg_km, speed_kmh) + estimate_collection_minutes(report)
        total_distance += leg_km
        elapsed += service_time
        route.stops.append(
            RouteStop(
                report=report,
                sequence=len(route.stops) + 1,
                distance_from_prev_km=leg_km,
                service_time_min=service_time,
                cumulative_time_min=elapsed,
            )
        )
        current = report.location

    route.total_distance_km = round(total_distance, 2)
    route.total_time_min = elapsed
    return route


def build_route(
    reports: ReportRepository,
    collector_id: str,
    start_location: Optional[Location] = None,
) -> Route:
    open_reports = [r for r in reports.find_open_by_collector(collector_id) if r.status in OPEN_STATUSES]
    route = order_nearest_neighbor(collector_id, open_reports, start_location=start_location)
    logger.info(
        f"Built route for collector {collector_id}: {len(route.stops)} stops, "
        f"{route.total_distance_km} km, {route.total_time_min} min"
    )
    return route
