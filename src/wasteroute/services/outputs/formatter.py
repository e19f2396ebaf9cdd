"""Serializers for routes and assignment batches."""

from __future__ import annotations

import csv
import io
from dataclasses import asdict
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..assignment.balancer import AssignmentBatch
    from ..routing.models import Route


def route_to_json(route: Route) -> dict:
    start = route.start_location
    return {
        "collector_id": route.collector_id,
        "total_distance_km": route.total_distance_km,
        "total_time_min": route.total_time_min,
        "start_location": {"lat": start.latitude, "lng": start.longitude} if start else None,
        "stops": [
            {
                "sequence": stop.sequence,
                "report_id": stop.report.id,
                "lat": stop.report.location.latitude,
                "lng": stop.report.location.longitude,
                "waste_type": stop.report.waste_type.value,
                "urgency": stop.report.urgency.value,
                "distance_from_prev_km": stop.distance_from_prev_km,
                "service_time_min": stop.service_time_min,
                "cumulative_time_min": stop.cumulative_time_min,
            }
            for stop in route.stops
        ],
    }


def route_to_csv(route: Route) -> str:
    buffer = io.StringIO()
    fieldnames = [
        "collector_id",
        "sequence",
        "report_id",
        "lat",
        "lng",
        "distance_from_prev_km",
        "service_time_min",
        "cumulative_time_min",
    ]
    writer = csv.DictWriter(buffer, fieldnames=fieldnames)
    writer.writeheader()
    for stop in route.stops:
        writer.writerow(
            {
                "collector_id": route.collector_id,
                "sequence": stop.sequence,
                "report_id": stop.report.id,
                "lat": stop.report.location.latitude,
                "lng": stop.report.location.longitude,
                "distance_from_prev_km": round(stop.distance_from_prev_km, 3),
                "service_time_min": stop.service_time_min,
                "cumulative_time_min": stop.cumulative_time_min,
            }
        )
    return buffer.getvalue()


def assignment_batch_to_json(batch: AssignmentBatch) -> dict:
    return {
        "assigned_count": batch.assigned_count,
        "unassigned": batch.unassigned,
        "reason": batch.reason,
        "settings": asdict(batch.options),
        "workloads_before": batch.workloads_before,
        "workloads_after": batch.workloads_after,
        "assignments": [asdict(item) for item in batch.assignments],
    }


def assignment_batch_to_csv(batch: AssignmentBatch) -> str:
    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=["report_id", "collector_id"])
    writer.writeheader()
    for item in batch.assignments:
        writer.writerow(asdict(item))
    return buffer.getvalue()
