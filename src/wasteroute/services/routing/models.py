"""Routing domain models."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from ...models.domain import Location, Report


@dataclass(slots=True)
class RouteStop:
    report: Report
    sequence: int
    distance_from_prev_km: float
    service_time_min: int
    cumulative_time_min: int


@dataclass(slots=True)
class Route:
    collector_id: str
    stops: List[RouteStop] = field(default_factory=list)
    total_distance_km: float = 0.0
    total_time_min: int = 0
    start_location: Optional[Location] = None

    @property
    def report_ids(self) -> list[str]:
        return [stop.report.id for stop in self.stops]
