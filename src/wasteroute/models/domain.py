"""Domain models for pickup reports and collectors."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional

from ..errors import InvalidCoordinates


class WasteType(str, Enum):
    ORGANIC = "organic"
    PLASTIC = "plastic"
    PAPER = "paper"
    METAL = "metal"
    GLASS = "glass"
    ELECTRONIC = "electronic"
    HAZARDOUS = "hazardous"
    MIXED = "mixed"
    OTHER = "other"


class Urgency(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        """Position in the priority order; larger is more urgent."""
        return _URGENCY_RANK[self]


_URGENCY_RANK = {
    Urgency.LOW: 0,
    Urgency.MEDIUM: 1,
    Urgency.HIGH: 2,
    Urgency.CRITICAL: 3,
}


class ReportStatus(str, Enum):
    PENDING = "pending"
    ASSIGNED = "assigned"
    IN_PROGRESS = "in_progress"
    COLLECTED = "collected"
    RESOLVED = "resolved"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATUSES


OPEN_STATUSES = frozenset({ReportStatus.ASSIGNED, ReportStatus.IN_PROGRESS})
TERMINAL_STATUSES = frozenset({ReportStatus.COLLECTED, ReportStatus.RESOLVED, ReportStatus.CANCELLED})


@dataclass(frozen=True, slots=True)
class Location:
    """A WGS84 coordinate pair in degrees."""

    latitude: float
    longitude: float

    def __post_init__(self) -> None:
        if not (-90.0 <= self.latitude <= 90.0) or not (-180.0 <= self.longitude <= 180.0):
            raise InvalidCoordinates(self.latitude, self.longitude)


@dataclass(slots=True)
class Report:
    """A geotagged waste-pickup request."""

    id: str
    location: Location
    created_at: datetime
    waste_type: WasteType = WasteType.OTHER
    urgency: Urgency = Urgency.MEDIUM
    status: ReportStatus = ReportStatus.PENDING
    assigned_collector: Optional[str] = None
    assigned_at: Optional[datetime] = None
    started_at: Optional[datetime] = None
    collected_at: Optional[datetime] = None
    resolved_at: Optional[datetime] = None
    description: Optional[str] = None
    address: Optional[str] = None
    actual_quantity: Optional[str] = None
    waste_type_confirmed: Optional[WasteType] = None
    collector_notes: Optional[str] = None


@dataclass(slots=True)
class Collector:
    """A field worker who fulfils pickup reports."""

    id: str
    name: Optional[str] = None
    active: bool = True
